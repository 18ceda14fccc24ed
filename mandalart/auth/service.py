"""Login, session lookup and logout."""

import logging
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from mandalart.auth.passwords import hash_password, verify_password
from mandalart.auth.tokens import decode_token, issue_token
from mandalart.db.users import UserRepository
from mandalart.errors import AuthError
from mandalart.messages import DEFAULT_LOCALE, get_message
from mandalart.models import User
from mandalart.storage.kv import KeyValueStore

logger = logging.getLogger(__name__)

TOKEN_KEY = "mandalart_token"
USERS_KEY = "mandalart_users"
SESSION_KEY = "mandalart_current_user"

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def _check_email(email: str) -> str:
    email = (email or "").strip().lower()
    if "@" not in email or email.startswith("@"):
        raise AuthError(f"Invalid email: {email!r}")
    return email


def _default_name(email: str) -> str:
    return email.split("@")[0]


class BaseAuthService(ABC):
    """Session handling shared by both backends."""

    locale: str = DEFAULT_LOCALE

    @abstractmethod
    def login(self, email: str, password: str) -> User:
        """Log in, registering the user on first login."""
        pass

    @abstractmethod
    def current_user(self) -> Optional[User]:
        """The logged-in user, or None."""
        pass

    @abstractmethod
    def logout(self) -> None:
        pass

    @abstractmethod
    def find_user(self, email: str) -> Optional[User]:
        """Look up a registered user without logging in."""
        pass

    def require_user(self) -> User:
        user = self.current_user()
        if user is None:
            raise AuthError(get_message("not_authenticated", self.locale))
        return user


class AuthService(BaseAuthService):
    """Password login against the users table; the token lives in the session store."""

    def __init__(
        self,
        db_path: Path,
        session: KeyValueStore,
        secret: str,
        ttl_days: int = 7,
        locale: str = DEFAULT_LOCALE,
    ):
        if not secret:
            raise AuthError("JWT_SECRET is not set")
        self.users = UserRepository(db_path)
        self.session = session
        self.secret = secret
        self.ttl_days = ttl_days
        self.locale = locale

    def login(self, email: str, password: str) -> User:
        email = _check_email(email)
        if not password:
            raise AuthError(get_message("invalid_password", self.locale))

        record = self.users.find_by_email(email)
        if record is None:
            record = self.users.create(
                email=email,
                name=_default_name(email),
                password_hash=hash_password(password),
                avatar=AVATAR_URL.format(seed=email),
            )
            logger.info(f"Registered new user {record['id']}")
        elif not record.get("password_hash") or not verify_password(password, record["password_hash"]):
            raise AuthError(get_message("invalid_password", self.locale))

        self.session.set(TOKEN_KEY, issue_token(record["id"], self.secret, self.ttl_days))
        return User.from_dict(record)

    def current_user(self) -> Optional[User]:
        token = self.session.get(TOKEN_KEY)
        if not token:
            return None
        try:
            user_id = decode_token(token, self.secret)
        except AuthError as e:
            logger.info(f"Ignoring session token: {e}")
            return None
        record = self.users.get(user_id)
        return User.from_dict(record) if record else None

    def logout(self) -> None:
        self.session.delete(TOKEN_KEY)

    def find_user(self, email: str) -> Optional[User]:
        record = self.users.find_by_email(_check_email(email))
        return User.from_dict(record) if record else None


class LocalAuthService(BaseAuthService):
    """Local-only accounts: no password check, users kept in a keyed blob."""

    def __init__(self, store: KeyValueStore, locale: str = DEFAULT_LOCALE):
        self.store = store
        self.locale = locale

    def login(self, email: str, password: str = "") -> User:
        email = _check_email(email)
        users = self.store.get(USERS_KEY, [])
        record = next((u for u in users if u.get("email") == email), None)
        if record is None:
            record = User(
                id=uuid.uuid4().hex[:9],
                name=_default_name(email),
                email=email,
                avatar=AVATAR_URL.format(seed=email),
            ).to_dict()
            users.append(record)
            self.store.set(USERS_KEY, users)
        self.store.set(SESSION_KEY, record)
        return User.from_dict(record)

    def current_user(self) -> Optional[User]:
        record = self.store.get(SESSION_KEY)
        return User.from_dict(record) if record else None

    def logout(self) -> None:
        self.store.delete(SESSION_KEY)

    def find_user(self, email: str) -> Optional[User]:
        email = _check_email(email)
        record = next((u for u in self.store.get(USERS_KEY, []) if u.get("email") == email), None)
        return User.from_dict(record) if record else None
