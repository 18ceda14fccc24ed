"""Signed session tokens (HS256 JWT, payload ``{userId}``)."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from mandalart.errors import AuthError

TOKEN_ALGORITHM = "HS256"


def issue_token(user_id: str, secret: str, ttl_days: int = 7, now: Optional[datetime] = None) -> str:
    """Sign a token for the user that expires after ttl_days."""
    now = now or datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "iat": now,
        "exp": now + timedelta(days=ttl_days),
    }
    return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)


def decode_token(token: str, secret: str) -> str:
    """Return the user id carried by a token, raising AuthError when invalid or expired."""
    try:
        payload = jwt.decode(token, secret, algorithms=[TOKEN_ALGORITHM])
    except jwt.ExpiredSignatureError as e:
        raise AuthError("Session expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthError(f"Invalid session token: {e}") from e

    user_id = payload.get("userId")
    if not user_id:
        raise AuthError("Session token has no user")
    return str(user_id)
