"""User repository."""

import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mandalart.db.connection import get_db
from mandalart.errors import PersistenceError


class UserRepository:
    """Repository for user records."""

    def __init__(self, db_path: Path):
        self.db_path = str(db_path)

    def create(
        self,
        email: str,
        name: str,
        password_hash: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> dict:
        """Create a user and return the stored record."""
        user_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO users (id, email, name, password_hash, avatar, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (user_id, email, name, password_hash, avatar, now)
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            raise PersistenceError(f"User already exists: {email}", operation="create_user") from e
        return self.get(user_id)

    def get(self, user_id: str) -> Optional[dict]:
        """Get a user by ID."""
        with get_db(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
            return dict(row) if row else None

    def find_by_email(self, email: str) -> Optional[dict]:
        """Find a user by email."""
        with get_db(self.db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()
            return dict(row) if row else None
