"""Mandalart repository - relational history backend."""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from mandalart.db.connection import get_db
from mandalart.errors import PersistenceError
from mandalart.models import HistoryItem, MandalartData, SubGoal
from mandalart.storage.history import HistoryStore


def _to_ms(timestamp: str) -> int:
    dt = datetime.fromisoformat(timestamp)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


def _row_to_item(row: sqlite3.Row) -> HistoryItem:
    sub_goals = row["sub_goals"]
    if isinstance(sub_goals, str):
        sub_goals = json.loads(sub_goals)
    return HistoryItem(
        id=row["id"],
        user_id=row["user_id"],
        timestamp=_to_ms(row["created_at"]),
        data=MandalartData(
            main_goal=row["main_goal"],
            sub_goals=[SubGoal.from_dict(sg) for sg in sub_goals],
        ),
    )


def _sub_goals_json(data: MandalartData) -> str:
    return json.dumps([sg.to_dict() for sg in data.sub_goals], ensure_ascii=False)


class MandalartRepository(HistoryStore):
    """One row per history item in the ``mandalarts`` table."""

    def __init__(self, db_path: Path):
        self.db_path = str(db_path)

    def list(self, user_id: str) -> list[HistoryItem]:
        try:
            with get_db(self.db_path) as conn:
                rows = conn.execute(
                    """
                    SELECT * FROM mandalarts
                    WHERE user_id = ?
                    ORDER BY created_at DESC, rowid DESC
                    """,
                    (user_id,)
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to list history: {e}", operation="list") from e
        return [_row_to_item(row) for row in rows]

    def get(self, item_id: str) -> Optional[HistoryItem]:
        try:
            with get_db(self.db_path) as conn:
                row = conn.execute("SELECT * FROM mandalarts WHERE id = ?", (item_id,)).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read {item_id}: {e}", operation="get") from e
        return _row_to_item(row) if row else None

    def create(self, user_id: str, data: MandalartData) -> HistoryItem:
        item_id = str(uuid.uuid4())
        now = datetime.now(timezone.utc).isoformat()
        try:
            with get_db(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO mandalarts (id, user_id, main_goal, sub_goals, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (item_id, user_id, data.main_goal, _sub_goals_json(data), now, now)
                )
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to save mandalart: {e}", operation="create") from e
        return HistoryItem(id=item_id, user_id=user_id, timestamp=_to_ms(now), data=data)

    def update(self, item_id: str, data: MandalartData, user_id: Optional[str] = None) -> None:
        query = "UPDATE mandalarts SET main_goal = ?, sub_goals = ?, updated_at = ? WHERE id = ?"
        params = [data.main_goal, _sub_goals_json(data), datetime.now(timezone.utc).isoformat(), item_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        try:
            with get_db(self.db_path) as conn:
                conn.execute(query, params)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to update {item_id}: {e}", operation="update") from e

    def delete(self, item_id: str, user_id: Optional[str] = None) -> None:
        query = "DELETE FROM mandalarts WHERE id = ?"
        params = [item_id]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        try:
            with get_db(self.db_path) as conn:
                conn.execute(query, params)
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to delete {item_id}: {e}", operation="delete") from e

    def clear(self, user_id: str) -> int:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.execute("DELETE FROM mandalarts WHERE user_id = ?", (user_id,))
                conn.commit()
                return cursor.rowcount
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to clear history: {e}", operation="clear") from e
