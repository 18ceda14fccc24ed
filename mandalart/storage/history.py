"""History store interface and the local keyed-blob backend."""

from __future__ import annotations

import time
import uuid
from abc import ABC, abstractmethod
from typing import Optional

from mandalart.models import HistoryItem, MandalartData
from mandalart.storage.kv import KeyValueStore

HISTORY_KEY = "mandalart_db_history"


def now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore(ABC):
    """Per-user persistence of generated grids.

    Writes raise PersistenceError on backend failure.
    """

    @abstractmethod
    def list(self, user_id: str) -> list[HistoryItem]:
        """All items owned by the user, newest first."""
        pass

    @abstractmethod
    def get(self, item_id: str) -> Optional[HistoryItem]:
        pass

    @abstractmethod
    def create(self, user_id: str, data: MandalartData) -> HistoryItem:
        """Store a new item, assigning its id and timestamp."""
        pass

    @abstractmethod
    def update(self, item_id: str, data: MandalartData, user_id: Optional[str] = None) -> None:
        """Overwrite an item's data. No-op when the id is unknown (or owned by someone else)."""
        pass

    @abstractmethod
    def delete(self, item_id: str, user_id: Optional[str] = None) -> None:
        """Remove an item. Idempotent; with user_id, only that user's item."""
        pass

    @abstractmethod
    def clear(self, user_id: str) -> int:
        """Remove every item owned by the user, returning how many were removed."""
        pass


class LocalHistoryStore(HistoryStore):
    """All users' history in one list blob, newest entries first."""

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _load(self) -> list[dict]:
        return self.kv.get(HISTORY_KEY, [])

    def _save(self, entries: list[dict]) -> None:
        self.kv.set(HISTORY_KEY, entries)

    def list(self, user_id: str) -> list[HistoryItem]:
        return [
            HistoryItem.from_dict(entry)
            for entry in self._load()
            if entry.get("userId") == user_id
        ]

    def get(self, item_id: str) -> Optional[HistoryItem]:
        for entry in self._load():
            if entry.get("id") == item_id:
                return HistoryItem.from_dict(entry)
        return None

    def create(self, user_id: str, data: MandalartData) -> HistoryItem:
        item = HistoryItem(
            id=str(uuid.uuid4()),
            user_id=user_id,
            timestamp=now_ms(),
            data=data,
        )
        entry = item.to_dict()
        entry["updatedAt"] = item.timestamp
        self._save([entry, *self._load()])
        return item

    def update(self, item_id: str, data: MandalartData, user_id: Optional[str] = None) -> None:
        entries = self._load()
        for entry in entries:
            if _matches(entry, item_id, user_id):
                entry["data"] = data.to_dict()
                entry["updatedAt"] = now_ms()
                self._save(entries)
                return

    def delete(self, item_id: str, user_id: Optional[str] = None) -> None:
        entries = self._load()
        remaining = [entry for entry in entries if not _matches(entry, item_id, user_id)]
        if len(remaining) != len(entries):
            self._save(remaining)

    def clear(self, user_id: str) -> int:
        entries = self._load()
        remaining = [entry for entry in entries if entry.get("userId") != user_id]
        self._save(remaining)
        return len(entries) - len(remaining)


def _matches(entry: dict, item_id: str, user_id: Optional[str]) -> bool:
    if entry.get("id") != item_id:
        return False
    return user_id is None or entry.get("userId") == user_id
