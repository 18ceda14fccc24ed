"""Storage backends for history and sessions."""

from mandalart.storage.history import HistoryStore, LocalHistoryStore
from mandalart.storage.kv import JsonFileStore, KeyValueStore, MemoryStore

__all__ = ["HistoryStore", "LocalHistoryStore", "KeyValueStore", "MemoryStore", "JsonFileStore"]
