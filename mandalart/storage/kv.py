"""Key-value storage used by the local backend.

``MemoryStore`` is the in-process fake; ``JsonFileStore`` keeps one JSON file
per key in a directory, the same role browser local storage plays.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from mandalart.errors import PersistenceError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """get/set/delete over JSON-serializable values."""

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key. Missing keys are ignored."""
        pass


class MemoryStore(KeyValueStore):
    """Dictionary-backed store. Values are round-tripped through JSON."""

    def __init__(self, initial: Optional[dict] = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key under a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        if not path.exists():
            return default
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            # Corrupt blob: drop it rather than failing every later read
            logger.warning(f"Discarding unreadable {path}: {e}")
            path.unlink(missing_ok=True)
            return default
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}", operation="get")

    def set(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp is not None:
                Path(tmp).unlink(missing_ok=True)
            raise PersistenceError(f"Failed to write {path}: {e}", operation="set")

    def delete(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete {key}: {e}", operation="delete")
