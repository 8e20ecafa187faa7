"""Small key-value stores for preferences and bookmarks."""

import json
import logging
import threading
from pathlib import Path
from typing import Any

from lingua_reader.exceptions import PersistenceError

logger = logging.getLogger(__name__)


class JsonKeyValueStore:
    """Key-value store persisted as one JSON object on disk.

    The whole file is rewritten on every write. Reads are served from an
    in-memory copy loaded by :meth:`init` (or lazily on first access).
    """

    def __init__(self, file_path: Path):
        """Initialize the store.

        Args:
            file_path: Path to the JSON file (created on first write)
        """
        self._file_path = file_path
        self._data: dict[str, Any] | None = None
        self._lock = threading.Lock()

    def init(self) -> None:
        """Load the file into memory. A missing or corrupt file starts empty."""
        with self._lock:
            self._data = self._load()

    def read(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        with self._lock:
            if self._data is None:
                self._data = self._load()
            return self._data.get(key, default)

    def write(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key`` and persist the file.

        Raises:
            PersistenceError: If the file cannot be written
        """
        with self._lock:
            if self._data is None:
                self._data = self._load()
            self._data[key] = value
            self._save(self._data)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present and persist the file."""
        with self._lock:
            if self._data is None:
                self._data = self._load()
            if self._data.pop(key, None) is not None:
                self._save(self._data)

    def _load(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            data = json.loads(self._file_path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return data
            logger.warning(f"Ignoring non-object JSON in {self._file_path}")
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not read {self._file_path}, starting empty: {e}")
        return {}

    def _save(self, data: dict[str, Any]) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(data, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except (OSError, TypeError) as e:
            raise PersistenceError(f"Failed to write {self._file_path}: {e}") from e


class InMemoryKeyValueStore:
    """Key-value store that lives only for the process (testing and previews)."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def init(self) -> None:
        pass

    def read(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def write(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)
