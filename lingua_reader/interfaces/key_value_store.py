"""Protocol for small persistent key-value stores."""

from typing import Any, Protocol


class KeyValueStore(Protocol):
    """Process-wide key-value store with an explicit init/read/write contract.

    Used for user preferences (playback rate) and bookmarks.
    """

    def init(self) -> None:
        """Prepare the store (load from disk, open a connection, ...)."""
        ...

    def read(self, key: str, default: Any = None) -> Any:
        """Return the value under ``key``, or ``default`` when absent."""
        ...

    def write(self, key: str, value: Any) -> None:
        """Store a JSON-compatible value.

        Raises:
            PersistenceError: If the value cannot be persisted
        """
        ...
