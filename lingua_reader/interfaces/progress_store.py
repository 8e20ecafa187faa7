"""Protocols for playback progress persistence and listening analytics."""

from typing import Protocol

from lingua_reader.models import SavedProgress


class ProgressStore(Protocol):
    """Interface for saving and restoring a resource's playback position."""

    def get_progress(self, resource_id: str) -> SavedProgress | None:
        """Return the last saved progress, or None when nothing was saved.

        Raises:
            PersistenceError: If the backend cannot be read
        """
        ...

    def set_progress(self, resource_id: str, progress: SavedProgress) -> None:
        """Persist progress. ``progress.sequence`` orders writes per resource.

        Raises:
            PersistenceError: If the backend cannot be written
        """
        ...


class ListeningAnalytics(Protocol):
    """Interface for recording listening time."""

    def log_listening(self, language_id: int, duration_seconds: int) -> None:
        """Record listening time for a language.

        Raises:
            PersistenceError: If the backend rejects or cannot receive the entry
        """
        ...
