"""Progress and analytics stores: HTTP adapters, ordering guard, in-memory."""

import logging
import threading

from lingua_reader.models import SavedProgress
from lingua_reader.services.api_client import LinguaReadApiClient

logger = logging.getLogger(__name__)


def _numeric_id(resource_id: str) -> int:
    try:
        return int(resource_id)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Backend resource ids are numeric, got {resource_id!r}") from e


class AudiobookProgressStore:
    """Progress store for multi-track audiobooks (resource id = book id)."""

    def __init__(self, client: LinguaReadApiClient):
        self.client = client

    def get_progress(self, resource_id: str) -> SavedProgress | None:
        return self.client.get_audiobook_progress(_numeric_id(resource_id))

    def set_progress(self, resource_id: str, progress: SavedProgress) -> None:
        self.client.update_audiobook_progress(
            _numeric_id(resource_id), progress.unit_id, progress.position_seconds
        )


class AudioLessonProgressStore:
    """Progress store for single-file audio lessons (resource id = text id)."""

    def __init__(self, client: LinguaReadApiClient):
        self.client = client

    def get_progress(self, resource_id: str) -> SavedProgress | None:
        return self.client.get_audio_lesson_progress(_numeric_id(resource_id))

    def set_progress(self, resource_id: str, progress: SavedProgress) -> None:
        self.client.update_audio_lesson_progress(
            _numeric_id(resource_id), progress.position_seconds
        )


class ApiListeningAnalytics:
    """Listening analytics sent to the backend activity log."""

    def __init__(self, client: LinguaReadApiClient):
        self.client = client

    def log_listening(self, language_id: int, duration_seconds: int) -> None:
        self.client.log_listening(language_id, duration_seconds)


class SequencedProgressStore:
    """Decorator that never lets an older write follow a newer one.

    Writes carry ``SavedProgress.sequence``; a write whose tag is lower than
    one already written for the same resource is dropped. Untagged writes
    (sequence 0) always pass through.
    """

    def __init__(self, inner):
        """Initialize the decorator.

        Args:
            inner: Any object implementing the ProgressStore protocol
        """
        self.inner = inner
        self._lock = threading.Lock()
        self._written: dict[str, int] = {}

    def get_progress(self, resource_id: str) -> SavedProgress | None:
        return self.inner.get_progress(resource_id)

    def set_progress(self, resource_id: str, progress: SavedProgress) -> None:
        with self._lock:
            latest = self._written.get(resource_id, 0)
            if progress.sequence and progress.sequence < latest:
                logger.debug(
                    f"Dropping superseded write #{progress.sequence} for {resource_id} "
                    f"(already wrote #{latest})"
                )
                return
            self.inner.set_progress(resource_id, progress)
            self._written[resource_id] = max(latest, progress.sequence)


class InMemoryProgressStore:
    """Progress store kept in a dict. Useful for previews and tests.

    Honors sequence tags the way a sequence-aware backend would: a write
    older than the stored one is ignored.
    """

    def __init__(self, initial: dict[str, SavedProgress] | None = None):
        self._data: dict[str, SavedProgress] = dict(initial or {})
        self.writes: list[tuple[str, SavedProgress]] = []

    def get_progress(self, resource_id: str) -> SavedProgress | None:
        return self._data.get(resource_id)

    def set_progress(self, resource_id: str, progress: SavedProgress) -> None:
        self.writes.append((resource_id, progress))
        current = self._data.get(resource_id)
        if current is not None and progress.sequence and progress.sequence < current.sequence:
            return
        self._data[resource_id] = progress


class InMemoryListeningAnalytics:
    """Analytics sink that records entries in a list."""

    def __init__(self):
        self.entries: list[tuple[int, int]] = []

    def log_listening(self, language_id: int, duration_seconds: int) -> None:
        self.entries.append((language_id, duration_seconds))

    @property
    def total_seconds(self) -> int:
        return sum(seconds for _, seconds in self.entries)
