"""Per-resource sentence bookmarks."""

import logging

from lingua_reader.exceptions import PersistenceError
from lingua_reader.interfaces import KeyValueStore

logger = logging.getLogger(__name__)


class BookmarkStore:
    """Set of bookmarked sentence indices per resource.

    Membership lives in memory and is written through to a key-value
    backend under ``bookmarks_<resource_id>``. A failed write is logged and
    the in-memory set stays authoritative for the session.
    """

    KEY_PREFIX = "bookmarks_"

    def __init__(self, backend: KeyValueStore):
        """Initialize the bookmark store.

        Args:
            backend: Key-value store used for persistence
        """
        self._backend = backend
        self._cache: dict[str, set[int]] = {}

    def get(self, resource_id: str | int) -> list[int]:
        """Bookmarked sentence indices for a resource, ascending."""
        return sorted(self._load(str(resource_id)))

    def is_bookmarked(self, resource_id: str | int, sentence_index: int) -> bool:
        """Check if a sentence is bookmarked."""
        return sentence_index in self._load(str(resource_id))

    def toggle(self, resource_id: str | int, sentence_index: int) -> bool:
        """Flip a sentence's bookmark.

        Args:
            resource_id: Text or book identifier
            sentence_index: Global sentence index within the resource

        Returns:
            True if the sentence is bookmarked after the call
        """
        key = str(resource_id)
        marks = self._load(key)
        if sentence_index in marks:
            marks.discard(sentence_index)
            bookmarked = False
        else:
            marks.add(sentence_index)
            bookmarked = True
        self._persist(key, marks)
        return bookmarked

    def clear(self, resource_id: str | int) -> None:
        """Remove all bookmarks of a resource."""
        key = str(resource_id)
        self._cache[key] = set()
        self._persist(key, self._cache[key])

    def _load(self, key: str) -> set[int]:
        if key not in self._cache:
            try:
                stored = self._backend.read(self.KEY_PREFIX + key, [])
            except PersistenceError as e:
                logger.warning(f"Could not load bookmarks for {key}: {e}")
                stored = []
            self._cache[key] = {int(i) for i in stored if isinstance(i, int) or str(i).isdigit()}
        return self._cache[key]

    def _persist(self, key: str, marks: set[int]) -> None:
        try:
            self._backend.write(self.KEY_PREFIX + key, sorted(marks))
        except PersistenceError as e:
            logger.warning(f"Could not save bookmarks for {key}: {e}")
