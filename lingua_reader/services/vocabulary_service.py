"""Service owning the current vocabulary snapshot for a language."""

import logging
import threading
from collections.abc import Iterable

from lingua_reader.exceptions import ConfigurationError, PersistenceError
from lingua_reader.interfaces import VocabularyStore
from lingua_reader.models import KNOWN_STATUS, VocabularyTerm
from lingua_reader.services.vocabulary_snapshot import VocabularySnapshot, build_term
from lingua_reader.utils import normalize_term, parse_substitutions

logger = logging.getLogger(__name__)


class VocabularyService:
    """Load and update vocabulary, swapping snapshots atomically.

    Readers call :attr:`snapshot` once per render pass and keep the returned
    object; updates build a new snapshot and replace the reference under a
    lock, so no pass ever sees a half-applied change.
    """

    def __init__(
        self,
        store: VocabularyStore,
        language_id: int,
        character_substitutions: str = "",
    ):
        """Initialize the service.

        Args:
            store: Vocabulary backend
            language_id: Language whose vocabulary is managed
            character_substitutions: ``"from=to|..."`` applied to term keys
        """
        self.store = store
        self.language_id = language_id
        self.substitutions = parse_substitutions(character_substitutions)
        self._lock = threading.Lock()
        self._snapshot = VocabularySnapshot()

    @property
    def snapshot(self) -> VocabularySnapshot:
        """Current vocabulary snapshot."""
        return self._snapshot

    def load(self) -> VocabularySnapshot:
        """Fetch all terms from the store and replace the snapshot.

        A failed fetch is logged and leaves the previous snapshot in place.

        Returns:
            The snapshot in effect after loading
        """
        try:
            terms = self.store.fetch_all_terms(self.language_id)
        except PersistenceError as e:
            logger.warning(f"Could not load vocabulary for language {self.language_id}: {e}")
            return self._snapshot

        # Re-key with this language's substitutions; the backend key may differ
        rekeyed = [
            build_term(
                t.display_term,
                status=t.status,
                translation=t.translation,
                term_id=t.term_id,
                substitutions=self.substitutions,
            )
            for t in terms
            if t.display_term.strip()
        ]
        new_snapshot = VocabularySnapshot(rekeyed)
        with self._lock:
            self._snapshot = new_snapshot
        if not len(new_snapshot):
            logger.info(f"Vocabulary for language {self.language_id} is empty")
        else:
            logger.info(f"Loaded {len(new_snapshot)} terms for language {self.language_id}")
        return new_snapshot

    def set_status(
        self,
        term: str,
        status: int,
        translation: str | None = None,
        container_id: int | None = None,
    ) -> VocabularyTerm:
        """Create or update a term and patch the snapshot.

        Args:
            term: Word or phrase as displayed
            status: New learning status (0-5)
            translation: Optional translation; keeps the existing one when None
            container_id: Text the term was selected in (needed to create)

        Returns:
            The persisted term

        Raises:
            PersistenceError: If the store rejects the change
            ConfigurationError: If the term is new and no container was given
        """
        key = normalize_term(term, self.substitutions)
        existing = self._snapshot.get(key)

        if existing is not None and existing.term_id is not None:
            saved = self.store.update_term(
                existing.term_id,
                status,
                translation if translation is not None else existing.translation,
            )
        else:
            if container_id is None:
                raise ConfigurationError(f"Cannot create {term!r} without a containing text")
            saved = self.store.create_term(container_id, term, status, translation)

        saved = build_term(
            saved.display_term or term,
            status=saved.status,
            translation=saved.translation,
            term_id=saved.term_id,
            substitutions=self.substitutions,
        )
        with self._lock:
            self._snapshot = self._snapshot.with_term(saved)
        logger.debug(f"Term {saved.term_key!r} now has status {saved.status}")
        return saved

    def mark_all_known(self, words: Iterable[str]) -> dict:
        """Batch-add words as known (status 5) and refresh the snapshot.

        The snapshot is patched right away, then reloaded so the new terms
        carry their backend ids. If the reload fails the patched snapshot stays.

        Args:
            words: Untracked words, e.g. from ``find_untracked_words``

        Returns:
            Backend summary, or an empty dict when there was nothing to add
        """
        unique: dict[str, str] = {}
        for word in words:
            key = normalize_term(word, self.substitutions)
            if key and key not in unique and self._snapshot.get(key) is None:
                unique[key] = word.strip()
        if not unique:
            return {}

        summary = self.store.batch_add_terms(
            self.language_id,
            [{"term": word, "translation": "", "status": KNOWN_STATUS} for word in unique.values()],
        )
        known = [
            build_term(word, status=KNOWN_STATUS, substitutions=self.substitutions)
            for word in unique.values()
        ]
        with self._lock:
            self._snapshot = self._snapshot.with_terms(known)
        logger.info(f"Marked {len(known)} words as known")
        self.load()
        return summary
