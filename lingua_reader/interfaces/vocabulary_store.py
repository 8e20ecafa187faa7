"""Protocol for the vocabulary backend."""

from typing import Protocol

from lingua_reader.models import VocabularyTerm


class VocabularyStore(Protocol):
    """Interface for reading and updating a user's vocabulary.

    All methods may raise PersistenceError.
    """

    def fetch_all_terms(self, language_id: int) -> list[VocabularyTerm]:
        """Return every tracked term for a language."""
        ...

    def create_term(
        self, container_id: int, term: str, status: int, translation: str | None
    ) -> VocabularyTerm:
        """Create a term from within a text (``container_id`` is the text id)."""
        ...

    def update_term(self, term_id: int, status: int, translation: str | None) -> VocabularyTerm:
        """Change a term's status and translation."""
        ...

    def batch_add_terms(self, language_id: int, terms: list[dict]) -> dict:
        """Add many terms at once.

        Args:
            language_id: Target language
            terms: Items of ``{"term", "translation", "status"?}``

        Returns:
            Backend summary of the operation
        """
        ...
