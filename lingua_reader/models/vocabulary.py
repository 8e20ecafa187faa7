"""Data models for vocabulary terms."""

from dataclasses import dataclass

UNTRACKED_STATUS = 0
KNOWN_STATUS = 5
LEARNING_STATUSES = (1, 2, 3, 4)


@dataclass(frozen=True)
class VocabularyTerm:
    """A tracked word or phrase with its learning status."""

    term_key: str  # Normalized lowercase lookup key
    display_term: str  # Term as the user saved it
    status: int  # 0 = untracked, 1-4 = learning, 5 = known
    translation: str | None = None
    is_phrase: bool = False  # True iff the term contains whitespace
    term_id: int | None = None  # Backend identifier, None until persisted

    def __post_init__(self):
        if not 0 <= self.status <= KNOWN_STATUS:
            raise ValueError(f"Term status must be between 0 and 5, got {self.status}")

    @property
    def is_known(self) -> bool:
        """Check if the term is marked as known."""
        return self.status == KNOWN_STATUS

    def __str__(self) -> str:
        return f"{self.display_term} [{self.status}]"
