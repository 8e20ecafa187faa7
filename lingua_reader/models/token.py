"""Data models for annotated text tokens."""

from dataclasses import dataclass
from enum import Enum


class TokenKind(str, Enum):
    """Kind of a lexical unit in the annotated stream."""

    WORD = "word"
    PHRASE = "phrase"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Token:
    """Atomic unit of the annotated text stream."""

    kind: TokenKind
    text: str  # Original text, casing preserved
    term_key: str | None = None  # Lookup key for words and phrases
    status: int = 0

    @property
    def is_lexical(self) -> bool:
        """Check if the token is a word or phrase (clickable unit)."""
        return self.kind != TokenKind.SEPARATOR

    @property
    def is_whitespace(self) -> bool:
        """Check if the token is a whitespace separator."""
        return self.kind == TokenKind.SEPARATOR and self.text.isspace()

    def __repr__(self) -> str:
        return f"Token({self.kind.value}, {self.text!r}, status={self.status})"
