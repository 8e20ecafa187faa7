"""Per-language text processing settings."""

from dataclasses import dataclass, field

PARSER_SPACE_DELIMITED = "spacedel"
PARSER_MECAB = "mecab"


@dataclass(frozen=True)
class LanguageSettings:
    """How text in one language is split into words and sentences."""

    name: str = ""
    code: str = ""
    parser_type: str = PARSER_SPACE_DELIMITED
    word_characters: str | None = None  # Regex character class body, None = any letter
    word_extra_characters: str = "'’"  # Always treated as word characters
    split_sentences: str = ".!?"  # Each character is a sentence-terminal mark
    sentence_split_exceptions: tuple[str, ...] = field(default_factory=tuple)
    character_substitutions: str = ""  # "from=to|from=to", applied to lookup keys only

    def __post_init__(self):
        if isinstance(self.sentence_split_exceptions, list):
            object.__setattr__(
                self, "sentence_split_exceptions", tuple(self.sentence_split_exceptions)
            )

    @property
    def terminal_marks(self) -> frozenset[str]:
        """Sentence-terminal characters."""
        return frozenset(ch for ch in self.split_sentences if not ch.isspace())
