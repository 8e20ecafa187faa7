"""Tokenize text into words, phrases and separators annotated with vocabulary status."""

import logging
import re
import unicodedata
from collections.abc import Callable, Iterable

import fugashi

from lingua_reader.exceptions import ConfigurationError
from lingua_reader.models import (
    PARSER_MECAB,
    UNTRACKED_STATUS,
    LanguageSettings,
    Token,
    TokenKind,
    VocabularyTerm,
)
from lingua_reader.services.vocabulary_snapshot import VocabularySnapshot
from lingua_reader.utils import normalize_term, parse_substitutions

logger = logging.getLogger(__name__)


def build_word_predicate(settings: LanguageSettings) -> Callable[[str], bool]:
    """Build the "is this a word character" test for a language.

    Args:
        settings: Language settings; ``word_characters`` is a regex
            character-class body such as ``a-zA-Z``, or None for any letter

    Returns:
        Predicate over single characters

    Raises:
        ConfigurationError: If ``word_characters`` is not a valid character class
    """
    extra = settings.word_extra_characters

    if settings.word_characters:
        try:
            pattern = re.compile(f"[{settings.word_characters}{re.escape(extra)}]")
        except re.error as e:
            raise ConfigurationError(
                f"Invalid word characters {settings.word_characters!r}: {e}"
            ) from e
        return lambda ch: pattern.fullmatch(ch) is not None

    def is_word_char(ch: str) -> bool:
        # Combining marks count so scripts like Devanagari stay in one word
        return ch.isalpha() or ch in extra or unicodedata.category(ch).startswith("M")

    return is_word_char


class LexicalAnnotator:
    """Split text into a lossless, status-annotated token stream (pure service).

    At each position the longest vocabulary phrase wins; otherwise a maximal
    run of word characters becomes a word, and anything else is emitted as a
    one-character separator.
    """

    def __init__(self, settings: LanguageSettings | None = None):
        """Initialize the annotator.

        Args:
            settings: Language settings, defaults to space-delimited letters
        """
        self.settings = settings or LanguageSettings()
        self.substitutions = parse_substitutions(self.settings.character_substitutions)
        self._is_word_char = build_word_predicate(self.settings)
        self._tagger = None

    def term_key(self, text: str) -> str:
        """Lookup key for a piece of text in this language."""
        return normalize_term(text, self.substitutions)

    def tokenize(
        self,
        text: str,
        vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    ) -> list[Token]:
        """Tokenize text against a vocabulary.

        Args:
            text: Raw text to annotate
            vocabulary: Snapshot or list of terms for this render pass

        Returns:
            Tokens whose texts concatenate back to ``text`` exactly
        """
        snapshot = VocabularySnapshot.coerce(vocabulary)
        tokens: list[Token] = []
        length = len(text)
        cursor = 0

        while cursor < length:
            phrase = self._match_phrase(text, cursor, snapshot)
            if phrase is not None:
                end = cursor + len(phrase.display_term)
                tokens.append(
                    Token(
                        kind=TokenKind.PHRASE,
                        text=text[cursor:end],
                        term_key=phrase.term_key,
                        status=phrase.status,
                    )
                )
                cursor = end
                continue

            if self._is_word_char(text[cursor]):
                end = cursor + 1
                while end < length and self._is_word_char(text[end]):
                    end += 1
                for word in self._split_run(text[cursor:end]):
                    key = self.term_key(word)
                    tokens.append(
                        Token(
                            kind=TokenKind.WORD,
                            text=word,
                            term_key=key,
                            status=snapshot.word_status(key),
                        )
                    )
                cursor = end
                continue

            tokens.append(Token(kind=TokenKind.SEPARATOR, text=text[cursor]))
            cursor += 1

        return tokens

    def _match_phrase(
        self, text: str, cursor: int, snapshot: VocabularySnapshot
    ) -> VocabularyTerm | None:
        """Longest phrase whose text is a case-insensitive prefix at ``cursor``."""
        for lowered, term in snapshot.phrase_candidates(text[cursor].lower()[:1]):
            end = cursor + len(term.display_term)
            candidate = text[cursor:end]
            if len(candidate) != len(term.display_term) or candidate.lower() != lowered:
                continue
            return term
        return None

    def _split_run(self, run: str) -> list[str]:
        """Split a word run into words; only MeCab languages split further."""
        if self.settings.parser_type != PARSER_MECAB:
            return [run]

        surfaces = [word.surface for word in self._get_tagger()(run)]
        if "".join(surfaces) != run:
            logger.debug(f"MeCab surfaces do not cover {run!r}, keeping it whole")
            return [run]
        return [surface for surface in surfaces if surface]

    def _get_tagger(self):
        if self._tagger is None:
            self._tagger = fugashi.Tagger()
        return self._tagger


def tokenize(
    text: str,
    vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    settings: LanguageSettings | None = None,
) -> list[Token]:
    """Tokenize text with a one-off annotator. See :meth:`LexicalAnnotator.tokenize`."""
    return LexicalAnnotator(settings).tokenize(text, vocabulary)


def find_untracked_words(tokens: Iterable[Token]) -> list[str]:
    """Unique untracked words in first-seen order, with first-seen casing.

    Args:
        tokens: Annotated token stream

    Returns:
        Word texts whose status is 0
    """
    seen: set[str] = set()
    words = []
    for token in tokens:
        if token.kind != TokenKind.WORD or token.status != UNTRACKED_STATUS:
            continue
        if token.term_key in seen:
            continue
        seen.add(token.term_key)
        words.append(token.text)
    return words
