"""Data models for Lingua Reader."""

from .language import PARSER_MECAB, PARSER_SPACE_DELIMITED, LanguageSettings
from .playback import (
    Intent,
    Lifecycle,
    ListeningAccrual,
    MediaUnit,
    PlaybackState,
    SavedProgress,
)
from .sentence import SegmentationResult, Sentence
from .subtitle import SubtitleLine
from .token import Token, TokenKind
from .vocabulary import KNOWN_STATUS, UNTRACKED_STATUS, VocabularyTerm

__all__ = [
    "LanguageSettings",
    "PARSER_MECAB",
    "PARSER_SPACE_DELIMITED",
    "Intent",
    "Lifecycle",
    "ListeningAccrual",
    "MediaUnit",
    "PlaybackState",
    "SavedProgress",
    "Sentence",
    "SegmentationResult",
    "SubtitleLine",
    "Token",
    "TokenKind",
    "VocabularyTerm",
    "KNOWN_STATUS",
    "UNTRACKED_STATUS",
]
