"""Custom exceptions for Lingua Reader."""

from .base import LinguaReaderException
from .configuration import ConfigurationError
from .persistence import ApiConnectionError, PersistenceError
from .playback import PlaybackError
from .subtitle import SubtitleParseError

__all__ = [
    "LinguaReaderException",
    "SubtitleParseError",
    "PersistenceError",
    "ApiConnectionError",
    "PlaybackError",
    "ConfigurationError",
]
