"""Media playback exceptions."""

from .base import LinguaReaderException


class PlaybackError(LinguaReaderException):
    """Raised when the media engine rejects a play request."""

    pass
