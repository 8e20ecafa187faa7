"""Subtitle parsing exceptions."""

from .base import LinguaReaderException


class SubtitleParseError(LinguaReaderException):
    """Raised when a subtitle file cannot be read or decoded at all.

    Individual malformed entries never raise; they are dropped.
    """

    pass
