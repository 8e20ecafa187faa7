"""Configuration-related exceptions."""

from .base import LinguaReaderException


class ConfigurationError(LinguaReaderException):
    """Raised for non-fatal setup problems (no playable units, bad language settings)."""

    pass
