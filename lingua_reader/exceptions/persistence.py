"""Persistence and backend communication exceptions."""

from .base import LinguaReaderException


class PersistenceError(LinguaReaderException):
    """Raised when a progress, bookmark, vocabulary or analytics read/write fails."""

    pass


class ApiConnectionError(PersistenceError):
    """Raised when the backend API cannot be reached."""

    pass
