"""Base exception classes for Lingua Reader."""


class LinguaReaderException(Exception):
    """Base exception for all Lingua Reader errors.

    All custom exceptions in the lingua_reader package should inherit
    from this base class for consistent error handling.
    """

    pass
