"""Orchestrators combining services into reading and listening views."""

from .reading_document import Paragraph, ReadingDocument
from .transcript_view import TranscriptView

__all__ = ["Paragraph", "ReadingDocument", "TranscriptView"]
