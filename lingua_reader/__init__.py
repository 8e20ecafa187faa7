"""
Lingua Reader - Reading and Listening Core for Language Learners

Parses time-aligned transcripts, annotates text with per-user vocabulary
status, segments it into bookmarkable sentences, and keeps audio playback
progress and listening time durable across sessions.
"""

__version__ = "1.0.0"
__author__ = "Lingua Reader Contributors"
