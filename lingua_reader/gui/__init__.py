"""Qt adapters for hosting the playback controller in a PyQt6 application."""

from .media_bridge import QtMediaPlayerAdapter, source_to_url
from .qt_scheduler import QtScheduler, QtTimerHandle

__all__ = ["QtMediaPlayerAdapter", "QtScheduler", "QtTimerHandle", "source_to_url"]
