"""Interface protocols for Lingua Reader."""

from .key_value_store import KeyValueStore
from .media_player import MediaPlayer
from .progress_store import ListeningAnalytics, ProgressStore
from .scheduling import Clock, Scheduler, TaskRunner, TimerHandle
from .vocabulary_store import VocabularyStore

__all__ = [
    "Clock",
    "KeyValueStore",
    "ListeningAnalytics",
    "MediaPlayer",
    "ProgressStore",
    "Scheduler",
    "TaskRunner",
    "TimerHandle",
    "VocabularyStore",
]
