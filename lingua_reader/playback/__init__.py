"""Playback state machine and controller."""

from . import effects, events
from .controller import PLAYBACK_RATE_KEY, PlaybackProgressController
from .scheduling import (
    DeferredTaskRunner,
    InlineTaskRunner,
    ManualClock,
    ManualScheduler,
    SystemClock,
    ThreadedTaskRunner,
)
from .transitions import transition

__all__ = [
    "DeferredTaskRunner",
    "InlineTaskRunner",
    "ManualClock",
    "ManualScheduler",
    "PLAYBACK_RATE_KEY",
    "PlaybackProgressController",
    "SystemClock",
    "ThreadedTaskRunner",
    "effects",
    "events",
    "transition",
]
