"""Events consumed by the playback state machine.

Events come from three places: the user (play, seek, rate changes), the
media engine (metadata, time updates, ended, errors) and the controller's
own timers and background work (flush ticks, acknowledgements).
"""

from dataclasses import dataclass

from lingua_reader.models import MediaUnit, SavedProgress


class Event:
    """Base class for playback events."""


# --- Resource loading ---


@dataclass(frozen=True)
class LoadResource(Event):
    resource_id: str
    units: tuple[MediaUnit, ...]
    language_id: int | None = None
    autoplay: bool = False


@dataclass(frozen=True)
class ProgressLoaded(Event):
    token: int
    progress: SavedProgress | None


@dataclass(frozen=True)
class ProgressLoadFailed(Event):
    token: int
    error: str


@dataclass(frozen=True)
class ProgressLoadTimedOut(Event):
    token: int


@dataclass(frozen=True)
class SelectUnit(Event):
    index: int
    autoplay: bool | None = None  # None keeps the current intent


@dataclass(frozen=True)
class Teardown(Event):
    pass


# --- User intent ---


@dataclass(frozen=True)
class Play(Event):
    pass


@dataclass(frozen=True)
class Pause(Event):
    pass


@dataclass(frozen=True)
class TogglePlayPause(Event):
    pass


@dataclass(frozen=True)
class Seek(Event):
    position: float


@dataclass(frozen=True)
class SeekBy(Event):
    offset: float


@dataclass(frozen=True)
class SetPlaybackRate(Event):
    rate: float


@dataclass(frozen=True)
class AdjustPlaybackRate(Event):
    steps: int


# --- Media engine ---


@dataclass(frozen=True)
class MetadataLoaded(Event):
    duration: float


@dataclass(frozen=True)
class TimeUpdate(Event):
    position: float


@dataclass(frozen=True)
class SeekCompleted(Event):
    position: float | None = None


@dataclass(frozen=True)
class MediaPlaying(Event):
    pass


@dataclass(frozen=True)
class MediaPaused(Event):
    pass


@dataclass(frozen=True)
class MediaEnded(Event):
    pass


@dataclass(frozen=True)
class PlaybackFailed(Event):
    """The engine rejected a play request."""

    error: str


@dataclass(frozen=True)
class MediaError(Event):
    """The engine could not load or decode the current unit."""

    error: str


# --- Timers and acknowledgements ---


@dataclass(frozen=True)
class PositionFlushTick(Event):
    pass


@dataclass(frozen=True)
class ListeningFlushTick(Event):
    pass


@dataclass(frozen=True)
class ProgressWriteAcked(Event):
    sequence: int


@dataclass(frozen=True)
class ProgressWriteFailed(Event):
    sequence: int
    error: str


@dataclass(frozen=True)
class ListeningFlushAcked(Event):
    token: int
    flushed_ms: float


@dataclass(frozen=True)
class ListeningFlushFailed(Event):
    token: int
    error: str
