"""Side effects requested by the playback state machine.

The transition function only describes these; the controller carries
them out against the media engine, stores, scheduler and task runner.
"""

from dataclasses import dataclass

from lingua_reader.models import SavedProgress


class Effect:
    """Base class for playback effects."""


@dataclass(frozen=True)
class SetSource(Effect):
    source: str


@dataclass(frozen=True)
class StartPlayback(Effect):
    pass


@dataclass(frozen=True)
class PausePlayback(Effect):
    pass


@dataclass(frozen=True)
class SeekMedia(Effect):
    position: float


@dataclass(frozen=True)
class ApplyPlaybackRate(Effect):
    rate: float


@dataclass(frozen=True)
class PersistPlaybackRate(Effect):
    rate: float


@dataclass(frozen=True)
class FetchProgress(Effect):
    resource_id: str
    token: int


@dataclass(frozen=True)
class ScheduleLoadTimeout(Effect):
    token: int
    delay: float


@dataclass(frozen=True)
class CancelLoadTimeout(Effect):
    pass


@dataclass(frozen=True)
class StartTimers(Effect):
    pass


@dataclass(frozen=True)
class StopTimers(Effect):
    pass


@dataclass(frozen=True)
class WriteProgress(Effect):
    resource_id: str
    progress: SavedProgress
    final: bool = False


@dataclass(frozen=True)
class LogListening(Effect):
    language_id: int
    seconds: int
    accrued_ms: float
    token: int
    final: bool = False
