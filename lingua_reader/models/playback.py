"""Data models for playback and progress state."""

from dataclasses import dataclass, field
from enum import Enum


class Lifecycle(str, Enum):
    """Media lifecycle of a playback controller."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SEEKING = "seeking"
    ERROR = "error"


class Intent(str, Enum):
    """The user's desired play/pause state."""

    PLAYING = "playing"
    PAUSED = "paused"


@dataclass(frozen=True)
class MediaUnit:
    """A single playable item (an audio lesson, or one track of an audiobook)."""

    unit_id: int | None  # Backend track id, None for single-unit resources
    source: str  # URL or local path handed to the media engine
    title: str = ""


@dataclass(frozen=True)
class SavedProgress:
    """A persisted playback position, tagged with its write sequence."""

    unit_id: int | None = None
    position_seconds: float | None = None
    sequence: int = 0

    @property
    def has_position(self) -> bool:
        """Check if a usable position was saved."""
        return self.position_seconds is not None


@dataclass(frozen=True)
class ListeningAccrual:
    """Listening time accumulated since the last confirmed analytics flush."""

    accumulated_ms: float = 0.0

    def add(self, delta_ms: float) -> "ListeningAccrual":
        return ListeningAccrual(self.accumulated_ms + max(0.0, delta_ms))

    def subtract(self, flushed_ms: float) -> "ListeningAccrual":
        return ListeningAccrual(max(0.0, self.accumulated_ms - flushed_ms))

    @property
    def seconds(self) -> int:
        """Whole seconds accumulated (rounded)."""
        return int(round(self.accumulated_ms / 1000.0))


@dataclass(frozen=True)
class PlaybackState:
    """Complete state of one media resource's playback, owned by the controller.

    Replaced wholesale on every event; consumers only ever read it.
    """

    resource_id: str | None = None
    language_id: int | None = None
    units: tuple[MediaUnit, ...] = ()
    unit_index: int = 0
    position_seconds: float = 0.0
    duration: float = 0.0
    intent: Intent = Intent.PAUSED
    lifecycle: Lifecycle = Lifecycle.IDLE
    playing: bool = False  # Media engine is actually producing audio
    dirty: bool = False
    source_assigned: bool = False  # A unit source has been handed to the engine
    media_loaded: bool = False  # Metadata for the current unit has arrived
    progress_resolved: bool = False  # Saved progress answered, failed or timed out
    pending_seek: float | None = None  # One-shot initial seek
    load_token: int = 0
    playback_rate: float = 1.0
    write_sequence: int = 0  # Last sequence tag issued for a progress write
    acked_sequence: int = 0  # Highest sequence tag confirmed by the store
    accrual: ListeningAccrual = field(default_factory=ListeningAccrual)
    playing_since: float | None = None  # Clock time (ms) Ready-Playing began
    listening_in_flight_ms: float = 0.0  # Accrual covered by an unacknowledged flush
    resume_cache: dict[str, tuple[int, float]] = field(default_factory=dict)
    loaded_resources: frozenset[str] = frozenset()
    error: str | None = None

    @property
    def current_unit(self) -> MediaUnit | None:
        """The unit currently assigned to the media engine."""
        if 0 <= self.unit_index < len(self.units):
            return self.units[self.unit_index]
        return None

    @property
    def is_ready_playing(self) -> bool:
        """Check if the state is Ready-Playing (timers run only here)."""
        return self.lifecycle == Lifecycle.READY and self.playing

    @property
    def listening_in_flight(self) -> bool:
        return self.listening_in_flight_ms > 0

    @property
    def is_last_unit(self) -> bool:
        return self.unit_index >= len(self.units) - 1

    def __str__(self) -> str:
        return (
            f"PlaybackState({self.resource_id}, unit={self.unit_index}, "
            f"pos={self.position_seconds:.2f}, {self.lifecycle.value}/{self.intent.value}, "
            f"playing={self.playing}, dirty={self.dirty})"
        )
