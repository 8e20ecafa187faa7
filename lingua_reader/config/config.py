"""Configuration classes for Lingua Reader."""

from dataclasses import dataclass, field
from pathlib import Path

from lingua_reader.models.language import LanguageSettings


@dataclass(frozen=True)
class LinguaReaderConfig:
    """Immutable configuration for reading and playback operations.

    All configuration is frozen (immutable) so a running controller never
    observes a settings change halfway through an event.
    """

    # Backend API settings
    api_base_url: str = "http://localhost:5000/api"
    api_token: str | None = None
    request_timeout: float = 30.0

    # Progress persistence settings
    position_flush_interval: float = 15.0  # Seconds between periodic position flushes
    end_epsilon: float = 0.5  # Positions this close to the end are not flushed mid-stream
    progress_load_timeout: float = 5.0  # Give up waiting for saved progress after this

    # Listening analytics settings
    listening_flush_interval: float = 60.0  # Seconds between listening-time flushes
    min_listening_seconds: float = 5.0  # Accruals at or below this are not sent

    # Playback rate settings
    min_playback_rate: float = 0.5
    max_playback_rate: float = 2.0
    playback_rate_step: float = 0.05
    default_playback_rate: float = 1.0

    # Text processing settings
    language: LanguageSettings = field(default_factory=LanguageSettings)

    # Local storage
    preferences_path: Path = field(
        default_factory=lambda: Path.home() / ".lingua_reader" / "preferences.json"
    )
    bookmarks_path: Path = field(
        default_factory=lambda: Path.home() / ".lingua_reader" / "bookmarks.json"
    )

    def __post_init__(self):
        """Convert string paths and plain dicts to their typed forms."""
        if isinstance(self.preferences_path, str):
            object.__setattr__(self, "preferences_path", Path(self.preferences_path))
        if isinstance(self.bookmarks_path, str):
            object.__setattr__(self, "bookmarks_path", Path(self.bookmarks_path))
        if isinstance(self.language, dict):
            object.__setattr__(self, "language", LanguageSettings(**self.language))
        if self.min_playback_rate > self.max_playback_rate:
            raise ValueError("min_playback_rate must not exceed max_playback_rate")

    def clamp_playback_rate(self, rate: float) -> float:
        """Clamp a playback rate into the configured bounds."""
        return max(self.min_playback_rate, min(rate, self.max_playback_rate))
