"""Protocol for the media engine driven by the playback controller."""

from typing import Protocol


class MediaPlayer(Protocol):
    """Commands the controller issues to the media engine.

    The engine reports back through controller events (metadata loaded,
    time updates, play, pause, ended, errors).
    """

    def set_source(self, source: str) -> None:
        """Assign a new media source and start loading it."""
        ...

    def play(self) -> None:
        """Request playback.

        Raises:
            PlaybackError: If the engine rejects the request
        """
        ...

    def pause(self) -> None:
        """Pause playback."""
        ...

    def seek(self, position_seconds: float) -> None:
        """Move the playhead."""
        ...

    def set_playback_rate(self, rate: float) -> None:
        """Change playback speed."""
        ...
