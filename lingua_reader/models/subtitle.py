"""Data models for subtitle timelines."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubtitleLine:
    """One timed line of a transcript."""

    id: int  # Sequence number from the subtitle file
    start_time: float  # Start time in seconds
    end_time: float  # End time in seconds (exclusive)
    text: str  # Text lines joined with a single space

    @property
    def duration(self) -> float:
        """Length of the line in seconds."""
        return self.end_time - self.start_time

    def contains(self, t: float) -> bool:
        """Check if a playback time falls inside this line's interval."""
        return self.start_time <= t < self.end_time

    def __str__(self) -> str:
        return f"#{self.id} [{self.start_time:.3f}-{self.end_time:.3f}] {self.text}"
