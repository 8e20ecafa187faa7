"""Protocols for time, timers and background work."""

from collections.abc import Callable
from typing import Any, Protocol


class Clock(Protocol):
    """Monotonic wall clock."""

    def now_ms(self) -> float:
        """Current time in milliseconds."""
        ...


class TimerHandle(Protocol):
    """Handle returned by the scheduler, used to cancel a timer."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Timer facility of the single-threaded event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay`` seconds."""
        ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval`` seconds until cancelled."""
        ...

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on the loop thread; safe to call from any thread."""
        ...


class TaskRunner(Protocol):
    """Runs blocking work off the event loop and reports back on it."""

    def submit(
        self,
        work: Callable[[], Any],
        on_done: Callable[[Any, BaseException | None], None],
    ) -> None:
        """Run ``work``; later call ``on_done(result, error)`` on the loop thread."""
        ...
