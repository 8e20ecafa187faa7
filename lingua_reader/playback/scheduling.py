"""Clocks, schedulers and task runners for driving the playback controller.

``SystemClock`` and ``ThreadedTaskRunner`` are for real use. The manual and
deferred variants let tests advance time and finish background work in any
order, without sleeping.
"""

import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any

from lingua_reader.interfaces import Scheduler

logger = logging.getLogger(__name__)

DoneCallback = Callable[[Any, BaseException | None], None]


class SystemClock:
    """Monotonic clock in milliseconds."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start_ms: float = 0.0):
        self._now_ms = start_ms

    def now_ms(self) -> float:
        return self._now_ms

    def advance(self, seconds: float) -> None:
        self._now_ms += seconds * 1000.0

    def set_ms(self, value: float) -> None:
        self._now_ms = value


class _ManualTimer:
    def __init__(self, due_ms: float, interval_ms: float | None, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.interval_ms = interval_ms
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic scheduler. Time moves only through :meth:`advance`.

    Shares its notion of time with a :class:`ManualClock`, so listening
    accrual and timer ticks agree exactly.
    """

    def __init__(self, clock: ManualClock | None = None):
        self.clock = clock or ManualClock()
        self._timers: list[_ManualTimer] = []
        self._soon: deque[Callable[[], None]] = deque()
        self._lock = threading.Lock()

    @property
    def active_timers(self) -> int:
        """Number of timers that are still armed."""
        return sum(1 for timer in self._timers if not timer.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ManualTimer:
        timer = _ManualTimer(self.clock.now_ms() + delay * 1000.0, None, callback)
        self._timers.append(timer)
        return timer

    def call_every(self, interval: float, callback: Callable[[], None]) -> _ManualTimer:
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        timer = _ManualTimer(self.clock.now_ms() + interval * 1000.0, interval * 1000.0, callback)
        self._timers.append(timer)
        return timer

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        with self._lock:
            self._soon.append(callback)

    def run_pending(self) -> None:
        """Run callbacks queued with :meth:`call_soon_threadsafe`."""
        while True:
            with self._lock:
                if not self._soon:
                    return
                callback = self._soon.popleft()
            callback()

    def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in order."""
        target = self.clock.now_ms() + seconds * 1000.0
        self.run_pending()
        while True:
            due = [t for t in self._timers if not t.cancelled and t.due_ms <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_ms)
            self.clock.set_ms(max(self.clock.now_ms(), timer.due_ms))
            if timer.interval_ms is None:
                timer.cancelled = True
            else:
                timer.due_ms += timer.interval_ms
            timer.callback()
            self.run_pending()
        self.clock.set_ms(target)
        self._timers = [t for t in self._timers if not t.cancelled]


class InlineTaskRunner:
    """Runs work immediately on the calling thread."""

    def submit(self, work: Callable[[], Any], on_done: DoneCallback) -> None:
        try:
            result = work()
        except Exception as e:
            on_done(None, e)
        else:
            on_done(result, None)


class _PendingTask:
    def __init__(self, work: Callable[[], Any], on_done: DoneCallback):
        self.work = work
        self.on_done = on_done


class DeferredTaskRunner:
    """Holds submitted work until a test completes it, in any order."""

    def __init__(self):
        self.pending: list[_PendingTask] = []

    def __len__(self) -> int:
        return len(self.pending)

    def submit(self, work: Callable[[], Any], on_done: DoneCallback) -> None:
        self.pending.append(_PendingTask(work, on_done))

    def complete(self, index: int = 0) -> Any:
        """Run one pending task and report its outcome."""
        task = self.pending.pop(index)
        try:
            result = task.work()
        except Exception as e:
            task.on_done(None, e)
            return None
        task.on_done(result, None)
        return result

    def fail(self, error: BaseException, index: int = 0) -> None:
        """Report a pending task as failed without running it."""
        task = self.pending.pop(index)
        task.on_done(None, error)

    def complete_all(self) -> None:
        while self.pending:
            self.complete(0)


class ThreadedTaskRunner:
    """Runs blocking calls on a worker thread; reports back on the loop thread.

    A single worker keeps network writes in submission order.
    """

    def __init__(self, scheduler: Scheduler, max_workers: int = 1):
        self.scheduler = scheduler
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="lingua-reader-io"
        )

    def submit(self, work: Callable[[], Any], on_done: DoneCallback) -> None:
        future = self._executor.submit(work)
        future.add_done_callback(
            lambda f: self.scheduler.call_soon_threadsafe(lambda: self._deliver(f, on_done))
        )

    @staticmethod
    def _deliver(future: Future, on_done: DoneCallback) -> None:
        error = future.exception()
        on_done(None if error is not None else future.result(), error)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the worker; pending work still runs when ``wait`` is True."""
        logger.debug("Shutting down background task runner")
        self._executor.shutdown(wait=wait)
