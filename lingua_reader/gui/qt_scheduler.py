"""Qt event loop implementation of the scheduler protocol."""

from collections.abc import Callable

from PyQt6.QtCore import QObject, Qt, QTimer, pyqtSignal


class QtTimerHandle:
    """Cancellable wrapper around a QTimer owned by a QtScheduler."""

    def __init__(self, scheduler: "QtScheduler", timer: QTimer):
        self._scheduler = scheduler
        self._timer = timer

    def cancel(self) -> None:
        self._timer.stop()
        self._scheduler._release(self._timer)

    @property
    def active(self) -> bool:
        return self._timer.isActive()


class QtScheduler(QObject):
    """Schedules callbacks on the Qt event loop of the thread that owns it.

    ``call_soon_threadsafe`` goes through a queued signal, so worker threads
    can hand results back to the GUI thread.
    """

    _posted = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._timers: set[QTimer] = set()
        self._posted.connect(self._run_posted, Qt.ConnectionType.QueuedConnection)

    def call_later(self, delay: float, callback: Callable[[], None]) -> QtTimerHandle:
        timer = self._make_timer(delay, single_shot=True)

        def fire():
            self._release(timer)
            callback()

        timer.timeout.connect(fire)
        timer.start()
        return QtTimerHandle(self, timer)

    def call_every(self, interval: float, callback: Callable[[], None]) -> QtTimerHandle:
        if interval <= 0:
            raise ValueError("Timer interval must be positive")
        timer = self._make_timer(interval, single_shot=False)
        timer.timeout.connect(callback)
        timer.start()
        return QtTimerHandle(self, timer)

    def call_soon_threadsafe(self, callback: Callable[[], None]) -> None:
        self._posted.emit(callback)

    def _make_timer(self, seconds: float, single_shot: bool) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, int(seconds * 1000)))
        self._timers.add(timer)
        return timer

    def _release(self, timer: QTimer) -> None:
        if timer in self._timers:
            self._timers.discard(timer)
            timer.deleteLater()

    def _run_posted(self, callback: Callable[[], None]) -> None:
        callback()
