"""Playback progress controller: runs the state machine against real collaborators."""

import itertools
import logging
from collections import deque
from collections.abc import Callable, Sequence
from dataclasses import replace

from lingua_reader.config import LinguaReaderConfig, create_default_config
from lingua_reader.exceptions import PersistenceError, PlaybackError
from lingua_reader.interfaces import (
    Clock,
    KeyValueStore,
    ListeningAnalytics,
    MediaPlayer,
    ProgressStore,
    Scheduler,
    TaskRunner,
    TimerHandle,
)
from lingua_reader.models import MediaUnit, PlaybackState
from lingua_reader.playback import effects as fx
from lingua_reader.playback import events as ev
from lingua_reader.playback.scheduling import InlineTaskRunner, SystemClock
from lingua_reader.playback.transitions import transition

logger = logging.getLogger(__name__)

PLAYBACK_RATE_KEY = "audioPlaybackRate"

# Store-facing write tags, increasing across every controller in the process
_store_sequence = itertools.count(1)

StateListener = Callable[[PlaybackState], None]


class PlaybackProgressController:
    """Owns one media resource's playback state and keeps it persisted.

    Every input (user action, media engine signal, timer tick, finished
    background call) goes through :meth:`dispatch`. Events raised while an
    event is being processed are queued and handled in order, so the state
    machine never re-enters itself.

    All methods must be called on the scheduler's thread.
    """

    def __init__(
        self,
        player: MediaPlayer,
        progress_store: ProgressStore,
        analytics: ListeningAnalytics,
        preferences: KeyValueStore,
        scheduler: Scheduler,
        task_runner: TaskRunner | None = None,
        clock: Clock | None = None,
        config: LinguaReaderConfig | None = None,
    ):
        """Initialize the controller.

        Args:
            player: Media engine to drive
            progress_store: Where positions are saved and restored
            analytics: Where listening time is reported
            preferences: Process-wide preference store (holds the playback rate)
            scheduler: Timer facility of the event loop
            task_runner: Runs store calls off the loop (default: inline)
            clock: Wall clock for listening accrual (default: monotonic)
            config: Intervals, thresholds and rate bounds
        """
        self.player = player
        self.progress_store = progress_store
        self.analytics = analytics
        self.preferences = preferences
        self.scheduler = scheduler
        self.task_runner = task_runner or InlineTaskRunner()
        self.clock = clock or SystemClock()
        self.config = config or create_default_config()

        self._queue: deque[ev.Event] = deque()
        self._dispatching = False
        self._listeners: list[StateListener] = []
        self._position_timer: TimerHandle | None = None
        self._listening_timer: TimerHandle | None = None
        self._load_timeout: TimerHandle | None = None

        self.preferences.init()
        self._state = PlaybackState(playback_rate=self._restore_playback_rate())

    @property
    def state(self) -> PlaybackState:
        """Current state (immutable)."""
        return self._state

    def add_listener(self, listener: StateListener) -> None:
        """Call ``listener`` with the new state after every state change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    # --- Commands ---

    def load(
        self,
        resource_id: str | int,
        units: Sequence[MediaUnit],
        language_id: int | None = None,
        autoplay: bool = False,
    ) -> None:
        """Start playing a new resource (the previous one is flushed first)."""
        self.dispatch(ev.LoadResource(str(resource_id), tuple(units), language_id, autoplay))

    def play(self) -> None:
        self.dispatch(ev.Play())

    def pause(self) -> None:
        self.dispatch(ev.Pause())

    def toggle_play_pause(self) -> None:
        self.dispatch(ev.TogglePlayPause())

    def seek(self, position_seconds: float) -> None:
        self.dispatch(ev.Seek(position_seconds))

    def seek_by(self, offset_seconds: float) -> None:
        self.dispatch(ev.SeekBy(offset_seconds))

    def select_unit(self, index: int, autoplay: bool | None = None) -> None:
        self.dispatch(ev.SelectUnit(index, autoplay))

    def set_playback_rate(self, rate: float) -> None:
        self.dispatch(ev.SetPlaybackRate(rate))

    def adjust_playback_rate(self, steps: int) -> None:
        """Change the rate by whole steps (positive is faster)."""
        self.dispatch(ev.AdjustPlaybackRate(steps))

    def teardown(self) -> None:
        """Final flush, then release timers. Safe to call more than once."""
        self.dispatch(ev.Teardown())

    # --- Event loop ---

    def dispatch(self, event: ev.Event) -> None:
        """Process an event, or queue it if one is already being processed."""
        self._queue.append(event)
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._queue:
                self._process(self._queue.popleft())
        finally:
            self._dispatching = False

    def _process(self, event: ev.Event) -> None:
        previous = self._state
        self._state, effects = transition(previous, event, self.clock.now_ms(), self.config)
        if self._state is not previous:
            logger.debug(f"{type(event).__name__}: {self._state}")

        for effect in effects:
            self._execute(effect)

        if self._state is not previous:
            for listener in list(self._listeners):
                listener(self._state)

    def _execute(self, effect: fx.Effect) -> None:
        handler = self._EFFECT_HANDLERS[type(effect)]
        handler(self, effect)

    # --- Effects ---

    def _set_source(self, effect: fx.SetSource) -> None:
        self.player.set_source(effect.source)

    def _start_playback(self, effect: fx.StartPlayback) -> None:
        try:
            self.player.play()
        except PlaybackError as e:
            logger.error(f"Playback failed: {e}")
            self.dispatch(ev.PlaybackFailed(str(e)))

    def _pause_playback(self, effect: fx.PausePlayback) -> None:
        self.player.pause()

    def _seek_media(self, effect: fx.SeekMedia) -> None:
        self.player.seek(effect.position)

    def _apply_rate(self, effect: fx.ApplyPlaybackRate) -> None:
        self.player.set_playback_rate(effect.rate)

    def _persist_rate(self, effect: fx.PersistPlaybackRate) -> None:
        try:
            self.preferences.write(PLAYBACK_RATE_KEY, effect.rate)
        except PersistenceError as e:
            logger.warning(f"Could not save playback rate: {e}")

    def _fetch_progress(self, effect: fx.FetchProgress) -> None:
        def on_done(result, error):
            if error is not None:
                self._raise_unexpected(error)
                logger.warning(f"Could not load progress for {effect.resource_id}: {error}")
                self.dispatch(ev.ProgressLoadFailed(effect.token, str(error)))
            else:
                self.dispatch(ev.ProgressLoaded(effect.token, result))

        self.task_runner.submit(lambda: self.progress_store.get_progress(effect.resource_id), on_done)

    def _schedule_load_timeout(self, effect: fx.ScheduleLoadTimeout) -> None:
        self._cancel_load_timeout(None)
        self._load_timeout = self.scheduler.call_later(
            effect.delay, lambda: self.dispatch(ev.ProgressLoadTimedOut(effect.token))
        )

    def _cancel_load_timeout(self, effect: fx.CancelLoadTimeout | None) -> None:
        if self._load_timeout is not None:
            self._load_timeout.cancel()
            self._load_timeout = None

    def _start_timers(self, effect: fx.StartTimers) -> None:
        self._stop_timers(None)
        self._position_timer = self.scheduler.call_every(
            self.config.position_flush_interval, lambda: self.dispatch(ev.PositionFlushTick())
        )
        self._listening_timer = self.scheduler.call_every(
            self.config.listening_flush_interval, lambda: self.dispatch(ev.ListeningFlushTick())
        )

    def _stop_timers(self, effect: fx.StopTimers | None) -> None:
        for timer in (self._position_timer, self._listening_timer):
            if timer is not None:
                timer.cancel()
        self._position_timer = None
        self._listening_timer = None

    def _write_progress(self, effect: fx.WriteProgress) -> None:
        # The state machine numbers writes per session; the store needs tags
        # that a later session can never fall behind.
        sequence = effect.progress.sequence
        progress = replace(effect.progress, sequence=next(_store_sequence))

        def on_done(result, error):
            if error is not None:
                self._raise_unexpected(error)
                kind = "final" if effect.final else "periodic"
                logger.warning(f"Failed {kind} progress write #{sequence} for {effect.resource_id}: {error}")
                self.dispatch(ev.ProgressWriteFailed(sequence, str(error)))
            else:
                self.dispatch(ev.ProgressWriteAcked(sequence))

        self.task_runner.submit(
            lambda: self.progress_store.set_progress(effect.resource_id, progress), on_done
        )

    def _log_listening(self, effect: fx.LogListening) -> None:
        def on_done(result, error):
            if error is not None:
                self._raise_unexpected(error)
                logger.warning(f"Failed to log {effect.seconds}s of listening: {error}")
                if not effect.final:
                    self.dispatch(ev.ListeningFlushFailed(effect.token, str(error)))
            elif not effect.final:
                self.dispatch(ev.ListeningFlushAcked(effect.token, effect.accrued_ms))

        self.task_runner.submit(
            lambda: self.analytics.log_listening(effect.language_id, effect.seconds), on_done
        )

    @staticmethod
    def _raise_unexpected(error: BaseException) -> None:
        """Persistence failures are expected; anything else is a bug."""
        if not isinstance(error, PersistenceError):
            raise error

    _EFFECT_HANDLERS = {
        fx.SetSource: _set_source,
        fx.StartPlayback: _start_playback,
        fx.PausePlayback: _pause_playback,
        fx.SeekMedia: _seek_media,
        fx.ApplyPlaybackRate: _apply_rate,
        fx.PersistPlaybackRate: _persist_rate,
        fx.FetchProgress: _fetch_progress,
        fx.ScheduleLoadTimeout: _schedule_load_timeout,
        fx.CancelLoadTimeout: _cancel_load_timeout,
        fx.StartTimers: _start_timers,
        fx.StopTimers: _stop_timers,
        fx.WriteProgress: _write_progress,
        fx.LogListening: _log_listening,
    }

    # --- Preferences ---

    def _restore_playback_rate(self) -> float:
        default = self.config.default_playback_rate
        try:
            stored = self.preferences.read(PLAYBACK_RATE_KEY, default)
            rate = float(stored)
        except PersistenceError as e:
            logger.warning(f"Could not read playback rate, using {default}: {e}")
            return default
        except (TypeError, ValueError):
            logger.warning(f"Ignoring invalid stored playback rate {stored!r}")
            return default
        return round(self.config.clamp_playback_rate(rate), 2)
