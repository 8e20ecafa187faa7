"""Pure state machine for playback and progress persistence.

``transition(state, event, now_ms, config)`` returns the next state and the
effects to carry out. It performs no I/O, so every timing and ordering rule
can be tested by feeding events directly.
"""

from collections.abc import Callable
from dataclasses import replace

from lingua_reader.config import LinguaReaderConfig
from lingua_reader.models import (
    Intent,
    Lifecycle,
    ListeningAccrual,
    PlaybackState,
    SavedProgress,
)
from lingua_reader.playback import effects as fx
from lingua_reader.playback import events as ev

Step = tuple[PlaybackState, list[fx.Effect]]


def transition(
    state: PlaybackState,
    event: ev.Event,
    now_ms: float,
    config: LinguaReaderConfig,
) -> Step:
    """Advance the playback state machine by one event.

    Args:
        state: Current state
        event: Event to process
        now_ms: Current clock time in milliseconds
        config: Flush intervals, thresholds and rate bounds

    Returns:
        Tuple of (new state, effects in execution order)
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        return state, []

    # Bring listening accrual up to date before the handler looks at it
    current = _accrue(state, now_ms)
    new_state, effects = handler(current, event, config)

    # Timers exist exactly while Ready-Playing
    if state.is_ready_playing and not new_state.is_ready_playing:
        new_state = replace(new_state, playing_since=None)
        effects = [fx.StopTimers(), *effects]
    elif not state.is_ready_playing and new_state.is_ready_playing:
        new_state = replace(new_state, playing_since=now_ms)
        effects = [*effects, fx.StartTimers()]
    return new_state, effects


# --- Helpers ---


def _accrue(state: PlaybackState, now_ms: float) -> PlaybackState:
    if state.playing_since is None or not state.is_ready_playing:
        return state
    return replace(
        state,
        accrual=state.accrual.add(now_ms - state.playing_since),
        playing_since=now_ms,
    )


def _clamp_position(state: PlaybackState, position: float) -> float:
    position = max(0.0, position)
    if state.duration > 0:
        position = min(position, state.duration)
    return position


def _remember(state: PlaybackState, unit_index: int, position: float) -> PlaybackState:
    """Record the local resume point for the current resource."""
    if state.resource_id is None:
        return state
    cache = dict(state.resume_cache)
    cache[state.resource_id] = (unit_index, position)
    return replace(state, resume_cache=cache)


def _write(
    state: PlaybackState, unit_index: int, position: float, final: bool
) -> Step:
    """Issue a sequence-tagged progress write."""
    sequence = state.write_sequence + 1
    unit = state.units[unit_index]
    progress = SavedProgress(unit_id=unit.unit_id, position_seconds=position, sequence=sequence)
    return (
        replace(state, write_sequence=sequence),
        [fx.WriteProgress(state.resource_id, progress, final=final)],
    )


def _flush_position(state: PlaybackState, config: LinguaReaderConfig, final: bool) -> Step:
    """Write the current position unless the suppression rules forbid it.

    Nothing is written before media data has loaded. A non-final flush is
    also skipped at position zero and within ``end_epsilon`` of the end.
    """
    if state.resource_id is None or state.current_unit is None or not state.media_loaded:
        return state, []
    position = state.position_seconds
    if not final:
        if position <= 0:
            return state, []
        if state.duration > 0 and state.duration - position < config.end_epsilon:
            return state, []
    return _write(state, state.unit_index, position, final)


def _flush_listening(state: PlaybackState, config: LinguaReaderConfig, final: bool) -> Step:
    """Send accrued listening time once it exceeds the minimum duration.

    Only one non-final flush is in flight at a time. A final flush sends
    whatever the in-flight flush does not already cover.
    """
    if state.language_id is None:
        return state, []
    if state.listening_in_flight and not final:
        return state, []

    pending_ms = state.accrual.accumulated_ms - state.listening_in_flight_ms
    if pending_ms <= config.min_listening_seconds * 1000:
        return state, []
    seconds = ListeningAccrual(pending_ms).seconds

    effect = fx.LogListening(
        language_id=state.language_id,
        seconds=seconds,
        accrued_ms=pending_ms,
        token=state.load_token,
        final=final,
    )
    if final:
        return state, [effect]
    return replace(state, listening_in_flight_ms=pending_ms), [effect]


def _assign_unit(
    state: PlaybackState, index: int, position: float, intent: Intent
) -> Step:
    """Hand a unit to the engine and wait for its metadata."""
    unit = state.units[index]
    new_state = replace(
        state,
        unit_index=index,
        position_seconds=0.0,
        duration=0.0,
        intent=intent,
        lifecycle=Lifecycle.LOADING,
        playing=False,
        source_assigned=True,
        media_loaded=False,
        pending_seek=position if position > 0 else None,
        error=None,
    )
    return new_state, [fx.SetSource(unit.source)]


def _maybe_ready(state: PlaybackState) -> Step:
    """Leave Loading once both saved progress and metadata are in."""
    if state.lifecycle != Lifecycle.LOADING:
        return state, []
    if not (state.media_loaded and state.progress_resolved):
        return state, []

    effects: list[fx.Effect] = [fx.ApplyPlaybackRate(state.playback_rate)]
    position = 0.0
    seek = state.pending_seek
    if seek is not None and 0 < seek < state.duration:
        position = seek
        effects.append(fx.SeekMedia(seek))

    state = replace(state, lifecycle=Lifecycle.READY, position_seconds=position, pending_seek=None)
    if state.intent == Intent.PLAYING:
        effects.append(fx.StartPlayback())
    return state, effects


def _resume_point(state: PlaybackState, progress: SavedProgress | None) -> tuple[int, float]:
    """Unit index and position to start from, given saved progress."""
    if progress is not None and progress.has_position:
        if progress.unit_id is None:
            return 0, progress.position_seconds
        for index, unit in enumerate(state.units):
            if unit.unit_id == progress.unit_id:
                return index, progress.position_seconds
        return 0, 0.0

    cached = state.resume_cache.get(state.resource_id)
    if cached is not None and 0 <= cached[0] < len(state.units):
        return cached
    return 0, 0.0


def _reset(state: PlaybackState) -> PlaybackState:
    """Idle state that keeps what outlives a single resource."""
    return PlaybackState(
        playback_rate=state.playback_rate,
        load_token=state.load_token,
        write_sequence=state.write_sequence,
        acked_sequence=state.acked_sequence,
        resume_cache=state.resume_cache,
        loaded_resources=state.loaded_resources,
    )


# --- Resource lifecycle ---


def _on_teardown(state: PlaybackState, event: ev.Teardown, config: LinguaReaderConfig) -> Step:
    if state.resource_id is None:
        return _reset(state), []
    effects: list[fx.Effect] = [fx.CancelLoadTimeout()]
    if state.playing:
        effects.append(fx.PausePlayback())
    state, writes = _flush_position(state, config, final=True)
    state, logs = _flush_listening(state, config, final=True)
    return _reset(state), effects + writes + logs


def _on_load_resource(
    state: PlaybackState, event: ev.LoadResource, config: LinguaReaderConfig
) -> Step:
    state, effects = _on_teardown(state, ev.Teardown(), config)

    token = state.load_token + 1
    intent = Intent.PLAYING if event.autoplay else Intent.PAUSED
    units = tuple(event.units)
    if not units:
        return (
            replace(
                state,
                resource_id=event.resource_id,
                language_id=event.language_id,
                load_token=token,
                error="No playable units",
            ),
            effects,
        )

    first_load = event.resource_id not in state.loaded_resources
    state = replace(
        state,
        resource_id=event.resource_id,
        language_id=event.language_id,
        units=units,
        load_token=token,
        intent=intent,
        lifecycle=Lifecycle.LOADING,
        loaded_resources=state.loaded_resources | {event.resource_id},
    )

    if not first_load:
        # Later loads resume from the local cache, never from the server
        index, position = _resume_point(state, None)
        state = replace(state, progress_resolved=True)
        state, assign = _assign_unit(state, index, position, intent)
        return state, effects + assign

    effects += [
        fx.FetchProgress(event.resource_id, token),
        fx.ScheduleLoadTimeout(token, config.progress_load_timeout),
    ]
    if len(units) == 1:
        # Single unit: load media while progress is still on its way
        state, assign = _assign_unit(state, 0, 0.0, intent)
        effects += assign
    return state, effects


def _resolve_progress(
    state: PlaybackState, token: int, progress: SavedProgress | None
) -> Step:
    if token != state.load_token or state.progress_resolved or state.resource_id is None:
        return state, []

    index, position = _resume_point(state, progress)
    state = replace(state, progress_resolved=True)
    effects: list[fx.Effect] = [fx.CancelLoadTimeout()]

    if not state.source_assigned:
        state, assign = _assign_unit(state, index, position, state.intent)
        return state, effects + assign

    if index == state.unit_index and position > 0:
        state = replace(state, pending_seek=position)
    state, ready = _maybe_ready(state)
    return state, effects + ready


def _on_progress_loaded(
    state: PlaybackState, event: ev.ProgressLoaded, config: LinguaReaderConfig
) -> Step:
    return _resolve_progress(state, event.token, event.progress)


def _on_progress_unavailable(
    state: PlaybackState,
    event: ev.ProgressLoadFailed | ev.ProgressLoadTimedOut,
    config: LinguaReaderConfig,
) -> Step:
    return _resolve_progress(state, event.token, None)


def _on_select_unit(state: PlaybackState, event: ev.SelectUnit, config: LinguaReaderConfig) -> Step:
    if not 0 <= event.index < len(state.units):
        return state, []
    if event.index == state.unit_index and state.source_assigned:
        return state, []

    state, effects = _flush_position(state, config, final=False)
    if state.playing:
        effects.append(fx.PausePlayback())

    cached = state.resume_cache.get(state.resource_id)
    position = cached[1] if cached is not None and cached[0] == event.index else 0.0
    intent = state.intent
    if event.autoplay is not None:
        intent = Intent.PLAYING if event.autoplay else Intent.PAUSED

    state = replace(state, progress_resolved=True)
    state, assign = _assign_unit(state, event.index, position, intent)
    return _remember(state, event.index, position), effects + [fx.CancelLoadTimeout()] + assign


# --- Media engine ---


def _on_metadata(state: PlaybackState, event: ev.MetadataLoaded, config: LinguaReaderConfig) -> Step:
    duration = max(0.0, event.duration)
    if state.lifecycle == Lifecycle.LOADING and state.source_assigned:
        state = replace(state, media_loaded=True, duration=duration)
        return _maybe_ready(state)
    if state.media_loaded:
        return replace(state, duration=duration), []
    return state, []


def _on_time_update(state: PlaybackState, event: ev.TimeUpdate, config: LinguaReaderConfig) -> Step:
    if state.lifecycle not in (Lifecycle.READY, Lifecycle.SEEKING):
        return state, []
    position = _clamp_position(state, event.position)
    if position == state.position_seconds:
        return state, []
    state = replace(state, position_seconds=position, dirty=True)
    return _remember(state, state.unit_index, position), []


def _on_media_playing(
    state: PlaybackState, event: ev.MediaPlaying, config: LinguaReaderConfig
) -> Step:
    if state.lifecycle == Lifecycle.IDLE:
        return state, []
    return replace(state, playing=True, intent=Intent.PLAYING), []


def _on_media_paused(state: PlaybackState, event: ev.MediaPaused, config: LinguaReaderConfig) -> Step:
    if not state.playing:
        return state, []
    state = replace(state, playing=False, intent=Intent.PAUSED)
    state, writes = _flush_position(state, config, final=False)
    state, logs = _flush_listening(state, config, final=False)
    return state, writes + logs


def _on_media_ended(state: PlaybackState, event: ev.MediaEnded, config: LinguaReaderConfig) -> Step:
    if state.resource_id is None or state.current_unit is None or not state.media_loaded:
        return state, []
    end = state.duration if state.duration > 0 else state.position_seconds
    state = replace(state, playing=False, position_seconds=end)
    state, logs = _flush_listening(state, config, final=False)

    if state.is_last_unit:
        state = replace(state, intent=Intent.PAUSED, lifecycle=Lifecycle.READY, pending_seek=None)
        state, writes = _write(state, state.unit_index, end, final=True)
        return _remember(state, state.unit_index, end), writes + logs

    # Completed unit: the resume point is the start of the next one
    next_index = state.unit_index + 1
    state, writes = _write(state, next_index, 0.0, final=True)
    state, assign = _assign_unit(state, next_index, 0.0, Intent.PLAYING)
    state = replace(state, dirty=False)
    return _remember(state, next_index, 0.0), writes + logs + assign


def _on_failure(
    state: PlaybackState,
    event: ev.PlaybackFailed | ev.MediaError,
    config: LinguaReaderConfig,
) -> Step:
    if state.lifecycle == Lifecycle.IDLE:
        return state, []
    return (
        replace(
            state,
            lifecycle=Lifecycle.ERROR,
            intent=Intent.PAUSED,
            playing=False,
            error=event.error,
        ),
        [],
    )


# --- User intent ---


def _on_play(state: PlaybackState, event: ev.Play, config: LinguaReaderConfig) -> Step:
    if state.lifecycle == Lifecycle.ERROR:
        if not state.media_loaded and state.current_unit is not None:
            # The unit never loaded; retry by assigning it again
            return _assign_unit(state, state.unit_index, state.position_seconds, Intent.PLAYING)
        state = replace(state, lifecycle=Lifecycle.READY, error=None)

    state = replace(state, intent=Intent.PLAYING)
    if state.lifecycle == Lifecycle.READY and not state.playing:
        return state, [fx.StartPlayback()]
    return state, []


def _on_pause(state: PlaybackState, event: ev.Pause, config: LinguaReaderConfig) -> Step:
    state = replace(state, intent=Intent.PAUSED)
    if state.playing:
        return state, [fx.PausePlayback()]
    return state, []


def _on_toggle(state: PlaybackState, event: ev.TogglePlayPause, config: LinguaReaderConfig) -> Step:
    if state.intent == Intent.PLAYING:
        return _on_pause(state, ev.Pause(), config)
    return _on_play(state, ev.Play(), config)


def _on_seek(state: PlaybackState, event: ev.Seek, config: LinguaReaderConfig) -> Step:
    if state.lifecycle == Lifecycle.LOADING:
        return replace(state, pending_seek=max(0.0, event.position)), []
    if state.lifecycle not in (Lifecycle.READY, Lifecycle.SEEKING) or not state.media_loaded:
        return state, []
    position = _clamp_position(state, event.position)
    state = replace(state, lifecycle=Lifecycle.SEEKING, position_seconds=position, dirty=True)
    return _remember(state, state.unit_index, position), [fx.SeekMedia(position)]


def _on_seek_by(state: PlaybackState, event: ev.SeekBy, config: LinguaReaderConfig) -> Step:
    return _on_seek(state, ev.Seek(state.position_seconds + event.offset), config)


def _on_seek_completed(
    state: PlaybackState, event: ev.SeekCompleted, config: LinguaReaderConfig
) -> Step:
    if state.lifecycle != Lifecycle.SEEKING:
        return state, []
    if event.position is not None:
        state = replace(state, position_seconds=_clamp_position(state, event.position))
    state = replace(state, lifecycle=Lifecycle.READY)
    if state.intent == Intent.PLAYING and not state.playing:
        return state, [fx.StartPlayback()]
    return state, []


def _on_set_rate(state: PlaybackState, event: ev.SetPlaybackRate, config: LinguaReaderConfig) -> Step:
    rate = round(config.clamp_playback_rate(event.rate), 2)
    if rate == state.playback_rate:
        return state, []
    return (
        replace(state, playback_rate=rate),
        [fx.ApplyPlaybackRate(rate), fx.PersistPlaybackRate(rate)],
    )


def _on_adjust_rate(
    state: PlaybackState, event: ev.AdjustPlaybackRate, config: LinguaReaderConfig
) -> Step:
    target = state.playback_rate + event.steps * config.playback_rate_step
    return _on_set_rate(state, ev.SetPlaybackRate(target), config)


# --- Timers and acknowledgements ---


def _on_position_tick(
    state: PlaybackState, event: ev.PositionFlushTick, config: LinguaReaderConfig
) -> Step:
    if not state.is_ready_playing or not state.dirty:
        return state, []
    return _flush_position(state, config, final=False)


def _on_listening_tick(
    state: PlaybackState, event: ev.ListeningFlushTick, config: LinguaReaderConfig
) -> Step:
    if not state.is_ready_playing:
        return state, []
    return _flush_listening(state, config, final=False)


def _on_write_acked(
    state: PlaybackState, event: ev.ProgressWriteAcked, config: LinguaReaderConfig
) -> Step:
    state = replace(state, acked_sequence=max(state.acked_sequence, event.sequence))
    if event.sequence == state.write_sequence:
        # Only the newest write proves the store is up to date
        state = replace(state, dirty=False)
    return state, []


def _on_write_failed(
    state: PlaybackState, event: ev.ProgressWriteFailed, config: LinguaReaderConfig
) -> Step:
    if event.sequence == state.write_sequence and state.resource_id is not None:
        return replace(state, dirty=True), []
    return state, []


def _on_listening_acked(
    state: PlaybackState, event: ev.ListeningFlushAcked, config: LinguaReaderConfig
) -> Step:
    if event.token != state.load_token or not state.listening_in_flight:
        return state, []
    return (
        replace(
            state,
            accrual=state.accrual.subtract(event.flushed_ms),
            listening_in_flight_ms=0.0,
        ),
        [],
    )


def _on_listening_failed(
    state: PlaybackState, event: ev.ListeningFlushFailed, config: LinguaReaderConfig
) -> Step:
    if event.token != state.load_token:
        return state, []
    return replace(state, listening_in_flight_ms=0.0), []


_HANDLERS: dict[type, Callable[[PlaybackState, ev.Event, LinguaReaderConfig], Step]] = {
    ev.LoadResource: _on_load_resource,
    ev.ProgressLoaded: _on_progress_loaded,
    ev.ProgressLoadFailed: _on_progress_unavailable,
    ev.ProgressLoadTimedOut: _on_progress_unavailable,
    ev.SelectUnit: _on_select_unit,
    ev.Teardown: _on_teardown,
    ev.Play: _on_play,
    ev.Pause: _on_pause,
    ev.TogglePlayPause: _on_toggle,
    ev.Seek: _on_seek,
    ev.SeekBy: _on_seek_by,
    ev.SetPlaybackRate: _on_set_rate,
    ev.AdjustPlaybackRate: _on_adjust_rate,
    ev.MetadataLoaded: _on_metadata,
    ev.TimeUpdate: _on_time_update,
    ev.SeekCompleted: _on_seek_completed,
    ev.MediaPlaying: _on_media_playing,
    ev.MediaPaused: _on_media_paused,
    ev.MediaEnded: _on_media_ended,
    ev.PlaybackFailed: _on_failure,
    ev.MediaError: _on_failure,
    ev.PositionFlushTick: _on_position_tick,
    ev.ListeningFlushTick: _on_listening_tick,
    ev.ProgressWriteAcked: _on_write_acked,
    ev.ProgressWriteFailed: _on_write_failed,
    ev.ListeningFlushAcked: _on_listening_acked,
    ev.ListeningFlushFailed: _on_listening_failed,
}
