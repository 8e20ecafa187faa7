"""Bridge between QMediaPlayer and the playback controller."""

import logging
from collections.abc import Callable

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QAudioOutput, QMediaPlayer

from lingua_reader.exceptions import PlaybackError
from lingua_reader.playback import events as ev

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http://", "https://", "file://")


def source_to_url(source: str) -> QUrl:
    """URL for a media source: remote URLs as-is, anything else as a local file."""
    if source.lower().startswith(REMOTE_SCHEMES):
        return QUrl(source)
    return QUrl.fromLocalFile(source)


class QtMediaPlayerAdapter(QObject):
    """Drives a QMediaPlayer and reports its signals as controller events.

    Usage:
        adapter = QtMediaPlayerAdapter()
        controller = PlaybackProgressController(adapter, ...)
        adapter.connect_events(controller.dispatch)
    """

    def __init__(self, parent=None):
        """Initialize the adapter.

        Args:
            parent: Optional parent QObject
        """
        super().__init__(parent)
        self.audio_output = QAudioOutput()
        self.player = QMediaPlayer()
        self.player.setAudioOutput(self.audio_output)

        self._dispatch: Callable[[ev.Event], None] | None = None
        self._seeking = False
        self._metadata_sent = False

        self.player.positionChanged.connect(self._on_position_changed)
        self.player.durationChanged.connect(self._on_duration_changed)
        self.player.mediaStatusChanged.connect(self._on_media_status_changed)
        self.player.playbackStateChanged.connect(self._on_playback_state_changed)
        self.player.errorOccurred.connect(self._on_media_error)

    def connect_events(self, dispatch: Callable[[ev.Event], None]) -> None:
        """Send engine events to ``dispatch`` (normally ``controller.dispatch``)."""
        self._dispatch = dispatch

    # --- MediaPlayer protocol ---

    def set_source(self, source: str) -> None:
        self._seeking = False
        self._metadata_sent = False
        self.player.setSource(source_to_url(source))

    def play(self) -> None:
        if self.player.source().isEmpty():
            raise PlaybackError("No media source assigned")
        if self.player.mediaStatus() == QMediaPlayer.MediaStatus.InvalidMedia:
            raise PlaybackError(self.player.errorString() or "Media cannot be played")
        self.player.play()

    def pause(self) -> None:
        self.player.pause()

    def seek(self, position_seconds: float) -> None:
        self._seeking = True
        self.player.setPosition(int(position_seconds * 1000))

    def set_playback_rate(self, rate: float) -> None:
        self.player.setPlaybackRate(rate)

    def stop(self) -> None:
        """Stop the engine when the host view closes."""
        self.player.stop()

    # --- Signal handlers ---

    def _emit(self, event: ev.Event) -> None:
        if self._dispatch is not None:
            self._dispatch(event)

    def _send_metadata(self) -> None:
        duration = self.player.duration()
        if self._metadata_sent or duration <= 0:
            return
        self._metadata_sent = True
        self._emit(ev.MetadataLoaded(duration / 1000.0))

    def _on_media_status_changed(self, status: QMediaPlayer.MediaStatus) -> None:
        if status in (
            QMediaPlayer.MediaStatus.LoadedMedia,
            QMediaPlayer.MediaStatus.BufferedMedia,
        ):
            self._send_metadata()
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self._emit(ev.MediaEnded())
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self._emit(ev.MediaError(self.player.errorString() or "Invalid media"))

    def _on_duration_changed(self, duration: int) -> None:
        if self._metadata_sent:
            self._emit(ev.MetadataLoaded(duration / 1000.0))
        elif self.player.mediaStatus() != QMediaPlayer.MediaStatus.LoadingMedia:
            self._send_metadata()

    def _on_position_changed(self, position: int) -> None:
        seconds = position / 1000.0
        if self._seeking:
            self._seeking = False
            self._emit(ev.SeekCompleted(seconds))
        self._emit(ev.TimeUpdate(seconds))

    def _on_playback_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        if state == QMediaPlayer.PlaybackState.PlayingState:
            self._emit(ev.MediaPlaying())
        elif self.player.mediaStatus() != QMediaPlayer.MediaStatus.EndOfMedia:
            self._emit(ev.MediaPaused())

    def _on_media_error(self, error, error_string: str) -> None:
        """Report engine errors.

        Args:
            error: QMediaPlayer.Error enum value
            error_string: Human-readable error description
        """
        logger.error(f"Media error: {error_string}")
        self._emit(ev.MediaError(error_string or str(error)))
