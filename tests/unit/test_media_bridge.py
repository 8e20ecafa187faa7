"""Tests for media_bridge module."""

from unittest.mock import MagicMock

from PyQt6.QtMultimedia import QMediaPlayer

from lingua_reader.gui.media_bridge import QtMediaPlayerAdapter, source_to_url
from lingua_reader.gui.qt_scheduler import QtTimerHandle
from lingua_reader.playback import events as ev


def _fake_adapter():
    """Adapter stand-in for calling signal handlers without a media backend."""
    fake = MagicMock()
    fake._seeking = False
    fake._metadata_sent = False
    fake.emitted = []
    fake._emit.side_effect = fake.emitted.append
    return fake


class TestSourceToUrl:
    """Tests for source_to_url."""

    def test_remote_url_kept(self):
        url = source_to_url("https://cdn.example.com/audio/track1.mp3")
        assert url.scheme() == "https"
        assert url.path() == "/audio/track1.mp3"

    def test_local_path_becomes_file_url(self):
        url = source_to_url("/audio/lesson.mp3")
        assert url.isLocalFile()
        assert url.toLocalFile() == "/audio/lesson.mp3"


class TestSignalHandlers:
    """Tests for mapping QMediaPlayer signals onto controller events."""

    def test_position_after_seek(self):
        fake = _fake_adapter()
        fake._seeking = True

        QtMediaPlayerAdapter._on_position_changed(fake, 1500)

        assert fake.emitted == [ev.SeekCompleted(1.5), ev.TimeUpdate(1.5)]
        assert fake._seeking is False

    def test_plain_position_update(self):
        fake = _fake_adapter()
        QtMediaPlayerAdapter._on_position_changed(fake, 250)
        assert fake.emitted == [ev.TimeUpdate(0.25)]

    def test_end_of_media(self):
        fake = _fake_adapter()
        QtMediaPlayerAdapter._on_media_status_changed(fake, QMediaPlayer.MediaStatus.EndOfMedia)
        assert fake.emitted == [ev.MediaEnded()]

    def test_loaded_media_sends_metadata(self):
        fake = _fake_adapter()
        QtMediaPlayerAdapter._on_media_status_changed(fake, QMediaPlayer.MediaStatus.LoadedMedia)
        fake._send_metadata.assert_called_once()

    def test_invalid_media(self):
        fake = _fake_adapter()
        fake.player.errorString.return_value = "Unsupported format"

        QtMediaPlayerAdapter._on_media_status_changed(fake, QMediaPlayer.MediaStatus.InvalidMedia)

        assert fake.emitted == [ev.MediaError("Unsupported format")]

    def test_metadata_sent_once(self):
        fake = _fake_adapter()
        fake.player.duration.return_value = 90500

        QtMediaPlayerAdapter._send_metadata(fake)
        QtMediaPlayerAdapter._send_metadata(fake)

        assert fake.emitted == [ev.MetadataLoaded(90.5)]

    def test_no_metadata_without_duration(self):
        fake = _fake_adapter()
        fake.player.duration.return_value = 0

        QtMediaPlayerAdapter._send_metadata(fake)

        assert fake.emitted == []

    def test_playing_and_paused(self):
        fake = _fake_adapter()
        fake.player.mediaStatus.return_value = QMediaPlayer.MediaStatus.BufferedMedia

        QtMediaPlayerAdapter._on_playback_state_changed(fake, QMediaPlayer.PlaybackState.PlayingState)
        QtMediaPlayerAdapter._on_playback_state_changed(fake, QMediaPlayer.PlaybackState.PausedState)

        assert fake.emitted == [ev.MediaPlaying(), ev.MediaPaused()]

    def test_stop_at_end_is_not_a_pause(self):
        fake = _fake_adapter()
        fake.player.mediaStatus.return_value = QMediaPlayer.MediaStatus.EndOfMedia

        QtMediaPlayerAdapter._on_playback_state_changed(fake, QMediaPlayer.PlaybackState.StoppedState)

        assert fake.emitted == []

    def test_media_error(self):
        fake = _fake_adapter()
        QtMediaPlayerAdapter._on_media_error(fake, QMediaPlayer.Error.NetworkError, "Host not found")
        assert fake.emitted == [ev.MediaError("Host not found")]


class TestQtTimerHandle:
    """Tests for QtTimerHandle."""

    def test_cancel_stops_and_releases(self):
        scheduler = MagicMock()
        timer = MagicMock()

        QtTimerHandle(scheduler, timer).cancel()

        timer.stop.assert_called_once()
        scheduler._release.assert_called_once_with(timer)
