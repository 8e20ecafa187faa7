"""Pytest configuration and shared fixtures."""

import pytest

from lingua_reader.config import create_default_config
from lingua_reader.exceptions import PlaybackError
from lingua_reader.models import LanguageSettings, MediaUnit
from lingua_reader.playback import (
    DeferredTaskRunner,
    InlineTaskRunner,
    ManualClock,
    ManualScheduler,
    PlaybackProgressController,
)
from lingua_reader.services import (
    InMemoryKeyValueStore,
    InMemoryListeningAnalytics,
    InMemoryProgressStore,
    LexicalAnnotator,
    build_term,
)


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def test_config(temp_dir):
    """Provide a test configuration with temporary paths."""
    return create_default_config(
        api_base_url="http://reader.test/api",
        api_token="secret-token",
        request_timeout=5.0,
        preferences_path=temp_dir / "preferences.json",
        bookmarks_path=temp_dir / "bookmarks.json",
    )


@pytest.fixture
def english():
    """Provide English language settings with common abbreviations."""
    return LanguageSettings(
        name="English",
        code="en",
        sentence_split_exceptions=("Dr.", "Mr.", "Mrs."),
    )


@pytest.fixture
def annotator(english):
    """Provide an annotator for English text."""
    return LexicalAnnotator(english)


@pytest.fixture
def make_term():
    """Factory fixture for creating VocabularyTerm instances with sensible defaults."""

    def _make(display_term="hello", status=3, translation=None, term_id=None):
        return build_term(display_term, status=status, translation=translation, term_id=term_id)

    return _make


@pytest.fixture
def sample_srt_content():
    """Provide sample SubRip content for testing."""
    return """1
00:00:00,000 --> 00:00:05,000
Hello there.

2
00:00:05,000 --> 00:00:10,000
How are you
doing today?

3
00:00:12,000 --> 00:00:15,000
I love New York.
"""


@pytest.fixture
def sample_srt_file(temp_dir, sample_srt_content):
    """Create a sample SubRip file for testing."""
    subtitle_file = temp_dir / "lesson.srt"
    subtitle_file.write_text(sample_srt_content, encoding="utf-8")
    return subtitle_file


class RecordingMediaPlayer:
    """A real MediaPlayer implementation that records all calls for assertion."""

    def __init__(self):
        self.calls = []
        self.play_error = None

    def set_source(self, source: str) -> None:
        self.calls.append(("set_source", source))

    def play(self) -> None:
        self.calls.append(("play",))
        if self.play_error:
            raise PlaybackError(self.play_error)

    def pause(self) -> None:
        self.calls.append(("pause",))

    def seek(self, position_seconds: float) -> None:
        self.calls.append(("seek", position_seconds))

    def set_playback_rate(self, rate: float) -> None:
        self.calls.append(("rate", rate))

    def named(self, name: str) -> list:
        """All recorded calls with the given name."""
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def media_player():
    """Provide a media player that records commands."""
    return RecordingMediaPlayer()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    """Provide a deterministic scheduler sharing the manual clock."""
    return ManualScheduler(clock)


@pytest.fixture
def progress_store():
    return InMemoryProgressStore()


@pytest.fixture
def analytics():
    return InMemoryListeningAnalytics()


@pytest.fixture
def preferences():
    return InMemoryKeyValueStore()


@pytest.fixture
def audiobook_units():
    """Provide a three-track audiobook."""
    return [
        MediaUnit(unit_id=101, source="/audio/track1.mp3", title="Track 1"),
        MediaUnit(unit_id=102, source="/audio/track2.mp3", title="Track 2"),
        MediaUnit(unit_id=103, source="/audio/track3.mp3", title="Track 3"),
    ]


@pytest.fixture
def lesson_unit():
    """Provide a single-file audio lesson."""
    return [MediaUnit(unit_id=None, source="/audio/lesson.mp3", title="Lesson")]


@pytest.fixture
def make_controller(media_player, progress_store, analytics, preferences, scheduler, clock):
    """Factory fixture for controllers wired to in-memory collaborators."""

    def _make(task_runner=None, store=None, sink=None, config=None, prefs=None):
        return PlaybackProgressController(
            player=media_player,
            progress_store=store or progress_store,
            analytics=sink or analytics,
            preferences=prefs or preferences,
            scheduler=scheduler,
            task_runner=task_runner if task_runner is not None else InlineTaskRunner(),
            clock=clock,
            config=config or create_default_config(),
        )

    return _make


@pytest.fixture
def deferred_runner():
    """Provide a task runner whose work completes only when a test says so."""
    return DeferredTaskRunner()
