"""Tests for data models."""

import pytest

from lingua_reader.models import (
    Intent,
    LanguageSettings,
    Lifecycle,
    ListeningAccrual,
    MediaUnit,
    PlaybackState,
    SavedProgress,
    Sentence,
    SubtitleLine,
    Token,
    TokenKind,
    VocabularyTerm,
)


class TestVocabularyTerm:
    """Tests for VocabularyTerm."""

    def test_status_out_of_range(self):
        with pytest.raises(ValueError, match="between 0 and 5"):
            VocabularyTerm(term_key="x", display_term="x", status=6)

    def test_is_known(self):
        assert VocabularyTerm("x", "x", 5).is_known
        assert not VocabularyTerm("x", "x", 4).is_known

    def test_str(self):
        assert str(VocabularyTerm("hund", "Hund", 2)) == "Hund [2]"


class TestSubtitleLine:
    """Tests for SubtitleLine."""

    def test_contains_is_half_open(self):
        line = SubtitleLine(id=1, start_time=1.0, end_time=2.0, text="x")
        assert line.contains(1.0)
        assert line.contains(1.999)
        assert not line.contains(2.0)

    def test_duration(self):
        assert SubtitleLine(1, 1.5, 4.0, "x").duration == 2.5


class TestToken:
    """Tests for Token."""

    def test_whitespace_separator(self):
        assert Token(TokenKind.SEPARATOR, " ").is_whitespace
        assert not Token(TokenKind.SEPARATOR, ".").is_whitespace
        assert not Token(TokenKind.WORD, "a").is_whitespace

    def test_is_lexical(self):
        assert Token(TokenKind.PHRASE, "New York").is_lexical
        assert not Token(TokenKind.SEPARATOR, ",").is_lexical


class TestSentence:
    """Tests for Sentence."""

    def test_range_and_length(self):
        sentence = Sentence(index=3, start=2, end=6)
        assert list(sentence.token_range) == [2, 3, 4, 5]
        assert len(sentence) == 4


class TestLanguageSettings:
    """Tests for LanguageSettings."""

    def test_list_exceptions_become_tuple(self):
        settings = LanguageSettings(sentence_split_exceptions=["Dr."])
        assert settings.sentence_split_exceptions == ("Dr.",)

    def test_terminal_marks_skip_whitespace(self):
        assert LanguageSettings(split_sentences=".! ?").terminal_marks == frozenset(".!?")


class TestListeningAccrual:
    """Tests for ListeningAccrual."""

    def test_add_ignores_negative_deltas(self):
        assert ListeningAccrual(1000).add(-500).accumulated_ms == 1000

    def test_subtract_floors_at_zero(self):
        assert ListeningAccrual(1000).subtract(5000).accumulated_ms == 0

    def test_seconds_rounds(self):
        assert ListeningAccrual(5499).seconds == 5
        assert ListeningAccrual(5500).seconds == 6


class TestSavedProgress:
    """Tests for SavedProgress."""

    def test_has_position(self):
        assert SavedProgress(unit_id=1, position_seconds=0.0).has_position
        assert not SavedProgress(unit_id=1).has_position


class TestPlaybackState:
    """Tests for PlaybackState derived properties."""

    def test_current_unit(self):
        units = (MediaUnit(1, "a.mp3"), MediaUnit(2, "b.mp3"))
        state = PlaybackState(units=units, unit_index=1)
        assert state.current_unit == units[1]
        assert state.is_last_unit

    def test_no_units(self):
        assert PlaybackState().current_unit is None

    def test_ready_playing_requires_both(self):
        assert PlaybackState(lifecycle=Lifecycle.READY, playing=True).is_ready_playing
        assert not PlaybackState(lifecycle=Lifecycle.READY, playing=False).is_ready_playing
        assert not PlaybackState(lifecycle=Lifecycle.SEEKING, playing=True).is_ready_playing

    def test_defaults(self):
        state = PlaybackState()
        assert state.lifecycle == Lifecycle.IDLE
        assert state.intent == Intent.PAUSED
        assert not state.listening_in_flight
