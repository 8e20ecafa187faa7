"""Tests for lexical_annotator module."""

from unittest.mock import MagicMock, patch

import pytest

from lingua_reader.exceptions import ConfigurationError
from lingua_reader.models import PARSER_MECAB, LanguageSettings, TokenKind
from lingua_reader.services.lexical_annotator import (
    LexicalAnnotator,
    build_word_predicate,
    find_untracked_words,
    tokenize,
)
from lingua_reader.services.vocabulary_snapshot import VocabularySnapshot


def _surfaces(*surfaces):
    """Build mock fugashi words with the given surfaces."""
    words = []
    for surface in surfaces:
        word = MagicMock()
        word.surface = surface
        words.append(word)
    return words


class TestLosslessPartition:
    """Token texts always concatenate back to the input."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Hello, world!",
            "  leading and trailing  ",
            "I love New York. New York loves me.",
            "don't stop...won't stop",
            "Tabs\tand\nnewlines\r\n",
            "Ünïcödé façade naïve",
            "नमस्ते दुनिया",
            "123 numbers 4.5 and $ymbols %",
        ],
    )
    def test_concatenation_equals_input(self, annotator, make_term, text):
        vocabulary = [make_term("New York", 2), make_term("stop", 1)]
        tokens = annotator.tokenize(text, vocabulary)
        assert "".join(token.text for token in tokens) == text

    def test_empty_text_gives_no_tokens(self, annotator):
        assert annotator.tokenize("", []) == []


class TestPhraseMatching:
    """Tests for phrase detection."""

    def test_longest_match_wins(self, annotator, make_term):
        """Should emit one phrase token for 'New York', not two words."""
        vocabulary = [make_term("New York", 2), make_term("New", 5)]

        tokens = annotator.tokenize("I love New York.", vocabulary)

        lexical = [t for t in tokens if t.is_lexical]
        assert [t.text for t in lexical] == ["I", "love", "New York"]
        assert lexical[-1].kind == TokenKind.PHRASE
        assert lexical[-1].status == 2

    def test_word_used_when_phrase_does_not_fit(self, annotator, make_term):
        vocabulary = [make_term("New York", 2), make_term("New", 5)]

        tokens = annotator.tokenize("New Jersey", vocabulary)

        assert tokens[0].kind == TokenKind.WORD
        assert tokens[0].text == "New"
        assert tokens[0].status == 5

    def test_phrase_keeps_original_casing(self, annotator, make_term):
        tokens = annotator.tokenize("I love NEW YORK", [make_term("new york", 4)])
        assert tokens[-1].kind == TokenKind.PHRASE
        assert tokens[-1].text == "NEW YORK"
        assert tokens[-1].term_key == "new york"

    def test_longer_phrase_beats_shorter_phrase(self, annotator, make_term):
        vocabulary = [make_term("New York", 2), make_term("New York City", 3)]

        tokens = annotator.tokenize("New York City Marathon", vocabulary)

        assert tokens[0].text == "New York City"
        assert tokens[0].status == 3

    def test_phrase_truncated_by_end_of_text(self, annotator, make_term):
        tokens = annotator.tokenize("New Yor", [make_term("New York", 2)])
        assert all(t.kind != TokenKind.PHRASE for t in tokens)

    def test_phrase_matches_as_literal_prefix(self, annotator, make_term):
        """Should match a phrase even when a word continues right after it."""
        tokens = annotator.tokenize("New Yorkers.", [make_term("New York", 2)])

        assert tokens[0].kind == TokenKind.PHRASE
        assert tokens[0].text == "New York"
        assert [t.text for t in tokens[1:]] == ["ers", "."]

    def test_snapshot_orders_phrases_by_length_then_key(self, make_term):
        snapshot = VocabularySnapshot(
            [make_term("ab cd", 1), make_term("aa bb", 1), make_term("a very long one", 1)]
        )
        assert [t.term_key for t in snapshot.phrases] == ["a very long one", "aa bb", "ab cd"]


class TestWordStatus:
    """Tests for single-word status lookup."""

    @pytest.mark.parametrize("text", ["Hello", "HELLO", "hello", "hElLo"])
    def test_case_insensitive_lookup(self, annotator, make_term, text):
        """Should resolve every casing to the same status and keep the original text."""
        tokens = annotator.tokenize(text, [make_term("hello", 3)])

        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.WORD
        assert tokens[0].status == 3
        assert tokens[0].text == text

    def test_untracked_word_has_status_zero(self, annotator):
        tokens = annotator.tokenize("unknown", [])
        assert tokens[0].status == 0
        assert tokens[0].term_key == "unknown"

    def test_apostrophe_is_part_of_word(self, annotator):
        tokens = annotator.tokenize("don't", [])
        assert [t.text for t in tokens] == ["don't"]

    def test_separators_are_single_characters(self, annotator):
        tokens = annotator.tokenize("a, b", [])
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.WORD, "a"),
            (TokenKind.SEPARATOR, ","),
            (TokenKind.SEPARATOR, " "),
            (TokenKind.WORD, "b"),
        ]

    def test_combining_marks_stay_in_word(self, annotator):
        tokens = annotator.tokenize("नमस्ते", [])
        assert len(tokens) == 1

    def test_character_substitutions_apply_to_keys_only(self, make_term):
        annotator = LexicalAnnotator(LanguageSettings(character_substitutions="’='"))

        tokens = annotator.tokenize("don’t", [make_term("don't", 2)])

        assert tokens[0].text == "don’t"
        assert tokens[0].term_key == "don't"
        assert tokens[0].status == 2

    def test_module_level_tokenize(self, make_term):
        tokens = tokenize("Hello world", [make_term("world", 1)])
        assert [t.status for t in tokens if t.is_lexical] == [0, 1]

    def test_same_input_same_output(self, annotator, make_term):
        vocabulary = [make_term("New York", 2)]
        first = annotator.tokenize("New York, New York!", vocabulary)
        second = annotator.tokenize("New York, New York!", vocabulary)
        assert first == second


class TestWordPredicate:
    """Tests for build_word_predicate."""

    def test_explicit_character_class(self):
        is_word = build_word_predicate(LanguageSettings(word_characters="a-zA-Z"))
        assert is_word("a")
        assert is_word("'")
        assert not is_word("é")
        assert not is_word("1")

    def test_explicit_class_splits_words(self):
        annotator = LexicalAnnotator(LanguageSettings(word_characters="a-zA-Z"))
        tokens = annotator.tokenize("café", [])
        assert [(t.kind, t.text) for t in tokens] == [
            (TokenKind.WORD, "caf"),
            (TokenKind.SEPARATOR, "é"),
        ]

    def test_invalid_character_class_raises(self):
        with pytest.raises(ConfigurationError, match="Invalid word characters"):
            build_word_predicate(LanguageSettings(word_characters="z-a"))

    def test_default_accepts_any_letter(self):
        is_word = build_word_predicate(LanguageSettings())
        assert is_word("é")
        assert is_word("語")
        assert not is_word(" ")
        assert not is_word(".")


class TestMecabSplitting:
    """Tests for MeCab-based splitting of word runs."""

    def test_splits_run_into_surfaces(self):
        with patch("lingua_reader.services.lexical_annotator.fugashi.Tagger") as mock_tagger:
            mock_tagger.return_value.return_value = _surfaces("私", "は", "学生", "です")
            annotator = LexicalAnnotator(LanguageSettings(parser_type=PARSER_MECAB))

            tokens = annotator.tokenize("私は学生です。", [])

        assert [t.text for t in tokens] == ["私", "は", "学生", "です", "。"]
        assert tokens[-1].kind == TokenKind.SEPARATOR

    def test_keeps_run_whole_when_surfaces_do_not_cover_it(self):
        with patch("lingua_reader.services.lexical_annotator.fugashi.Tagger") as mock_tagger:
            mock_tagger.return_value.return_value = _surfaces("私", "X")
            annotator = LexicalAnnotator(LanguageSettings(parser_type=PARSER_MECAB))

            tokens = annotator.tokenize("私は", [])

        assert [t.text for t in tokens] == ["私は"]

    def test_tagger_created_once(self):
        with patch("lingua_reader.services.lexical_annotator.fugashi.Tagger") as mock_tagger:
            mock_tagger.return_value.return_value = _surfaces("猫")
            annotator = LexicalAnnotator(LanguageSettings(parser_type=PARSER_MECAB))

            annotator.tokenize("猫", [])
            annotator.tokenize("猫", [])

        mock_tagger.assert_called_once()

    def test_space_delimited_never_creates_tagger(self, annotator):
        with patch("lingua_reader.services.lexical_annotator.fugashi.Tagger") as mock_tagger:
            annotator.tokenize("plain words", [])
        mock_tagger.assert_not_called()


class TestFindUntrackedWords:
    """Tests for find_untracked_words."""

    def test_unique_in_first_seen_order(self, annotator):
        tokens = annotator.tokenize("The cat saw the Cat.", [])
        assert find_untracked_words(tokens) == ["The", "cat", "saw"]

    def test_skips_tracked_words_and_phrases(self, annotator, make_term):
        tokens = annotator.tokenize(
            "The cat saw New York.", [make_term("cat", 3), make_term("New York", 0)]
        )
        assert find_untracked_words(tokens) == ["The", "saw"]
