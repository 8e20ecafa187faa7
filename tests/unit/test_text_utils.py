"""Tests for text_utils module."""

from lingua_reader.utils.text_utils import (
    clean_subtitle_text,
    normalize_term,
    parse_substitutions,
    split_paragraphs,
)


class TestCleanSubtitleText:
    """Tests for clean_subtitle_text function."""

    def test_removes_ass_style_tags(self):
        assert clean_subtitle_text("{\\pos(10,20)}Hello") == "Hello"

    def test_removes_line_break_tags(self):
        assert clean_subtitle_text("Hello\\Nworld") == "Hello world"

    def test_removes_html_tags(self):
        assert clean_subtitle_text("<i>Hello</i> <b>there</b>") == "Hello there"

    def test_normalizes_whitespace(self):
        assert clean_subtitle_text("  Hello    there  ") == "Hello there"

    def test_handles_empty_string(self):
        assert clean_subtitle_text("") == ""


class TestParseSubstitutions:
    """Tests for parse_substitutions."""

    def test_pairs_in_order(self):
        assert parse_substitutions("’='|ß=ss") == (("’", "'"), ("ß", "ss"))

    def test_skips_malformed_items(self):
        assert parse_substitutions("novalue|=x|a=b") == (("a", "b"),)

    def test_empty(self):
        assert parse_substitutions("") == ()

    def test_replacement_may_contain_equals(self):
        assert parse_substitutions("a=b=c") == (("a", "b=c"),)


class TestNormalizeTerm:
    """Tests for normalize_term."""

    def test_lowercases_and_collapses_whitespace(self):
        assert normalize_term("  New   York ") == "new york"

    def test_applies_substitutions_first(self):
        assert normalize_term("Don’t", (("’", "'"),)) == "don't"

    def test_collapses_newlines(self):
        assert normalize_term("ice\ncream") == "ice cream"


class TestSplitParagraphs:
    """Tests for split_paragraphs."""

    def test_splits_on_blank_lines(self):
        assert split_paragraphs("One.\n\nTwo.\n \n\nThree.") == ["One.", "Two.", "Three."]

    def test_single_newline_does_not_split(self):
        assert split_paragraphs("Line one\nline two") == ["Line one\nline two"]

    def test_windows_line_endings(self):
        assert split_paragraphs("One.\r\n\r\nTwo.") == ["One.", "Two."]

    def test_drops_blank_paragraphs(self):
        assert split_paragraphs("\n\n   \n\n") == []

