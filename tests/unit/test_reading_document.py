"""Tests for reading_document module."""

import pytest

from lingua_reader.config import LinguaReaderConfig
from lingua_reader.models import TokenKind
from lingua_reader.orchestration.reading_document import ReadingDocument

TEXT = "Dr. Smith went home. He slept.\n\nNew day! Mr. Jones woke up."


class TestReadingDocument:
    """Tests for ReadingDocument."""

    def test_sentence_indices_continue_across_paragraphs(self, annotator):
        document = ReadingDocument(TEXT, annotator)

        assert len(document.paragraphs) == 2
        assert document.sentence_count == 4
        assert [s.index for s in document.paragraphs[1].sentences] == [2, 3]

    def test_exceptions_come_from_language(self, annotator):
        document = ReadingDocument(TEXT, annotator)

        assert document.sentence_text(0) == "Dr. Smith went home."
        assert document.sentence_text(3) == "Mr. Jones woke up."

    def test_from_config_uses_configured_language(self):
        config = LinguaReaderConfig(language={"name": "German", "sentence_split_exceptions": ["z.B."]})

        document = ReadingDocument.from_config("Das ist z.B. gut. Ja.", config)

        assert document.annotator.settings.name == "German"
        assert document.sentence_count == 2
        assert document.sentence_text(0) == "Das ist z.B. gut."

    def test_sentence_tokens(self, annotator):
        document = ReadingDocument(TEXT, annotator)
        assert [t.text for t in document.sentence_tokens(2)] == ["New", " ", "day", "!"]

    def test_unknown_sentence_raises(self, annotator):
        document = ReadingDocument(TEXT, annotator)

        with pytest.raises(IndexError):
            document.sentence_text(9)
        with pytest.raises(IndexError):
            document.sentence_tokens(-1)

    def test_refresh_applies_new_vocabulary(self, annotator, make_term):
        document = ReadingDocument(TEXT, annotator)
        assert document.sentence_tokens(2)[2].status == 0

        document.refresh([make_term("day", 2)])

        assert document.sentence_tokens(2)[2].status == 2
        assert document.sentence_count == 4

    def test_phrases_marked(self, annotator, make_term):
        document = ReadingDocument("She went home.", annotator, vocabulary=[make_term("went home", 1)])
        kinds = [t.kind for t in document.paragraphs[0].tokens if t.is_lexical]
        assert kinds == [TokenKind.WORD, TokenKind.PHRASE]

    def test_untracked_words(self, annotator, make_term):
        document = ReadingDocument(TEXT, annotator, vocabulary=[make_term("smith", 5)])

        words = document.untracked_words()

        assert words[:3] == ["Dr", "went", "home"]
        assert "Smith" not in words

    def test_empty_text(self, annotator):
        document = ReadingDocument("", annotator)
        assert document.paragraphs == []
        assert document.sentence_count == 0
