"""Orchestrator turning a text body into annotated, segmented paragraphs."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from lingua_reader.config import LinguaReaderConfig
from lingua_reader.models import Sentence, Token, VocabularyTerm
from lingua_reader.services import (
    LexicalAnnotator,
    SentenceSegmenter,
    VocabularySnapshot,
    find_untracked_words,
    sentence_text,
)
from lingua_reader.utils import split_paragraphs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Paragraph:
    """One paragraph's tokens and the sentences found in them."""

    tokens: tuple[Token, ...]
    sentences: tuple[Sentence, ...]


class ReadingDocument:
    """Annotate and segment a full text for reading.

    Sentence indices continue across paragraph breaks, so every sentence in
    the document has one global index (the bookmark key).
    """

    def __init__(
        self,
        text: str,
        annotator: LexicalAnnotator,
        segmenter: SentenceSegmenter | None = None,
        vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    ):
        """Initialize and build the document.

        Args:
            text: Body text, paragraphs separated by blank lines
            annotator: Tokenizer configured for the text's language
            segmenter: Sentence segmenter; built from the annotator's language if omitted
            vocabulary: Vocabulary for the first render pass
        """
        self.text = text
        self.annotator = annotator
        settings = annotator.settings
        self.segmenter = segmenter or SentenceSegmenter(
            settings.terminal_marks, settings.sentence_split_exceptions
        )
        self.paragraphs: list[Paragraph] = []
        self._locations: dict[int, tuple[int, Sentence]] = {}
        self.refresh(vocabulary)

    @classmethod
    def from_config(
        cls,
        text: str,
        config: LinguaReaderConfig,
        vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    ) -> "ReadingDocument":
        """Build a document for the configured language."""
        return cls(text, LexicalAnnotator(config.language), vocabulary=vocabulary)

    def refresh(self, vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None) -> None:
        """Rebuild tokens against a new vocabulary snapshot."""
        snapshot = VocabularySnapshot.coerce(vocabulary)
        paragraphs: list[Paragraph] = []
        locations: dict[int, tuple[int, Sentence]] = {}
        next_index = 0

        for paragraph_text in split_paragraphs(self.text):
            tokens = self.annotator.tokenize(paragraph_text, snapshot)
            result = self.segmenter.segment(tokens, next_index)
            next_index = result.next_index
            for sentence in result.sentences:
                locations[sentence.index] = (len(paragraphs), sentence)
            paragraphs.append(Paragraph(tuple(tokens), tuple(result.sentences)))

        self.paragraphs = paragraphs
        self._locations = locations
        logger.debug(f"Document built: {len(paragraphs)} paragraphs, {next_index} sentences")

    @property
    def sentence_count(self) -> int:
        return len(self._locations)

    def sentence_tokens(self, index: int) -> tuple[Token, ...]:
        """Tokens of one sentence.

        Raises:
            IndexError: If no sentence has this index
        """
        if index not in self._locations:
            raise IndexError(f"No sentence with index {index}")
        paragraph_index, sentence = self._locations[index]
        return self.paragraphs[paragraph_index].tokens[sentence.start : sentence.end]

    def sentence_text(self, index: int) -> str:
        """Plain text of a sentence, e.g. for a bookmark preview."""
        if index not in self._locations:
            raise IndexError(f"No sentence with index {index}")
        paragraph_index, sentence = self._locations[index]
        return sentence_text(self.paragraphs[paragraph_index].tokens, sentence)

    def untracked_words(self) -> list[str]:
        """Unique untracked words of the whole document."""
        return find_untracked_words(
            token for paragraph in self.paragraphs for token in paragraph.tokens
        )
