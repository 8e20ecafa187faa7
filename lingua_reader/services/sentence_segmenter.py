"""Group a token stream into globally indexed sentences."""

from collections.abc import Iterable, Sequence

from lingua_reader.models import SegmentationResult, Sentence, Token, TokenKind

DEFAULT_TERMINAL_MARKS = ".!?"


class SentenceSegmenter:
    """Find sentence boundaries in annotated token streams (stateless service).

    A boundary is a separator token that is exactly one terminal mark and is
    followed by whitespace or the end of the stream. The boundary is
    suppressed when the sentence so far ends with one of the exception
    strings (for example ``Dr.``).

    Exception matching rule: case-insensitive suffix match against the text
    of the current sentence, where the match must begin at a token boundary.
    ``Dr.`` therefore matches ``dr.`` and ``(Dr.`` but not ``MDr.``.
    """

    def __init__(
        self,
        terminal_marks: Iterable[str] = DEFAULT_TERMINAL_MARKS,
        exceptions: Iterable[str] = (),
    ):
        """Initialize the segmenter.

        Args:
            terminal_marks: Sentence-terminal characters
            exceptions: Default exception strings, used when segment() gets none
        """
        self.terminal_marks = frozenset(mark for mark in terminal_marks if not mark.isspace())
        self.exceptions = tuple(exceptions)

    def segment(
        self,
        tokens: Sequence[Token],
        start_index: int = 0,
        exceptions: Iterable[str] | None = None,
    ) -> SegmentationResult:
        """Split tokens into sentences.

        Args:
            tokens: Annotated token stream
            start_index: Global index for the first sentence found
            exceptions: Exception strings; defaults to the segmenter's own

        Returns:
            Sentences with consecutive indices and the next free index.
            Whitespace-only spans are dropped without consuming an index.
        """
        active_exceptions = tuple(
            e.strip() for e in (self.exceptions if exceptions is None else exceptions) if e.strip()
        )
        sentences: list[Sentence] = []
        index = start_index
        sentence_start = 0
        last = len(tokens) - 1

        for i in range(len(tokens)):
            at_end = i == last
            if not at_end and not self._is_boundary(tokens, i, sentence_start, active_exceptions):
                continue
            if any(not token.is_whitespace for token in tokens[sentence_start : i + 1]):
                sentences.append(Sentence(index=index, start=sentence_start, end=i + 1))
                index += 1
            sentence_start = i + 1

        return SegmentationResult(sentences=sentences, next_index=index)

    def _is_boundary(
        self,
        tokens: Sequence[Token],
        i: int,
        sentence_start: int,
        exceptions: tuple[str, ...],
    ) -> bool:
        token = tokens[i]
        if token.kind != TokenKind.SEPARATOR or token.text not in self.terminal_marks:
            return False
        if i + 1 < len(tokens) and not tokens[i + 1].is_whitespace:
            return False
        return not self._ends_with_exception(tokens[sentence_start : i + 1], exceptions)

    @staticmethod
    def _ends_with_exception(sentence_tokens: Sequence[Token], exceptions: tuple[str, ...]) -> bool:
        if not exceptions:
            return False

        token_starts = set()
        offset = 0
        for token in sentence_tokens:
            token_starts.add(offset)
            offset += len(token.text)
        text = "".join(token.text for token in sentence_tokens)

        for exception in exceptions:
            start = len(text) - len(exception)
            if start < 0 or start not in token_starts:
                continue
            if text[start:].lower() == exception.lower():
                return True
        return False


def segment(
    tokens: Sequence[Token],
    start_index: int = 0,
    exceptions: Iterable[str] = (),
    terminal_marks: Iterable[str] = DEFAULT_TERMINAL_MARKS,
) -> SegmentationResult:
    """Segment tokens with a one-off segmenter. See :meth:`SentenceSegmenter.segment`."""
    return SentenceSegmenter(terminal_marks).segment(tokens, start_index, exceptions)


def sentence_text(tokens: Sequence[Token], sentence: Sentence) -> str:
    """Plain text of one sentence, surrounding whitespace stripped."""
    return "".join(token.text for token in tokens[sentence.start : sentence.end]).strip()
