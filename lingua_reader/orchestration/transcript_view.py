"""Orchestrator for a time-aligned transcript next to an audio player."""

from collections.abc import Iterable

from lingua_reader.config import LinguaReaderConfig
from lingua_reader.models import SubtitleLine, Token, VocabularyTerm
from lingua_reader.services import LexicalAnnotator, SubtitleTimeline, VocabularySnapshot


class TranscriptView:
    """Per-line token streams plus "which line is active" for a transcript.

    Holds only the data a renderer needs; drawing and scrolling are left to
    the host.
    """

    def __init__(
        self,
        timeline: SubtitleTimeline,
        annotator: LexicalAnnotator,
        vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    ):
        self.timeline = timeline
        self.annotator = annotator
        self._tokens: list[tuple[Token, ...]] = []
        self.refresh(vocabulary)

    @classmethod
    def from_config(
        cls,
        timeline: SubtitleTimeline,
        config: LinguaReaderConfig,
        vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None,
    ) -> "TranscriptView":
        """Build a view that annotates with the configured language."""
        return cls(timeline, LexicalAnnotator(config.language), vocabulary)

    @property
    def lines(self) -> list[SubtitleLine]:
        return self.timeline.lines

    def refresh(self, vocabulary: VocabularySnapshot | Iterable[VocabularyTerm] | None = None) -> None:
        """Re-annotate every line, e.g. after a term's status changed."""
        snapshot = VocabularySnapshot.coerce(vocabulary)
        self._tokens = [tuple(self.annotator.tokenize(line.text, snapshot)) for line in self.lines]

    def tokens_at(self, index: int) -> tuple[Token, ...]:
        """Tokens of the line at row ``index``."""
        if 0 <= index < len(self._tokens):
            return self._tokens[index]
        return ()

    def tokens_for(self, line_id: int) -> tuple[Token, ...]:
        """Tokens of the first line carrying ``line_id``."""
        index = self.timeline.index_of(line_id)
        return () if index is None else self._tokens[index]

    def active_line_id(self, t: float) -> int | None:
        """Id of the line to highlight at playback time ``t``."""
        return self.timeline.lookup(t)

    def active_index(self, t: float) -> int | None:
        """Row of the active line, i.e. where the view should scroll."""
        return self.timeline.find_index(t)

    def line_start(self, line_id: int) -> float | None:
        """Start time of a line, for click-to-seek."""
        index = self.timeline.index_of(line_id)
        return None if index is None else self.lines[index].start_time
