"""Data models for sentence segmentation."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Sentence:
    """A globally indexed span of tokens, ``[start, end)``."""

    index: int
    start: int
    end: int

    @property
    def token_range(self) -> range:
        """Token positions covered by the sentence."""
        return range(self.start, self.end)

    def __len__(self) -> int:
        return self.end - self.start


@dataclass
class SegmentationResult:
    """Sentences found in one token stream plus the next free global index."""

    sentences: list[Sentence] = field(default_factory=list)
    next_index: int = 0
