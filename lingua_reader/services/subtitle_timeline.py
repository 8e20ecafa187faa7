"""Parsing and querying of time-aligned subtitle transcripts."""

import bisect
import logging
import re
from pathlib import Path

import pysubs2

from lingua_reader.exceptions import SubtitleParseError
from lingua_reader.models import SubtitleLine
from lingua_reader.utils import clean_subtitle_text

logger = logging.getLogger(__name__)

_SEQUENCE_RE = re.compile(r"^\d+$")
_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})[,.](\d{1,3})$")


def parse_timestamp(value: str) -> float | None:
    """Convert ``HH:MM:SS,mmm`` to seconds.

    Args:
        value: Timestamp text

    Returns:
        Seconds as float, or None if any numeric part is missing
    """
    match = _TIMESTAMP_RE.match(value.strip())
    if not match:
        return None
    hours, minutes, seconds, millis = (int(part) for part in match.groups())
    return hours * 3600 + minutes * 60 + seconds + millis / 1000


def parse_time_range(line: str) -> tuple[float, float] | None:
    """Parse a ``start --> end`` line.

    Anything after the end timestamp (cue settings) is ignored.

    Returns:
        (start, end) in seconds, or None if the range is unusable
    """
    parts = line.split("-->")
    if len(parts) != 2:
        return None
    end_fields = parts[1].split()
    if not end_fields:
        return None
    start = parse_timestamp(parts[0])
    end = parse_timestamp(end_fields[0])
    if start is None or end is None or end <= start:
        return None
    return start, end


class _Block:
    """Accumulator for one entry while scanning."""

    def __init__(self, line_id: int):
        self.line_id = line_id
        self.times: tuple[float, float] | None = None
        self.text_lines: list[str] = []
        self.valid = True

    def to_line(self) -> SubtitleLine | None:
        if not self.valid or self.times is None:
            return None
        return SubtitleLine(
            id=self.line_id,
            start_time=self.times[0],
            end_time=self.times[1],
            text=" ".join(self.text_lines).strip(),
        )


def parse_srt(raw: str) -> list[SubtitleLine]:
    """Parse SubRip text into subtitle lines.

    Each entry is a sequence number line, a time-range line, and zero or
    more text lines, terminated by a blank line. Entries with a missing or
    unparsable time range are dropped and scanning continues with the next
    entry. A final entry without a terminating blank line is kept if it has
    text.

    Args:
        raw: Full subtitle file contents

    Returns:
        Lines in non-decreasing start-time order
    """
    if not raw:
        return []

    entries: list[SubtitleLine] = []
    block: _Block | None = None
    dropped = 0

    def finish(current: _Block) -> None:
        nonlocal dropped
        line = current.to_line()
        if line is None:
            dropped += 1
        else:
            entries.append(line)

    for raw_line in raw.lstrip("\ufeff").strip().splitlines():
        line = raw_line.strip()

        if block is None:
            if _SEQUENCE_RE.match(line):
                block = _Block(int(line))
            continue

        if not line:
            finish(block)
            block = None
        elif block.times is None and block.valid:
            times = parse_time_range(line)
            if times is None:
                block.valid = False
            else:
                block.times = times
        else:
            block.text_lines.append(line)

    if block is not None and block.text_lines:
        finish(block)

    if dropped:
        logger.debug(f"Dropped {dropped} malformed subtitle entr{'y' if dropped == 1 else 'ies'}")

    # Stable, so equal start times keep file order
    return sorted(entries, key=lambda entry: entry.start_time)


def lookup(lines: list[SubtitleLine], t: float) -> int | None:
    """Return the id of the first line with ``start <= t < end``, or None.

    This is a single linear scan. Callers that query the same lines
    repeatedly should hold a :class:`SubtitleTimeline`, which answers each
    lookup with a binary search.
    """
    for line in lines:
        if line.contains(t):
            return line.id
    return None


def serialize_srt(lines: list[SubtitleLine]) -> str:
    """Serialize subtitle lines back to SubRip text.

    Sequence numbers are reassigned from 1 in list order.

    Args:
        lines: Lines to write

    Returns:
        SubRip formatted text
    """
    subs = pysubs2.SSAFile()
    for line in lines:
        subs.append(
            pysubs2.SSAEvent(
                start=int(round(line.start_time * 1000)),
                end=int(round(line.end_time * 1000)),
                text=line.text,
            )
        )
    return subs.to_string("srt")


def load_subtitle_file(subtitle_file: Path) -> list[SubtitleLine]:
    """Load a subtitle file from disk.

    ``.srt`` files use the SubRip grammar of :func:`parse_srt`; other formats
    (.ass, .ssa, .vtt) are read with pysubs2 and numbered from 1.

    Args:
        subtitle_file: Path to the subtitle file

    Returns:
        Parsed subtitle lines

    Raises:
        SubtitleParseError: If the file cannot be read or decoded
    """
    if subtitle_file.suffix.lower() == ".srt":
        try:
            return parse_srt(subtitle_file.read_text(encoding="utf-8-sig"))
        except FileNotFoundError as e:
            raise SubtitleParseError(f"Subtitle file not found: {subtitle_file}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise SubtitleParseError(f"Failed to read subtitle file: {e}") from e

    try:
        subs = pysubs2.load(str(subtitle_file))
    except FileNotFoundError as e:
        raise SubtitleParseError(f"Subtitle file not found: {subtitle_file}") from e
    except Exception as e:
        raise SubtitleParseError(f"Failed to parse subtitle file: {e}") from e

    lines = []
    for event in subs:
        if event.is_comment or event.end <= event.start:
            continue
        text = clean_subtitle_text(event.text)
        if not text:
            continue
        lines.append(
            SubtitleLine(
                id=len(lines) + 1,
                start_time=event.start / 1000.0,
                end_time=event.end / 1000.0,
                text=text,
            )
        )
    return sorted(lines, key=lambda entry: entry.start_time)


class SubtitleTimeline:
    """Ordered subtitle lines with fast "which line is active" queries.

    Uses a binary search over start times plus a running maximum of end
    times, so overlapping lines still resolve to the first match in order.
    """

    def __init__(self, lines: list[SubtitleLine]):
        self.lines = list(lines)
        self._starts = [line.start_time for line in self.lines]
        self._sorted = all(a <= b for a, b in zip(self._starts, self._starts[1:]))
        self._max_ends: list[float] = []
        running = float("-inf")
        for line in self.lines:
            running = max(running, line.end_time)
            self._max_ends.append(running)
        self._positions = {line.id: i for i, line in reversed(list(enumerate(self.lines)))}

    @classmethod
    def from_srt(cls, raw: str) -> "SubtitleTimeline":
        """Build a timeline straight from SubRip text."""
        return cls(parse_srt(raw))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def find_index(self, t: float) -> int | None:
        """Position in :attr:`lines` of the active line at time ``t``."""
        if not self.lines:
            return None
        if not self._sorted:
            for i, line in enumerate(self.lines):
                if line.contains(t):
                    return i
            return None

        candidates = bisect.bisect_right(self._starts, t)
        if candidates == 0:
            return None
        first = bisect.bisect_right(self._max_ends, t, 0, candidates)
        if first < candidates:
            return first
        return None

    def lookup(self, t: float) -> int | None:
        """Id of the active line at time ``t``, or None in a gap."""
        index = self.find_index(t)
        return None if index is None else self.lines[index].id

    def line_at(self, t: float) -> SubtitleLine | None:
        """The active line at time ``t``, or None."""
        index = self.find_index(t)
        return None if index is None else self.lines[index]

    def index_of(self, line_id: int) -> int | None:
        """Position of the first line with the given id."""
        return self._positions.get(line_id)
