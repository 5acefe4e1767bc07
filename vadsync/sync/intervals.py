"""Time intervals used as alignment input, and their on-disk cache format.

An IntervalSet may come from voice activity, from a subtitle file whose timing
is known to be good, or be assembled by some other process. Sets can be saved
to and loaded from a raw binary file, which is handy for caching reference
intervals between runs.

Binary layout (little-endian, no header or version):

    u32 count
    count x (i64 start_ms, i64 end_ms)
"""
import struct
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple, Union

import numpy as np

from vadsync.core.errors import (
    IntervalDeserializeError,
    IntervalFileNotFoundError,
    IntervalReadError,
    IntervalSerializeError,
    IntervalWriteError,
)
from vadsync.core.logging import logger
from vadsync.sync.engine import EngineSpan, to_timepoint

_COUNT = struct.Struct("<I")
_RECORD = struct.Struct("<qq")


@dataclass(frozen=True)
class TimeInterval:
    """A [start, end] interval in milliseconds; reversed input is swapped."""
    start: int
    end: int

    def __post_init__(self):
        start, end = int(self.start), int(self.end)
        if start > end:
            start, end = end, start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def scaled(self, factor: float) -> "TimeInterval":
        """Scale both ends by `factor`, truncating toward zero."""
        return TimeInterval(int(self.start * factor), int(self.end * factor))

    def shifted(self, delta_ms: int) -> "TimeInterval":
        return TimeInterval(self.start + delta_ms, self.end + delta_ms)


IntervalLike = Union[TimeInterval, Tuple[int, int]]


def _as_interval(item: IntervalLike) -> TimeInterval:
    if isinstance(item, TimeInterval):
        return item
    start, end = item
    return TimeInterval(start, end)


class IntervalSet:
    """Ordered, immutable sequence of TimeIntervals (input order is kept)."""

    def __init__(self, intervals: Iterable[IntervalLike] = ()):
        self._intervals: Tuple[TimeInterval, ...] = tuple(_as_interval(i) for i in intervals)

    def __iter__(self) -> Iterator[TimeInterval]:
        return iter(self._intervals)

    def __len__(self) -> int:
        return len(self._intervals)

    def __getitem__(self, index: int) -> TimeInterval:
        return self._intervals[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntervalSet):
            return NotImplemented
        return self._intervals == other._intervals

    def __hash__(self) -> int:
        return hash(self._intervals)

    def __repr__(self) -> str:
        return f"IntervalSet({list(self._intervals)!r})"

    @property
    def intervals(self) -> Tuple[TimeInterval, ...]:
        return self._intervals

    @classmethod
    def from_activity(cls, activity) -> "IntervalSet":
        """
        Derive intervals from a voice-activity track.

        The track is bracketed by a leading and trailing non-voice frame, so
        every rising edge has a matching falling edge. Edge index `i` maps to
        `i * chunk_duration_ms`.

        Args:
            activity: ActivityTrack (frames + chunk_duration_ms)

        Returns:
            IntervalSet with one interval per voice run
        """
        padded = np.concatenate(([False], np.asarray(activity.frames, dtype=bool), [False]))
        edges = np.flatnonzero(padded[1:] != padded[:-1]) * int(activity.chunk_duration_ms)
        times = edges.tolist()
        return cls(TimeInterval(start, end) for start, end in zip(times[0::2], times[1::2]))

    @classmethod
    def from_subtitle_entries(cls, entries: Iterable[Tuple[int, int]]) -> "IntervalSet":
        """Build intervals from subtitle entry spans, ordering each start/end pair."""
        return cls(TimeInterval(min(a, b), max(a, b)) for a, b in entries)

    def to_engine_spans(self, interval: int) -> List[EngineSpan]:
        """Quantize every interval to engine timepoints of `interval` ms."""
        return [
            EngineSpan(to_timepoint(span.start, interval), to_timepoint(span.end, interval))
            for span in self._intervals
        ]

    # Persistence

    def to_bytes(self) -> bytes:
        """Serialize to the raw cache format."""
        try:
            parts = [_COUNT.pack(len(self._intervals))]
            parts.extend(_RECORD.pack(span.start, span.end) for span in self._intervals)
        except struct.error as exc:
            raise IntervalSerializeError(str(exc)) from exc
        return b"".join(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> "IntervalSet":
        """Deserialize from the raw cache format; trailing bytes are ignored."""
        if len(data) < _COUNT.size:
            raise IntervalDeserializeError(
                f"expected {_COUNT.size} header bytes, got {len(data)}"
            )
        (count,) = _COUNT.unpack_from(data, 0)
        available = (len(data) - _COUNT.size) // _RECORD.size
        if count > available:
            raise IntervalDeserializeError(
                f"declared {count} records but only {available} present"
            )
        return cls(
            TimeInterval(*_RECORD.unpack_from(data, _COUNT.size + i * _RECORD.size))
            for i in range(count)
        )

    def save(self, path: str) -> None:
        """
        Save raw interval data to disk.

        Raises:
            IntervalSerializeError: if a value does not fit the format
            IntervalWriteError: if the file cannot be written
        """
        data = self.to_bytes()
        try:
            with open(path, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise IntervalWriteError(str(path), exc) from exc
        logger.debug(f"Saved {len(self._intervals)} intervals to {path}")

    @classmethod
    def load(cls, path: str) -> "IntervalSet":
        """
        Load raw interval data from disk.

        Raises:
            IntervalFileNotFoundError: if no file exists at `path`
            IntervalReadError: if the file cannot be read
            IntervalDeserializeError: if the content is malformed or truncated
        """
        try:
            with open(path, "rb") as handle:
                data = handle.read()
        except FileNotFoundError as exc:
            raise IntervalFileNotFoundError(str(path)) from exc
        except OSError as exc:
            raise IntervalReadError(str(path), exc) from exc
        intervals = cls.from_bytes(data)
        logger.debug(f"Loaded {len(intervals)} intervals from {path}")
        return intervals
