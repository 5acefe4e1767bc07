"""Shared fakes for vadsync tests."""
import numpy as np
import pytest
from typing import List, Optional, Sequence, Tuple

from vadsync.audio.vad.base import VoiceClassifier
from vadsync.sync.engine import EngineSpan, Scoring


class ThresholdClassifier(VoiceClassifier):
    """Voice whenever any sample in the frame is non-zero (10 samples per frame)."""

    name = "threshold"
    sample_rate = 1000
    chunk_duration_ms = 10

    def __init__(self, fail_at: Optional[int] = None):
        self.fail_at = fail_at
        self.calls = 0
        self.frames: List[np.ndarray] = []

    def _classify_frame(self, frame: np.ndarray) -> bool:
        index = self.calls
        self.calls += 1
        if self.fail_at is not None and index == self.fail_at:
            raise RuntimeError("classifier exploded")
        self.frames.append(frame.copy())
        return bool(np.any(frame != 0))


def _overlap(reference: Sequence[EngineSpan], incoming: Sequence[EngineSpan], delta: int) -> float:
    total = 0
    for inc in incoming:
        start, end = inc.start + delta, inc.end + delta
        for ref in reference:
            total += max(0, min(end, ref.end) - max(start, ref.start))
    return float(total)


class BruteForceEngine:
    """
    Alignment engine that tries every constant shift in a window.

    The score is the total overlap between shifted incoming spans and the
    reference. The first shift reaching the best score wins.
    """

    def __init__(self, search: int = 100):
        self.search = search
        self.nosplit_calls: List[Tuple[List[EngineSpan], Scoring]] = []
        self.align_calls: List[dict] = []

    def align_nosplit(self, reference, incoming, scoring) -> Tuple[int, float]:
        self.nosplit_calls.append((list(incoming), scoring))
        best_delta, best_score = 0, -1.0
        for delta in range(-self.search, self.search + 1):
            score = _overlap(reference, incoming, delta)
            if score > best_score:
                best_delta, best_score = delta, score
        total = sum(span.length for span in incoming) or 1
        return best_delta, best_score / total

    def align(self, reference, incoming, split_penalty, speed_optimization, scoring) -> List[int]:
        self.align_calls.append({
            "split_penalty": split_penalty,
            "speed_optimization": speed_optimization,
            "scoring": scoring,
            "incoming": list(incoming),
        })
        delta, _ = self.align_nosplit(reference, incoming, scoring)
        return [delta] * len(incoming)


class FakeDocument:
    """In-memory subtitle document."""

    def __init__(self, entries, format: str = "srt", updatable: bool = True, fail_update: bool = False):
        self.format = format
        self._entries = list(entries)
        self.updatable = updatable
        self.fail_update = fail_update
        self.updated = None

    def entries(self):
        return list(self._entries)

    def update_entries(self, intervals):
        from vadsync.sync.subtitles import UpdatingEntriesNotSupported

        if not self.updatable:
            raise UpdatingEntriesNotSupported(self.format)
        if self.fail_update:
            raise RuntimeError("writer broke")
        self.updated = list(intervals)
        self._entries = [(span.start, span.end) for span in intervals]

    def to_bytes(self) -> bytes:
        return "\n".join(f"{start} {end}" for start, end in self._entries).encode("utf-8")


class FakeHandler:
    """
    Subtitle handler for a toy format: one "start end" pair per line.

    Files ending in ".bin" cannot be detected; files ending in ".idx" are
    detected but cannot be updated.
    """

    def detect_format(self, path: str, data: bytes) -> str:
        if path.endswith(".bin"):
            raise ValueError("unknown subtitle format")
        if path.endswith(".idx"):
            return "idx"
        return "toy"

    def parse(self, data: bytes, format: str, encoding: Optional[str]):
        entries = []
        for line in data.decode(encoding or "utf-8").splitlines():
            if not line.strip():
                continue
            start, end = line.split()
            entries.append((int(start), int(end)))
        return FakeDocument(entries, format=format, updatable=(format != "idx"))

    def supports_updates(self, path: str, format: str) -> bool:
        return format != "idx"


@pytest.fixture
def classifier():
    return ThresholdClassifier()


@pytest.fixture
def engine():
    return BruteForceEngine()


@pytest.fixture
def handler():
    return FakeHandler()
