"""Interface of the external alignment engine and its span type."""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Sequence, Tuple


class Scoring(Enum):
    """Span-matching score functions understood by the engine."""
    STANDARD = "standard"
    OVERLAP = "overlap"


@dataclass(frozen=True)
class EngineSpan:
    """A span in quantized engine timepoints; start and end are kept ordered."""
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            start, end = self.end, self.start
            object.__setattr__(self, "start", start)
            object.__setattr__(self, "end", end)

    @property
    def length(self) -> int:
        return self.end - self.start

    def scaled(self, factor: float) -> "EngineSpan":
        """Scale both ends by `factor`, truncating toward zero."""
        return EngineSpan(int(self.start * factor), int(self.end * factor))


class AlignmentEngine(Protocol):
    """Computes the shifts that best match incoming spans to reference spans."""

    def align_nosplit(
        self,
        reference: Sequence[EngineSpan],
        incoming: Sequence[EngineSpan],
        scoring: Scoring
    ) -> Tuple[int, float]:
        """Return one shift (in timepoints) for all incoming spans and its score."""
        ...

    def align(
        self,
        reference: Sequence[EngineSpan],
        incoming: Sequence[EngineSpan],
        split_penalty: float,
        speed_optimization: Optional[float],
        scoring: Scoring
    ) -> List[int]:
        """Return one shift (in timepoints) per incoming span."""
        ...


def to_timepoint(msecs: int, interval: int) -> int:
    """Quantize milliseconds to engine timepoints (integer division, truncating)."""
    quotient = abs(msecs) // interval
    return quotient if msecs >= 0 else -quotient


def to_msecs(delta: int, interval: int) -> int:
    """Convert an engine shift back to milliseconds."""
    return delta * interval


def delta_str(delta: Optional[int], interval: int) -> str:
    """Readable millisecond form of an optional engine shift."""
    if delta is None:
        return "???"
    return f"{to_msecs(delta, interval)}"
