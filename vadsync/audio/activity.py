"""Voice-activity track produced by an audio sink."""
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

from vadsync.audio.dsp.morphology import closing, opening
from vadsync.sync.intervals import IntervalSet


def _padded(data: Sequence[bool], radius: int) -> List[bool]:
    return [False] * radius + list(data) + [False] * radius


def _unpadded(data: Sequence[bool], radius: int) -> List[bool]:
    return list(data[radius:len(data) - radius])


def _apply(
    data: Sequence[bool],
    radius: int,
    operator: Callable[[Sequence[bool], int], List[bool]]
) -> List[bool]:
    # Edge frames are treated as bounded by silence
    if radius <= 0:
        return list(data)
    return _unpadded(operator(_padded(data, radius), radius), radius)


@dataclass(frozen=True)
class ActivityTrack:
    """
    Per-frame voice decisions plus the duration of each frame.

    Instances are immutable; cleaning produces a new track.
    """
    frames: Tuple[bool, ...]
    chunk_duration_ms: int

    def __post_init__(self):
        object.__setattr__(self, "frames", tuple(bool(v) for v in self.frames))

    def __len__(self) -> int:
        return len(self.frames)

    @property
    def duration_ms(self) -> int:
        return len(self.frames) * self.chunk_duration_ms

    @property
    def voice_ratio(self) -> float:
        if not self.frames:
            return 0.0
        return sum(self.frames) / len(self.frames)

    def clean(self, opening_radius: int, closing_radius: int) -> "ActivityTrack":
        """
        Denoise the track with morphological opening then closing.

        Each radius `r` spans a window of `(2r+1) * chunk_duration_ms`
        milliseconds: opening removes voice spans shorter than that window,
        closing fills gaps shorter than it. A radius of zero skips the stage.

        Args:
            opening_radius: Kernel radius for noise removal (frames)
            closing_radius: Kernel radius for gap filling (frames)

        Returns:
            New ActivityTrack with the same frame duration
        """
        data = _apply(self.frames, opening_radius, opening)
        data = _apply(data, closing_radius, closing)
        return ActivityTrack(frames=tuple(data), chunk_duration_ms=self.chunk_duration_ms)

    def to_intervals(self) -> IntervalSet:
        """Convert the track to an IntervalSet (see IntervalSet.from_activity)."""
        return IntervalSet.from_activity(self)
