"""Options governing the synchronization process."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SyncOptions:
    """
    Parameters passed through to the alignment engine.

    Attributes:
        interval: Smallest unit of time recognized by the engine (ms). Smaller
            values align more precisely, larger values align faster.
        split_mode: Allow different shifts for different parts of the track
            (commercial breaks, added/removed scenes). When disabled a single
            constant shift is applied.
        split_penalty: How eager the engine is to avoid splits. 1000 means
            every line gets the same offset, 0.01 produces many segments.
            Values between 1 and 20 are the most useful.
        speed_optimization: Trades accuracy for speed; None disables it.
        framerate_correction: Try to correct mismatched framerates before
            aligning.
    """
    interval: int = 60
    split_mode: bool = True
    split_penalty: float = 7.0
    speed_optimization: Optional[float] = 1.0
    framerate_correction: bool = False

    def describe(self) -> str:
        """Human readable one-line summary used in logs."""
        speed = "NO" if self.speed_optimization is None else f"{self.speed_optimization}"
        return (
            f"SyncOptions(interval={self.interval}, split_mode={self.split_mode}, "
            f"split_penalty={self.split_penalty}, speed_optimization={speed}, "
            f"framerate_correction={self.framerate_correction})"
        )
