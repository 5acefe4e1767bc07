"""Base interface for frame-level voice classifiers."""
from abc import ABC, abstractmethod
import numpy as np

from vadsync.core.errors import VoiceDetectionError


def frame_size(chunk_duration_ms: int, sample_rate: int) -> int:
    """Number of samples in one analysis frame."""
    return int(round(chunk_duration_ms / 1000.0 * sample_rate))


class VoiceClassifier(ABC):
    """
    Classifies fixed-size frames of int16 samples as voice or non-voice.

    Each backend declares the sample rate and frame duration it expects.
    Instances may carry state across frames (adaptive thresholds, recurrent
    model state), so one instance belongs to exactly one stream.
    """

    name: str = "base"
    sample_rate: int = 16000
    chunk_duration_ms: int = 30

    @property
    def chunk_size(self) -> int:
        return frame_size(self.chunk_duration_ms, self.sample_rate)

    def classify(self, frame: np.ndarray) -> bool:
        """
        Classify a single frame.

        Args:
            frame: Exactly `chunk_size` int16 samples

        Returns:
            True if the frame contains voice

        Raises:
            VoiceDetectionError: on a malformed frame or backend failure
        """
        if len(frame) != self.chunk_size:
            raise VoiceDetectionError(
                f"{self.name} expects frames of exactly {self.chunk_size} samples, got {len(frame)}"
            )
        return bool(self._classify_frame(frame))

    @abstractmethod
    def _classify_frame(self, frame: np.ndarray) -> bool:
        """Backend-specific decision for a frame of the right length."""
