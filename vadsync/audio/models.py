"""Audio data models and structures."""
from dataclasses import dataclass
from enum import Enum
import numpy as np


@dataclass
class AudioFrame:
    """A single analysis frame handed to a voice classifier."""
    pcm_data: np.ndarray  # int16 PCM samples, exactly one frame long
    sample_rate: int
    index: int  # position of the frame within its stream

    def __post_init__(self):
        """Validate frame data."""
        if self.pcm_data.dtype != np.int16:
            raise ValueError(f"Expected int16 PCM, got {self.pcm_data.dtype}")
        if len(self.pcm_data.shape) != 1:
            raise ValueError(f"Expected mono (1D array), got shape {self.pcm_data.shape}")

    @property
    def start_ms(self) -> float:
        """Offset of the first sample from the start of the stream."""
        return self.index * len(self.pcm_data) * 1000.0 / self.sample_rate


class SinkState(Enum):
    """Lifecycle state of an audio sink."""
    OPEN = "open"
    CLOSED = "closed"
