"""Raw dumps of sink input and decisions, for debugging classifiers offline."""
import os
import numpy as np
from typing import List, Optional

from vadsync.audio.models import AudioFrame
from vadsync.core.logging import logger

SAMPLE_DATA_FILE = "vadsync-sample-data.raw"
ACTIVITY_DATA_FILE = "vadsync-voice-activity-data"


class RawDumpObserver:
    """
    Frame observer writing every classified frame to two files.

    Samples are appended as little-endian PCM16; each decision is one byte
    (1 for voice, 0 otherwise).
    """

    def __init__(self, directory: Optional[str] = None):
        directory = directory or os.getcwd()
        self.sample_path = os.path.join(directory, SAMPLE_DATA_FILE)
        self.activity_path = os.path.join(directory, ACTIVITY_DATA_FILE)
        self._samples = open(self.sample_path, "wb")
        self._activity = open(self.activity_path, "wb")
        logger.info(f"Dumping sink data to {directory}")

    def on_frame(self, frame: AudioFrame, is_voice: bool) -> None:
        self._samples.write(frame.pcm_data.astype("<i2").tobytes())
        self._activity.write(b"\x01" if is_voice else b"\x00")

    def close(self) -> None:
        self._samples.close()
        self._activity.close()

    def __enter__(self) -> "RawDumpObserver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def load_sample_data(path: str) -> np.ndarray:
    """Load dumped samples as an int16 array (a trailing odd byte is ignored)."""
    with open(path, "rb") as handle:
        data = handle.read()
    return np.frombuffer(data[:len(data) - len(data) % 2], dtype="<i2").astype(np.int16)


def load_activity_data(path: str) -> List[bool]:
    """Load dumped decisions."""
    with open(path, "rb") as handle:
        return [byte != 0 for byte in handle.read()]
