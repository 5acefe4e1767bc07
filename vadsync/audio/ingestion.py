"""Helper functions for ingesting and converting incoming audio samples."""
import numpy as np
from typing import Optional, Sequence, Union
from vadsync.core.logging import logger

Samples = Union[np.ndarray, Sequence[int]]


def validate_pcm_bytes(data: bytes, expected_size: Optional[int] = None) -> bool:
    """
    Validate raw PCM16 audio data.

    Empty input is valid (it simply carries no samples).

    Args:
        data: Raw audio bytes
        expected_size: Expected size in bytes (optional)

    Returns:
        True if valid, False otherwise
    """
    # Check if size is multiple of 2 (int16 = 2 bytes)
    if len(data) % 2 != 0:
        logger.warning(f"Audio data size {len(data)} is not multiple of 2 bytes")
        return False

    if expected_size is not None and len(data) != expected_size:
        logger.warning(f"Audio data size {len(data)} != expected {expected_size}")
        return False

    return True


def pcm_bytes_to_samples(data: bytes) -> np.ndarray:
    """
    Convert raw little-endian PCM16 bytes to an int16 sample array.

    Args:
        data: Raw PCM int16 bytes (mono)

    Returns:
        1-D int16 numpy array

    Raises:
        ValueError: if the byte count is not a whole number of samples
    """
    if not validate_pcm_bytes(data):
        raise ValueError(f"PCM16 data must have an even byte count, got {len(data)}")
    return np.frombuffer(data, dtype="<i2").astype(np.int16)


def as_pcm16(samples: Samples) -> np.ndarray:
    """
    Coerce incoming samples to a 1-D int16 array.

    numpy input must already be int16; plain integer sequences are converted
    (values outside the int16 range are rejected).

    Args:
        samples: int16 numpy array or sequence of ints

    Returns:
        1-D int16 numpy array
    """
    if isinstance(samples, np.ndarray):
        if samples.dtype != np.int16:
            raise ValueError(f"Expected int16 PCM, got {samples.dtype}")
        pcm = samples
    else:
        values = np.asarray(list(samples), dtype=np.int64)
        if values.size and (values.min() < -32768 or values.max() > 32767):
            raise ValueError("Sample values must fit in a signed 16-bit integer")
        pcm = values.astype(np.int16)

    if len(pcm.shape) != 1:
        raise ValueError(f"Expected mono (1D array), got shape {pcm.shape}")
    return pcm
