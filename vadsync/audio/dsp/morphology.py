"""1-D mathematical morphology on boolean voice-activity sequences.

Only interior positions (at least `radius` away from both ends) are rewritten;
the first and last `radius` values are copied through unchanged.
"""
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from typing import List, Sequence


def _windows(seq: Sequence[bool], radius: int):
    data = np.asarray(seq, dtype=bool)
    width = 2 * radius + 1
    if radius < 0:
        raise ValueError(f"radius must be non-negative, got {radius}")
    if data.size < width:
        return data, None
    return data, sliding_window_view(data, width)


def erosion(seq: Sequence[bool], radius: int) -> List[bool]:
    """
    The morphological 'erode' operator.

    A true value survives only if every value within `radius` on both sides is
    also true.
    """
    data, windows = _windows(seq, radius)
    output = data.copy()
    if windows is not None and radius > 0:
        output[radius:data.size - radius] = windows.all(axis=1)
    return output.tolist()


def dilation(seq: Sequence[bool], radius: int) -> List[bool]:
    """
    The morphological 'dilate' operator.

    A false value becomes true if any value within `radius` on either side is
    true.
    """
    data, windows = _windows(seq, radius)
    output = data.copy()
    if windows is not None and radius > 0:
        output[radius:data.size - radius] = windows.any(axis=1)
    return output.tolist()


def opening(seq: Sequence[bool], radius: int) -> List[bool]:
    """Erosion then dilation: removes activity spans shorter than 2r+1 frames."""
    return dilation(erosion(seq, radius), radius)


def closing(seq: Sequence[bool], radius: int) -> List[bool]:
    """Dilation then erosion: fills gaps shorter than 2r+1 frames."""
    return erosion(dilation(seq, radius), radius)
