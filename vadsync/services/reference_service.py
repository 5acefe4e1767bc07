"""Building and caching reference intervals from audio streams."""
from typing import Iterable, Optional, Union

import numpy as np

from vadsync.audio.sink import AudioSink, FrameObserver
from vadsync.audio.vad.registry import create_classifier
from vadsync.core.config import settings
from vadsync.core.errors import IntervalFileNotFoundError
from vadsync.core.logging import logger
from vadsync.sync.intervals import IntervalSet

Chunk = Union[np.ndarray, bytes]


class ReferenceService:
    """Turns audio streams into reference intervals for synchronization."""

    def __init__(
        self,
        backend: Optional[str] = None,
        opening_radius: Optional[int] = None,
        closing_radius: Optional[int] = None
    ):
        """
        Args:
            backend: Voice classifier backend (defaults to config value)
            opening_radius: Noise removal radius in frames (defaults to config value)
            closing_radius: Gap filling radius in frames (defaults to config value)
        """
        self.backend = backend
        self.opening_radius = opening_radius
        self.closing_radius = closing_radius

    def open_sink(self, observer: Optional[FrameObserver] = None) -> AudioSink:
        """Create a sink with a fresh classifier for one stream."""
        return AudioSink(create_classifier(self.backend), observer=observer)

    def finish(self, sink: AudioSink) -> IntervalSet:
        """Close a sink and turn its cleaned activity into intervals."""
        opening = settings.opening_radius if self.opening_radius is None else self.opening_radius
        closing = settings.closing_radius if self.closing_radius is None else self.closing_radius

        activity = sink.activity()
        if opening or closing:
            activity = activity.clean(opening, closing)
        intervals = activity.to_intervals()
        logger.info(
            f"Computed {len(intervals)} reference intervals from {len(activity)} frames "
            f"(voice ratio {activity.voice_ratio:.2f}, opening={opening}, closing={closing})"
        )
        return intervals

    def from_stream(
        self,
        chunks: Iterable[Chunk],
        observer: Optional[FrameObserver] = None
    ) -> IntervalSet:
        """
        Classify a whole stream of sample chunks and return its intervals.

        Args:
            chunks: int16 arrays or raw PCM16 bytes at the backend's sample rate
            observer: Optional frame observer (debug dumps)

        Returns:
            Reference IntervalSet
        """
        sink = self.open_sink(observer)
        for chunk in chunks:
            if isinstance(chunk, (bytes, bytearray)):
                sink.send_bytes(bytes(chunk))
            else:
                sink.send(chunk)
        return self.finish(sink)

    def load_cached(self, path: str) -> Optional[IntervalSet]:
        """
        Load previously cached reference intervals.

        Returns:
            The cached IntervalSet, or None if nothing has been cached at `path`
        """
        try:
            return IntervalSet.load(path)
        except IntervalFileNotFoundError:
            logger.debug(f"No cached reference intervals at {path}")
            return None

    def cached_or_compute(self, path: str, chunks: Iterable[Chunk]) -> IntervalSet:
        """Return cached intervals, computing and caching them on a miss."""
        cached = self.load_cached(path)
        if cached is not None:
            logger.info(f"Using cached reference intervals from {path}")
            return cached

        intervals = self.from_stream(chunks)
        intervals.save(path)
        return intervals


# Global reference service instance
reference_service = ReferenceService()
