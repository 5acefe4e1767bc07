"""Streaming audio sink that turns samples into a voice-activity track."""
import numpy as np
from typing import List, Optional, Protocol

from vadsync.audio.activity import ActivityTrack
from vadsync.audio.ingestion import Samples, as_pcm16, pcm_bytes_to_samples
from vadsync.audio.models import AudioFrame, SinkState
from vadsync.audio.vad.base import VoiceClassifier
from vadsync.audio.vad.registry import create_classifier
from vadsync.core.errors import SinkClosedError, VoiceDetectionError
from vadsync.core.logging import logger


class FrameObserver(Protocol):
    """Receives every classified frame (used for debug dumps)."""

    def on_frame(self, frame: AudioFrame, is_voice: bool) -> None:
        ...


class AudioSink:
    """
    Receives audio samples and classifies them frame by frame.

    Samples may arrive in chunks of any size; complete frames are classified
    as soon as they are available and the remainder is kept as a backlog for
    the next call. The resulting track does not depend on how the stream was
    split. Not thread-safe: one sink per stream.
    """

    def __init__(
        self,
        classifier: Optional[VoiceClassifier] = None,
        observer: Optional[FrameObserver] = None
    ):
        """
        Initialize an open sink.

        Args:
            classifier: Voice classifier owned by this sink (defaults to the
                configured backend)
            observer: Optional receiver of every classified frame
        """
        self.classifier = classifier if classifier is not None else create_classifier()
        self.observer = observer
        self._state = SinkState.OPEN
        self._backlog = np.zeros(0, dtype=np.int16)
        self._decisions: List[bool] = []

    @property
    def state(self) -> SinkState:
        return self._state

    @property
    def chunk_size(self) -> int:
        return self.classifier.chunk_size

    @property
    def sample_rate(self) -> int:
        return self.classifier.sample_rate

    @property
    def pending_samples(self) -> int:
        """Number of buffered samples waiting for a complete frame."""
        return len(self._backlog)

    @property
    def frames_processed(self) -> int:
        return len(self._decisions)

    def send(self, samples: Samples) -> None:
        """
        Receive incoming samples.

        Args:
            samples: int16 mono samples at the classifier's sample rate

        Raises:
            SinkClosedError: if the sink has been closed
            VoiceDetectionError: if the classifier fails; frames classified
                before the failure are kept
        """
        if self._state is SinkState.CLOSED:
            raise SinkClosedError()

        incoming = as_pcm16(samples)
        chunk = self.chunk_size
        backlog_len = len(self._backlog)

        if backlog_len + len(incoming) < chunk:
            # Not enough data for a complete frame yet
            self._backlog = np.concatenate((self._backlog, incoming))
            return

        # First frame combines the backlog with the head of the incoming samples
        head = chunk - backlog_len
        first = np.concatenate((self._backlog, incoming[:head]))
        rest = incoming[head:]
        whole = len(rest) - len(rest) % chunk

        # Keep the tail for the next call before classifying
        self._backlog = rest[whole:].copy()

        self._process_frame(first)
        for offset in range(0, whole, chunk):
            self._process_frame(rest[offset:offset + chunk])

    def send_bytes(self, data: bytes) -> None:
        """Receive little-endian PCM16 bytes (see `send`)."""
        self.send(pcm_bytes_to_samples(data))

    def close(self) -> None:
        """
        Close the sink, flushing any buffered samples.

        The backlog is zero-padded to a full frame and classified. Closing an
        already closed sink does nothing.
        """
        if self._state is SinkState.CLOSED:
            return

        if len(self._backlog) > 0:
            frame = np.zeros(self.chunk_size, dtype=np.int16)
            frame[:len(self._backlog)] = self._backlog
            self._process_frame(frame)
            self._backlog = np.zeros(0, dtype=np.int16)

        self._state = SinkState.CLOSED
        logger.info(
            f"Audio sink closed after {len(self._decisions)} frames "
            f"({sum(self._decisions)} with voice)"
        )

    def activity(self) -> ActivityTrack:
        """Return the voice-activity track, closing the sink if still open."""
        self.close()
        return ActivityTrack(
            frames=tuple(self._decisions),
            chunk_duration_ms=self.classifier.chunk_duration_ms
        )

    def _process_frame(self, pcm: np.ndarray) -> None:
        """Classify exactly one frame and record the decision."""
        try:
            is_voice = self.classifier.classify(pcm)
        except VoiceDetectionError as e:
            logger.error(f"Error processing samples: {e}")
            raise
        except Exception as e:
            logger.error(f"Error processing samples: {e}", exc_info=True)
            raise VoiceDetectionError(f"An error occurred during voice-detection ({e})") from e

        index = len(self._decisions)
        self._decisions.append(is_voice)

        if self.observer is not None:
            frame = AudioFrame(pcm_data=pcm, sample_rate=self.sample_rate, index=index)
            self.observer.on_frame(frame, is_voice)
