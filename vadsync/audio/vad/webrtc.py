"""Voice classifier backed by the WebRTC VAD."""
import numpy as np

from vadsync.audio.vad.base import VoiceClassifier
from vadsync.core.errors import ClassifierInitError, VoiceDetectionError

LOW_BITRATE_MODE = 1


class WebRtcClassifier(VoiceClassifier):
    """WebRTC VAD over 30ms frames at 8kHz."""

    name = "webrtc"
    sample_rate = 8000
    chunk_duration_ms = 30  # webrtcvad accepts 10, 20 or 30ms frames

    def __init__(self, mode: int = LOW_BITRATE_MODE):
        """
        Args:
            mode: VAD aggressiveness (0=quality, 1=low bitrate, 2=aggressive, 3=very aggressive)
        """
        try:
            import webrtcvad
        except ImportError as exc:
            raise ClassifierInitError(
                "webrtcvad not installed, webrtc backend unavailable. Install with: pip install webrtcvad"
            ) from exc

        try:
            self._vad = webrtcvad.Vad(mode)
        except Exception as e:
            raise ClassifierInitError(f"Unable to create WebRTC VAD (mode={mode}): {e}") from e
        self.mode = mode

    def _classify_frame(self, frame: np.ndarray) -> bool:
        try:
            return self._vad.is_speech(frame.astype("<i2").tobytes(), self.sample_rate)
        except Exception as e:
            raise VoiceDetectionError(f"webrtc-vad unable to process samples! ({e})") from e
