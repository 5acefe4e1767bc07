"""Energy-based voice classifier with an adaptive noise floor."""
import numpy as np

from vadsync.audio.vad.base import VoiceClassifier


class EnergyClassifier(VoiceClassifier):
    """
    Quick VAD: compares frame RMS against an adaptive noise floor.

    A frame is voice when its RMS (on the [-1, 1] scale) exceeds
    `noise_floor * rms_mult` (never less than `min_threshold`). After a voice
    frame, up to `hangover_frames` quieter frames are still reported as voice.
    The noise floor follows non-voice frames through an exponential average.
    """

    name = "energy"
    sample_rate = 8000
    chunk_duration_ms = 30

    def __init__(
        self,
        rms_mult: float = 3.0,
        hangover_frames: int = 3,
        noise_alpha: float = 0.02,
        noise_floor: float = 0.005,
        min_threshold: float = 1e-4,
    ):
        self.rms_mult = rms_mult
        self.hangover_frames = hangover_frames
        self.noise_alpha = noise_alpha
        self.min_threshold = min_threshold
        self.noise_floor = noise_floor
        self.hangover = 0

    def _classify_frame(self, frame: np.ndarray) -> bool:
        # convert to float32 [-1, 1]
        x = frame.astype(np.float32) / 32768.0
        rms = float(np.sqrt(np.mean(x * x) + 1e-12))

        thr = max(self.noise_floor * self.rms_mult, self.min_threshold)

        # hangover smoothing
        if rms > thr:
            self.hangover = self.hangover_frames
            return True
        if self.hangover > 0:
            self.hangover -= 1
            return True

        # update noise floor using non-speech frames
        self.noise_floor = (1 - self.noise_alpha) * self.noise_floor + self.noise_alpha * rms
        return False
