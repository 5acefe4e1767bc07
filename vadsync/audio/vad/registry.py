"""Voice classifier registry."""
from typing import Callable, Dict, Optional

from vadsync.audio.vad.base import VoiceClassifier
from vadsync.audio.vad.energy import EnergyClassifier
from vadsync.audio.vad.silero import SileroClassifier
from vadsync.audio.vad.webrtc import WebRtcClassifier
from vadsync.core.config import settings
from vadsync.core.logging import logger


def _energy() -> VoiceClassifier:
    return EnergyClassifier(
        rms_mult=settings.energy_rms_mult,
        hangover_frames=settings.energy_hangover_frames,
        noise_alpha=settings.energy_noise_alpha,
        noise_floor=settings.energy_noise_floor,
    )


def _webrtc() -> VoiceClassifier:
    return WebRtcClassifier(mode=settings.webrtc_mode)


def _silero() -> VoiceClassifier:
    return SileroClassifier(
        model_path=settings.silero_model_path,
        threshold=settings.silero_threshold,
        num_threads=settings.silero_num_threads,
    )


_BACKENDS: Dict[str, Callable[[], VoiceClassifier]] = {
    "energy": _energy,
    "webrtc": _webrtc,
    "silero": _silero,
}


def available_backends() -> list[str]:
    return list(_BACKENDS)


def create_classifier(name: Optional[str] = None) -> VoiceClassifier:
    """
    Create a fresh classifier instance for the named backend.

    Args:
        name: Backend name (defaults to the configured backend)

    Returns:
        New VoiceClassifier with its own state
    """
    backend = name or settings.vad_backend
    if backend not in _BACKENDS:
        raise ValueError(f"Unknown voice classifier backend: {backend!r} (available: {available_backends()})")
    classifier = _BACKENDS[backend]()
    logger.debug(
        f"Created {backend} classifier ({classifier.chunk_duration_ms}ms frames at {classifier.sample_rate}Hz)"
    )
    return classifier
