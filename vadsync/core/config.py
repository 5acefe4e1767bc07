"""Configuration settings for voice-activity reference building and subtitle sync."""
from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Literal, Optional

from vadsync.sync.options import SyncOptions


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Logging
    log_level: str = "INFO"
    log_stderr_level: str = "WARNING"  # records at or above this go to stderr
    log_file: Optional[str] = None
    log_file_level: str = "DEBUG"

    # Voice classifier selection
    vad_backend: Literal["energy", "webrtc", "silero"] = "energy"

    # Silero (neural) backend
    silero_model_path: Optional[str] = "models/silero_vad.onnx"
    silero_threshold: float = Field(default=0.7, gt=0.0, le=1.0)
    silero_num_threads: int = Field(default=4, ge=1)

    # Energy (heuristic) backend
    energy_rms_mult: float = Field(default=3.0, gt=0.0)
    energy_hangover_frames: int = Field(default=3, ge=0)
    energy_noise_alpha: float = Field(default=0.02, gt=0.0, lt=1.0)
    energy_noise_floor: float = Field(default=0.005, ge=0.0)

    # WebRTC backend (0=quality, 1=low bitrate, 2=aggressive, 3=very aggressive)
    webrtc_mode: int = Field(default=1, ge=0, le=3)

    # Activity cleaning radii in frames (0 disables the stage)
    opening_radius: int = Field(default=0, ge=0)
    closing_radius: int = Field(default=0, ge=0)

    # Alignment options
    sync_interval: int = Field(default=60, ge=1)
    sync_split_mode: bool = True
    sync_split_penalty: float = Field(default=7.0, gt=0.0, le=1000.0)
    sync_speed_optimization: Optional[float] = Field(default=1.0, ge=0.0)  # 0 disables
    sync_framerate_correction: bool = False

    class Config:
        env_prefix = "VADSYNC_"
        env_file = ".env"
        env_file_encoding = "utf-8"

    def sync_options(self) -> SyncOptions:
        """Build the alignment options from the current settings."""
        speed = self.sync_speed_optimization
        return SyncOptions(
            interval=self.sync_interval,
            split_mode=self.sync_split_mode,
            split_penalty=self.sync_split_penalty,
            speed_optimization=speed if speed else None,
            framerate_correction=self.sync_framerate_correction
        )


settings = Settings()
