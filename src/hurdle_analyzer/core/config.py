"""Application configuration via Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SamplingSettings(BaseSettings):
    """Frame sampling parameters."""

    model_config = SettingsConfigDict(env_prefix="SAMPLING_")

    frame_stride: int = Field(default=5, ge=1)
    max_frames: int = Field(default=150, ge=1)
    default_fps: float = Field(default=30.0, gt=0)
    seek_timeout_s: float | None = 2.0
    inference_timeout_s: float | None = 5.0


class PoseSettings(BaseSettings):
    """MediaPipe pose estimation settings."""

    model_config = SettingsConfigDict(env_prefix="POSE_")

    model_url: str = (
        "https://storage.googleapis.com/mediapipe-models/pose_landmarker/"
        "pose_landmarker_lite/float16/latest/pose_landmarker_lite.task"
    )
    model_path: str = "data/models/pose_landmarker_lite.task"
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5


class PhaseDetectionSettings(BaseSettings):
    """Flight phase detection parameters."""

    model_config = SettingsConfigDict(env_prefix="PHASE_")

    airborne_threshold_px: float = 50.0
    default_frame_height_px: int = Field(default=480, gt=0)
    interval_policy: Literal["longest", "first", "merge"] = "longest"
    merge_gap_frames: int = Field(default=5, ge=0)


class MetricsSettings(BaseSettings):
    """Metric derivation parameters."""

    model_config = SettingsConfigDict(env_prefix="METRICS_")

    ambiguity_penalty: float = Field(default=0.5, ge=0.0, le=1.0)
    max_obstacle_height_cm: float = 120.0


class SimulationSettings(BaseSettings):
    """Fallback metrics generator parameters."""

    model_config = SettingsConfigDict(env_prefix="SIMULATION_")

    primary_variation: float = Field(default=0.2, ge=0.0, lt=2.0)
    contact_variation: float = Field(default=0.1, ge=0.0, lt=2.0)
    simulated_confidence: float = Field(default=0.3, ge=0.0, le=0.5)
    seed: int | None = None


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: str = "INFO"
    file: str | None = None
    # Per-module overrides, e.g. LOG_LEVELS='{"pipeline.sampler": "DEBUG"}'
    levels: dict[str, str] = Field(default_factory=dict)


class Settings(BaseSettings):
    """Root settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    sampling: SamplingSettings = Field(default_factory=SamplingSettings)
    pose: PoseSettings = Field(default_factory=PoseSettings)
    phase: PhaseDetectionSettings = Field(default_factory=PhaseDetectionSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)
    simulation: SimulationSettings = Field(default_factory=SimulationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings instance."""
    return Settings()
