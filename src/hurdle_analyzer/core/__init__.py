"""Core infrastructure: config, types, exceptions, and logging."""

from hurdle_analyzer.core.config import Settings, get_settings
from hurdle_analyzer.core.exceptions import (
    HurdleAnalyzerError,
    InsufficientDataError,
    PhaseDetectionError,
    PoseEstimationError,
    ValidationError,
    VideoStreamError,
)
from hurdle_analyzer.core.logging import get_logger, setup_logging
from hurdle_analyzer.core.types import (
    NO_FLIGHT,
    AnalysisResult,
    AnkleHeightSample,
    FlightInterval,
    FlightPhase,
    Frame,
    Keypoint,
    KeypointName,
    ObstacleCategory,
    ObstacleProfile,
    ObstacleReference,
    Pose,
    PoseModel,
    ResultSource,
    SampledFrame,
    SamplingStats,
    VideoSource,
)

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Types
    "Keypoint",
    "KeypointName",
    "Pose",
    "Frame",
    "AnkleHeightSample",
    "FlightPhase",
    "FlightInterval",
    "NO_FLIGHT",
    "ObstacleCategory",
    "ObstacleProfile",
    "ObstacleReference",
    "ResultSource",
    "AnalysisResult",
    "SamplingStats",
    "SampledFrame",
    "PoseModel",
    "VideoSource",
    # Exceptions
    "HurdleAnalyzerError",
    "ValidationError",
    "InsufficientDataError",
    "VideoStreamError",
    "PoseEstimationError",
    "PhaseDetectionError",
    # Logging
    "setup_logging",
    "get_logger",
]
