"""Custom exceptions for Hurdle Analyzer."""


class HurdleAnalyzerError(Exception):
    """Base exception for all Hurdle Analyzer errors."""

    pass


class ValidationError(HurdleAnalyzerError):
    """Input value is outside the supported domain."""

    def __init__(self, message: str = "Invalid input") -> None:
        self.message = message
        super().__init__(self.message)


class InsufficientDataError(HurdleAnalyzerError):
    """Not enough sampled frames to compute metrics."""

    def __init__(self, message: str = "No frames were sampled") -> None:
        self.message = message
        super().__init__(self.message)


class VideoStreamError(HurdleAnalyzerError):
    """Error seeking or reading frames from a video source."""

    def __init__(self, message: str = "Video stream error") -> None:
        self.message = message
        super().__init__(self.message)


class PoseEstimationError(HurdleAnalyzerError):
    """Pose estimation failed or returned invalid data."""

    def __init__(self, message: str = "Pose estimation failed") -> None:
        self.message = message
        super().__init__(self.message)


class PhaseDetectionError(HurdleAnalyzerError):
    """Flight phase detection received an invalid signal."""

    def __init__(self, message: str = "Phase detection error") -> None:
        self.message = message
        super().__init__(self.message)
