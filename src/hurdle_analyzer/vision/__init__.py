"""Computer vision adapters: MediaPipe pose model and OpenCV video source."""

from hurdle_analyzer.vision.pose import MediaPipePoseModel
from hurdle_analyzer.vision.video import OpenCVVideoSource

__all__ = ["MediaPipePoseModel", "OpenCVVideoSource"]
