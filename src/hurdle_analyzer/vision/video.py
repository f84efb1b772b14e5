"""Seekable video file source backed by OpenCV."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import cv2

from hurdle_analyzer.core.exceptions import VideoStreamError
from hurdle_analyzer.core.logging import get_logger

if TYPE_CHECKING:
    import numpy as np
    from numpy.typing import NDArray

logger = get_logger(__name__)


class OpenCVVideoSource:
    """VideoSource reading a video file with cv2.VideoCapture.

    Seeking moves the capture's single playback cursor, so one instance
    must not be read from several threads at once.
    """

    def __init__(self, path: Path | str) -> None:
        """Open a video file.

        Args:
            path: Path to the video file

        Raises:
            VideoStreamError: If the file cannot be opened
        """
        self.path = Path(path)
        self._capture = cv2.VideoCapture(str(self.path))

        if not self._capture.isOpened():
            raise VideoStreamError(f"Could not open video: {self.path}")

        reported_fps = self._capture.get(cv2.CAP_PROP_FPS)
        self._fps = float(reported_fps) if reported_fps and reported_fps > 0 else None
        self._frame_count = int(self._capture.get(cv2.CAP_PROP_FRAME_COUNT))
        self._height = int(self._capture.get(cv2.CAP_PROP_FRAME_HEIGHT))

        logger.info(
            "Opened %s (%d frames, %s fps, %d px high)",
            self.path.name,
            self._frame_count,
            f"{self._fps:.1f}" if self._fps else "unknown",
            self._height,
        )

    @property
    def fps(self) -> float | None:
        """Frame rate reported by the container, if any."""
        return self._fps

    @property
    def duration(self) -> float:
        """Video duration in seconds (0 if unknown)."""
        if not self._fps or self._frame_count <= 0:
            return 0.0
        return self._frame_count / self._fps

    def read_at(self, timestamp: float) -> NDArray[np.uint8] | None:
        """Seek to a position and decode the frame there.

        Args:
            timestamp: Position in seconds

        Returns:
            BGR image array, or None past the end of the video

        Raises:
            VideoStreamError: If the capture has been released
        """
        if not self._capture.isOpened():
            raise VideoStreamError(f"Video {self.path} is closed")

        self._capture.set(cv2.CAP_PROP_POS_MSEC, timestamp * 1000.0)
        ok, image = self._capture.read()
        if not ok:
            return None
        return image

    def close(self) -> None:
        """Release the capture."""
        self._capture.release()

    def __enter__(self) -> OpenCVVideoSource:
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
