"""Ankle height signal extraction.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from hurdle_analyzer.core.config import PhaseDetectionSettings
from hurdle_analyzer.core.types import AnkleHeightSample, Frame, KeypointName, Pose

ANKLES = (KeypointName.LEFT_ANKLE, KeypointName.RIGHT_ANKLE)


class AnkleHeightExtractor:
    """Reduces a pose to a ground-referenced ankle height.

    The bottom edge of the frame is treated as ground level; no lens or
    perspective correction is applied.
    """

    def __init__(self, settings: PhaseDetectionSettings | None = None) -> None:
        """Initialize extractor with settings.

        Args:
            settings: Phase detection parameters (uses defaults if None)
        """
        self.settings = settings or PhaseDetectionSettings()

    @property
    def threshold_px(self) -> float:
        """Height above which a frame counts as airborne."""
        return self.settings.airborne_threshold_px

    def highest_ankle_y(self, pose: Pose | None) -> float | None:
        """Image row of the higher visible ankle, None without ankles."""
        if pose is None:
            return None

        ankles = [kp for kp in (pose.get(name) for name in ANKLES) if kp is not None]
        if not ankles:
            return None

        # Smaller y is higher in image space
        return min(kp.y for kp in ankles)

    def height_px(self, pose: Pose | None, frame_height: int) -> float:
        """Calculate ankle height above the frame bottom.

        Args:
            pose: Detected pose, or None
            frame_height: Frame height in pixels

        Returns:
            Height in pixels, 0 when no ankle is visible
        """
        highest_y = self.highest_ankle_y(pose)
        if highest_y is None:
            return 0.0
        return max(0.0, frame_height - highest_y)

    def extract(self, pose: Pose | None, frame: Frame) -> AnkleHeightSample:
        """Build the height sample for one frame.

        Args:
            pose: Detected pose, or None
            frame: Frame the pose was detected in

        Returns:
            AnkleHeightSample with airborne flag
        """
        frame_height = frame.height or self.settings.default_frame_height_px
        height = self.height_px(pose, frame_height)

        return AnkleHeightSample(
            frame_index=frame.index,
            height_px=height,
            is_airborne=height > self.threshold_px,
            x_px=pose.hip_center_x if pose is not None else None,
            y_px=self.highest_ankle_y(pose),
        )
