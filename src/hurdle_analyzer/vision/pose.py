"""MediaPipe pose estimation wrapper using the Tasks API."""

from __future__ import annotations

import urllib.request
from pathlib import Path

import cv2
import mediapipe as mp
from mediapipe.tasks import python
from mediapipe.tasks.python import vision

from hurdle_analyzer.core.config import PoseSettings
from hurdle_analyzer.core.exceptions import PoseEstimationError
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import Frame, Keypoint, KeypointName, Pose

logger = get_logger(__name__)

# MediaPipe's 33-landmark topology mapped onto COCO keypoint names
MEDIAPIPE_KEYPOINTS: dict[int, KeypointName] = {
    0: KeypointName.NOSE,
    2: KeypointName.LEFT_EYE,
    5: KeypointName.RIGHT_EYE,
    7: KeypointName.LEFT_EAR,
    8: KeypointName.RIGHT_EAR,
    11: KeypointName.LEFT_SHOULDER,
    12: KeypointName.RIGHT_SHOULDER,
    13: KeypointName.LEFT_ELBOW,
    14: KeypointName.RIGHT_ELBOW,
    15: KeypointName.LEFT_WRIST,
    16: KeypointName.RIGHT_WRIST,
    23: KeypointName.LEFT_HIP,
    24: KeypointName.RIGHT_HIP,
    25: KeypointName.LEFT_KNEE,
    26: KeypointName.RIGHT_KNEE,
    27: KeypointName.LEFT_ANKLE,
    28: KeypointName.RIGHT_ANKLE,
}


def _download_model(settings: PoseSettings) -> Path:
    """Download the pose landmarker model if not present.

    Returns:
        Path to the model file

    Raises:
        PoseEstimationError: If download fails
    """
    model_path = Path(settings.model_path)
    if model_path.exists():
        return model_path

    logger.info("Downloading MediaPipe pose landmarker model...")
    model_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        urllib.request.urlretrieve(settings.model_url, model_path)
        logger.info("Model downloaded to %s", model_path)
        return model_path
    except Exception as e:
        raise PoseEstimationError(f"Failed to download model: {e}") from e


class MediaPipePoseModel:
    """PoseModel backed by the MediaPipe PoseLandmarker.

    Runs in IMAGE mode since sampled frames are sparse and a model may be
    shared by several videos. Landmarks are converted to pixel-space
    Keypoints so MediaPipe objects never leave this module.
    """

    def __init__(self, settings: PoseSettings | None = None) -> None:
        """Initialize pose model with settings.

        Args:
            settings: Pose estimation settings (uses defaults if None)
        """
        self.settings = settings or PoseSettings()
        self._landmarker: vision.PoseLandmarker | None = None

    @property
    def is_initialized(self) -> bool:
        """Check if the MediaPipe model is loaded."""
        return self._landmarker is not None

    def initialize(self) -> None:
        """Load the MediaPipe pose model.

        Raises:
            PoseEstimationError: If model fails to load
        """
        if self._landmarker is not None:
            return

        try:
            model_path = _download_model(self.settings)

            options = vision.PoseLandmarkerOptions(
                base_options=python.BaseOptions(model_asset_path=str(model_path)),
                running_mode=vision.RunningMode.IMAGE,
                num_poses=1,
                min_pose_detection_confidence=self.settings.min_detection_confidence,
                min_pose_presence_confidence=self.settings.min_presence_confidence,
            )

            self._landmarker = vision.PoseLandmarker.create_from_options(options)
            logger.info("MediaPipe PoseLandmarker initialized (Tasks API)")

        except PoseEstimationError:
            raise
        except Exception as e:
            raise PoseEstimationError(f"Failed to initialize MediaPipe: {e}") from e

    def close(self) -> None:
        """Release MediaPipe resources."""
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None

    def estimate(self, frame: Frame) -> list[Pose]:
        """Run pose estimation on a frame.

        Args:
            frame: Sampled frame with decoded image

        Returns:
            Detected poses (at most one)

        Raises:
            PoseEstimationError: If the model is not loaded or inference fails
        """
        if self._landmarker is None:
            raise PoseEstimationError("Pose model not initialized")
        if frame.image is None:
            raise PoseEstimationError(f"Frame {frame.index} has no image data")

        try:
            rgb_image = cv2.cvtColor(frame.image, cv2.COLOR_BGR2RGB)
            mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_image)
            results = self._landmarker.detect(mp_image)
        except Exception as e:
            logger.error("Pose estimation failed on frame %d: %s", frame.index, e)
            raise PoseEstimationError(f"Estimation failed: {e}") from e

        return [
            self._convert_landmarks(landmarks, frame.width, frame.height)
            for landmarks in results.pose_landmarks or []
        ]

    def _convert_landmarks(self, landmarks: list, width: int, height: int) -> Pose:
        """Convert normalized MediaPipe landmarks to a pixel-space Pose."""
        keypoints = []
        for idx, name in MEDIAPIPE_KEYPOINTS.items():
            if idx >= len(landmarks):
                continue
            lm = landmarks[idx]
            visibility = getattr(lm, "visibility", None)
            confidence = 1.0 if visibility is None else min(max(float(visibility), 0.0), 1.0)
            keypoints.append(
                Keypoint(
                    name=name.value,
                    x=float(lm.x) * width,
                    y=float(lm.y) * height,
                    confidence=confidence,
                )
            )
        return Pose(keypoints=tuple(keypoints))

    def __enter__(self) -> MediaPipePoseModel:
        """Context manager entry."""
        self.initialize()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Context manager exit."""
        self.close()
