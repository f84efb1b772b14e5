"""Core data types and structures."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from hurdle_analyzer.core.exceptions import ValidationError


class KeypointName(str, Enum):
    """COCO body keypoint names (the MoveNet/MediaPipe common subset)."""

    NOSE = "nose"
    LEFT_EYE = "left_eye"
    RIGHT_EYE = "right_eye"
    LEFT_EAR = "left_ear"
    RIGHT_EAR = "right_ear"
    LEFT_SHOULDER = "left_shoulder"
    RIGHT_SHOULDER = "right_shoulder"
    LEFT_ELBOW = "left_elbow"
    RIGHT_ELBOW = "right_elbow"
    LEFT_WRIST = "left_wrist"
    RIGHT_WRIST = "right_wrist"
    LEFT_HIP = "left_hip"
    RIGHT_HIP = "right_hip"
    LEFT_KNEE = "left_knee"
    RIGHT_KNEE = "right_knee"
    LEFT_ANKLE = "left_ankle"
    RIGHT_ANKLE = "right_ankle"


@dataclass(frozen=True, slots=True)
class Keypoint:
    """A named body landmark in pixel space.

    Attributes:
        name: Landmark name (see KeypointName)
        x: Horizontal pixel coordinate
        y: Vertical pixel coordinate (grows downward)
        confidence: Detection confidence [0, 1]
    """

    name: str
    x: float
    y: float
    confidence: float = 1.0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Keypoint name must not be empty")
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValidationError(f"Keypoint {self.name} has non-finite coordinates")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValidationError(
                f"Keypoint {self.name} confidence {self.confidence} outside [0, 1]"
            )


@dataclass(frozen=True, slots=True)
class Pose:
    """Keypoints of the single tracked subject in one frame."""

    keypoints: tuple[Keypoint, ...]

    def __post_init__(self) -> None:
        names = [kp.name for kp in self.keypoints]
        if len(names) != len(set(names)):
            raise ValidationError("Pose contains duplicate keypoint names")

    def get(self, name: KeypointName | str) -> Keypoint | None:
        """Look up a keypoint by name."""
        key = name.value if isinstance(name, KeypointName) else name
        for kp in self.keypoints:
            if kp.name == key:
                return kp
        return None

    @property
    def confidence(self) -> float:
        """Mean keypoint confidence, 0 for an empty pose."""
        if not self.keypoints:
            return 0.0
        return sum(kp.confidence for kp in self.keypoints) / len(self.keypoints)

    @property
    def hip_center_x(self) -> float | None:
        """Horizontal center of the hips, falling back to the ankles."""
        for pair in (
            (KeypointName.LEFT_HIP, KeypointName.RIGHT_HIP),
            (KeypointName.LEFT_ANKLE, KeypointName.RIGHT_ANKLE),
        ):
            points = [kp for kp in (self.get(pair[0]), self.get(pair[1])) if kp is not None]
            if points:
                return sum(kp.x for kp in points) / len(points)
        return None


@dataclass(slots=True)
class Frame:
    """A sampled video frame.

    Attributes:
        index: Frame number in the source video
        timestamp: Position in seconds
        image: BGR image array (OpenCV format), if decoded
    """

    index: int
    timestamp: float
    image: NDArray[np.uint8] | None = None

    @property
    def width(self) -> int:
        """Frame width in pixels (0 without image)."""
        return int(self.image.shape[1]) if self.image is not None else 0

    @property
    def height(self) -> int:
        """Frame height in pixels (0 without image)."""
        return int(self.image.shape[0]) if self.image is not None else 0


@dataclass(frozen=True, slots=True)
class AnkleHeightSample:
    """Ground-referenced ankle height for one frame.

    Attributes:
        frame_index: Frame the sample was taken from
        height_px: Highest ankle above the frame bottom
        is_airborne: Height is above the airborne threshold
        x_px: Horizontal hip position, if a pose was found
        y_px: Image row of the highest ankle, if one was visible
    """

    frame_index: int
    height_px: float
    is_airborne: bool
    x_px: float | None = None
    y_px: float | None = None


class FlightPhase(Enum):
    """States in the flight phase state machine."""

    GROUNDED = auto()
    AIRBORNE = auto()


@dataclass(frozen=True, slots=True)
class FlightInterval:
    """One grounded -> airborne -> grounded excursion.

    ``start_frame`` is the first airborne frame, ``end_frame`` the first
    grounded frame after it.
    """

    start_frame: int
    end_frame: int

    @property
    def is_valid(self) -> bool:
        """True for a closed interval with 0 <= start < end."""
        return 0 <= self.start_frame < self.end_frame

    @property
    def frames(self) -> int:
        """Interval length in frames (0 if invalid)."""
        return self.end_frame - self.start_frame if self.is_valid else 0


NO_FLIGHT = FlightInterval(start_frame=-1, end_frame=-1)


class ObstacleCategory(Enum):
    """Hurdle height categories."""

    YOUTH = auto()
    WOMEN = auto()
    JUNIOR = auto()
    SENIOR = auto()


@dataclass(frozen=True, slots=True)
class ObstacleProfile:
    """Baseline metrics for an obstacle height bracket."""

    height_cm: float
    category: ObstacleCategory
    baseline_takeoff_distance_m: float
    baseline_landing_distance_m: float
    baseline_flight_time_s: float
    baseline_clearance_cm: float
    baseline_takeoff_contact_s: float = 0.13
    baseline_landing_contact_s: float = 0.11


@dataclass(frozen=True, slots=True)
class ObstacleReference:
    """Pixel-space position of the hurdle used for scale calibration.

    Attributes:
        bar_x_px: Horizontal position of the bar
        bar_top_y_px: Vertical position of the top of the bar
        ground_y_px: Vertical position of the hurdle feet on the ground
    """

    bar_x_px: float
    bar_top_y_px: float
    ground_y_px: float

    def __post_init__(self) -> None:
        if not all(math.isfinite(v) for v in (self.bar_x_px, self.bar_top_y_px, self.ground_y_px)):
            raise ValidationError("Obstacle reference coordinates must be finite")
        if self.span_px <= 0:
            raise ValidationError("Obstacle bar top must be above the ground line")

    @property
    def span_px(self) -> float:
        """Obstacle height in pixels."""
        return self.ground_y_px - self.bar_top_y_px


class ResultSource(Enum):
    """How an AnalysisResult was produced."""

    MEASURED = "measured"
    ESTIMATED = "estimated"
    SIMULATED = "simulated"
    DEMO = "demo"


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Biomechanical metrics for one hurdle clearance.

    Attributes:
        flight_time_s: Takeoff to landing duration
        takeoff_distance_m: Takeoff point to hurdle distance
        landing_distance_m: Hurdle to landing point distance
        takeoff_contact_s: Ground contact before takeoff
        landing_contact_s: Ground contact after landing
        clearance_cm: Height of the tracked point above the bar
        confidence: Reliability of the measurement [0, 1]
        source: How the values were produced
        estimated_fields: Fields that came from bracket baselines
        hurdle_height_cm: Obstacle height the result refers to
        technical_score: Technique score [0, 100], if scored
        comment: Coaching remarks, if scored
    """

    flight_time_s: float
    takeoff_distance_m: float
    landing_distance_m: float
    takeoff_contact_s: float
    landing_contact_s: float
    clearance_cm: float
    confidence: float
    source: ResultSource = ResultSource.MEASURED
    estimated_fields: tuple[str, ...] = ()
    hurdle_height_cm: float | None = None
    technical_score: float | None = None
    comment: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible types."""
        data = asdict(self)
        data["source"] = self.source.value
        data["estimated_fields"] = list(self.estimated_fields)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisResult:
        """Rebuild a result serialized with to_dict."""
        return cls(
            flight_time_s=data["flight_time_s"],
            takeoff_distance_m=data["takeoff_distance_m"],
            landing_distance_m=data["landing_distance_m"],
            takeoff_contact_s=data["takeoff_contact_s"],
            landing_contact_s=data["landing_contact_s"],
            clearance_cm=data["clearance_cm"],
            confidence=data["confidence"],
            source=ResultSource(data.get("source", ResultSource.MEASURED.value)),
            estimated_fields=tuple(data.get("estimated_fields", ())),
            hurdle_height_cm=data.get("hurdle_height_cm"),
            technical_score=data.get("technical_score"),
            comment=data.get("comment"),
        )


@dataclass(slots=True)
class SamplingStats:
    """Counters for one sampling run.

    Attributes:
        planned: Frame positions scheduled for sampling
        read: Positions whose frame was read successfully
        with_pose: Frames where at least one pose was detected
    """

    planned: int = 0
    read: int = 0
    with_pose: int = 0

    @property
    def missing(self) -> int:
        """Positions that were skipped or not reached."""
        return self.planned - self.read


@dataclass(slots=True)
class SampledFrame:
    """A sampled frame paired with the poses detected in it."""

    frame: Frame
    poses: list[Pose] = field(default_factory=list)

    @property
    def pose(self) -> Pose | None:
        """The tracked subject (first detection), if any."""
        return self.poses[0] if self.poses else None


@runtime_checkable
class PoseModel(Protocol):
    """Pose inference capability.

    ``initialize`` raises PoseEstimationError when the model cannot be
    loaded; ``estimate`` raises PoseEstimationError on a per-frame failure.
    """

    def initialize(self) -> None: ...

    def estimate(self, frame: Frame) -> list[Pose]: ...


@runtime_checkable
class VideoSource(Protocol):
    """Seekable video handle.

    ``read_at`` moves the shared playback cursor and returns the decoded
    image, or None when no frame exists at that position.
    """

    @property
    def duration(self) -> float: ...

    @property
    def fps(self) -> float | None: ...

    def read_at(self, timestamp: float) -> NDArray[np.uint8] | None: ...
