"""Tests for core data types."""

from __future__ import annotations

import math

import numpy as np
import pytest

from hurdle_analyzer.core.exceptions import ValidationError
from hurdle_analyzer.core.types import (
    NO_FLIGHT,
    AnalysisResult,
    FlightInterval,
    Frame,
    Keypoint,
    KeypointName,
    ObstacleReference,
    Pose,
    PoseModel,
    ResultSource,
    SampledFrame,
    SamplingStats,
    VideoSource,
)


class TestKeypoint:
    """Tests for Keypoint validation."""

    def test_valid_keypoint(self) -> None:
        """A finite keypoint with confidence in range is accepted."""
        kp = Keypoint("left_ankle", 10.0, 20.0, 0.7)
        assert kp.x == 10.0
        assert kp.confidence == 0.7

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_out_of_range(self, confidence: float) -> None:
        """Confidence outside [0, 1] is rejected."""
        with pytest.raises(ValidationError):
            Keypoint("nose", 1.0, 1.0, confidence)

    def test_non_finite_coordinates(self) -> None:
        """NaN and infinite coordinates are rejected."""
        with pytest.raises(ValidationError):
            Keypoint("nose", math.nan, 1.0)
        with pytest.raises(ValidationError):
            Keypoint("nose", 1.0, math.inf)

    def test_empty_name(self) -> None:
        """A keypoint needs a name."""
        with pytest.raises(ValidationError):
            Keypoint("", 1.0, 1.0)


class TestPose:
    """Tests for Pose lookups."""

    def test_duplicate_names_rejected(self) -> None:
        """Keypoint names are unique within a pose."""
        with pytest.raises(ValidationError):
            Pose(keypoints=(Keypoint("nose", 1.0, 1.0), Keypoint("nose", 2.0, 2.0)))

    def test_get_by_enum_or_string(self, pose_at) -> None:
        """Keypoints can be looked up by enum member or name."""
        pose = pose_at(400.0)
        assert pose.get(KeypointName.LEFT_ANKLE) is pose.get("left_ankle")
        assert pose.get(KeypointName.LEFT_KNEE) is None

    def test_confidence_is_mean(self) -> None:
        """Pose confidence is the mean keypoint confidence."""
        pose = Pose(keypoints=(Keypoint("nose", 0, 0, 0.2), Keypoint("left_hip", 0, 0, 0.6)))
        assert pose.confidence == pytest.approx(0.4)
        assert Pose(keypoints=()).confidence == 0.0

    def test_hip_center_falls_back_to_ankles(self) -> None:
        """Without hips the horizontal position comes from the ankles."""
        pose = Pose(
            keypoints=(
                Keypoint("left_ankle", 100.0, 400.0),
                Keypoint("right_ankle", 120.0, 400.0),
            )
        )
        assert pose.hip_center_x == pytest.approx(110.0)
        assert Pose(keypoints=(Keypoint("nose", 1.0, 1.0),)).hip_center_x is None


class TestFrame:
    """Tests for Frame dimensions."""

    def test_dimensions_from_image(self) -> None:
        """Width and height come from the image shape."""
        frame = Frame(index=0, timestamp=0.0, image=np.zeros((480, 640, 3), dtype=np.uint8))
        assert frame.width == 640
        assert frame.height == 480

    def test_dimensions_without_image(self) -> None:
        """A frame without image reports zero size."""
        frame = Frame(index=3, timestamp=0.1)
        assert frame.width == 0
        assert frame.height == 0


class TestFlightInterval:
    """Tests for FlightInterval validity."""

    def test_valid_interval(self) -> None:
        """A closed interval reports its length."""
        interval = FlightInterval(6, 11)
        assert interval.is_valid
        assert interval.frames == 5

    def test_no_flight_sentinel(self) -> None:
        """The sentinel is not a valid interval."""
        assert not NO_FLIGHT.is_valid
        assert NO_FLIGHT.frames == 0

    def test_empty_interval_invalid(self) -> None:
        """Start must be strictly before end."""
        assert not FlightInterval(5, 5).is_valid
        assert not FlightInterval(8, 3).is_valid


class TestObstacleReference:
    """Tests for ObstacleReference validation."""

    def test_span(self) -> None:
        """Span is the pixel distance from bar top to ground."""
        ref = ObstacleReference(bar_x_px=300.0, bar_top_y_px=200.0, ground_y_px=450.0)
        assert ref.span_px == pytest.approx(250.0)

    def test_bar_below_ground_rejected(self) -> None:
        """The bar top must be above the ground line."""
        with pytest.raises(ValidationError):
            ObstacleReference(bar_x_px=300.0, bar_top_y_px=450.0, ground_y_px=450.0)

    def test_non_finite_rejected(self) -> None:
        """Coordinates must be finite."""
        with pytest.raises(ValidationError):
            ObstacleReference(bar_x_px=math.nan, bar_top_y_px=200.0, ground_y_px=450.0)


class TestAnalysisResult:
    """Tests for AnalysisResult serialization."""

    def test_dict_restores_result(self) -> None:
        """from_dict rebuilds what to_dict wrote, including the source."""
        result = AnalysisResult(
            flight_time_s=0.36,
            takeoff_distance_m=2.1,
            landing_distance_m=1.2,
            takeoff_contact_s=0.13,
            landing_contact_s=0.11,
            clearance_cm=28.0,
            confidence=0.8,
            source=ResultSource.ESTIMATED,
            estimated_fields=("clearance_cm",),
            hurdle_height_cm=106.7,
        )
        data = result.to_dict()
        assert data["source"] == "estimated"
        assert data["estimated_fields"] == ["clearance_cm"]
        assert AnalysisResult.from_dict(data) == result


class TestSamplingTypes:
    """Tests for sampling helper types."""

    def test_missing_counts_unread_positions(self) -> None:
        """Missing is planned minus read."""
        assert SamplingStats(planned=30, read=27, with_pose=20).missing == 3

    def test_sampled_frame_pose_is_first_detection(self, pose_at) -> None:
        """The tracked subject is the first detected pose."""
        first, second = pose_at(400.0), pose_at(300.0)
        sampled = SampledFrame(frame=Frame(0, 0.0), poses=[first, second])
        assert sampled.pose is first
        assert SampledFrame(frame=Frame(0, 0.0)).pose is None

    def test_fakes_satisfy_protocols(self, fake_model, fake_video) -> None:
        """Test doubles implement the capability protocols."""
        assert isinstance(fake_model, PoseModel)
        assert isinstance(fake_video, VideoSource)
