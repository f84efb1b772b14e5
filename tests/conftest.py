"""Pytest fixtures for Hurdle Analyzer tests."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable

import numpy as np
import pytest

from hurdle_analyzer.core.config import (
    MetricsSettings,
    PhaseDetectionSettings,
    SamplingSettings,
    Settings,
    SimulationSettings,
)
from hurdle_analyzer.core.exceptions import PoseEstimationError, VideoStreamError
from hurdle_analyzer.core.types import (
    AnkleHeightSample,
    Frame,
    Keypoint,
    KeypointName,
    ObstacleReference,
    Pose,
    SamplingStats,
)

FRAME_HEIGHT = 480
FRAME_WIDTH = 640
GROUND_HEIGHT_PX = 20.0


def make_pose(ankle_y: float, x: float = 320.0) -> Pose:
    """Create a pose standing with ankles at ``ankle_y``."""
    return Pose(
        keypoints=(
            Keypoint(KeypointName.NOSE.value, x, ankle_y - 300.0, 0.9),
            Keypoint(KeypointName.LEFT_HIP.value, x - 10.0, ankle_y - 150.0, 0.9),
            Keypoint(KeypointName.RIGHT_HIP.value, x + 10.0, ankle_y - 150.0, 0.9),
            Keypoint(KeypointName.LEFT_ANKLE.value, x - 10.0, ankle_y, 0.9),
            Keypoint(KeypointName.RIGHT_ANKLE.value, x + 10.0, ankle_y, 0.9),
        )
    )


def runner_x(frame_index: int) -> float:
    """Horizontal position of an athlete running left to right."""
    return 100.0 + 4.0 * frame_index


def clearance_heights(frame_index: int) -> float:
    """Ankle height signal with one clearance airborne from frame 60 to 70."""
    return {60: 200.0, 65: 260.0, 70: 220.0}.get(frame_index, GROUND_HEIGHT_PX)


class FakePoseModel:
    """Deterministic PoseModel driven by a height-per-frame function."""

    def __init__(
        self,
        height_at: Callable[[int], float | None] = clearance_heights,
        fail_on_init: bool = False,
        failing_frames: Iterable[int] = (),
        delay_s: float = 0.0,
    ) -> None:
        self.height_at = height_at
        self.fail_on_init = fail_on_init
        self.failing_frames = set(failing_frames)
        self.delay_s = delay_s
        self.initialized = False
        self.init_calls = 0
        self.calls: list[int] = []
        self.active = 0
        self.max_active = 0
        self._counter_lock = threading.Lock()

    def initialize(self) -> None:
        self.init_calls += 1
        if self.delay_s:
            time.sleep(self.delay_s)
        if self.fail_on_init:
            raise PoseEstimationError("model weights not found")
        self.initialized = True

    def estimate(self, frame: Frame) -> list[Pose]:
        with self._counter_lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay_s:
                time.sleep(self.delay_s)
            self.calls.append(frame.index)
            if frame.index in self.failing_frames:
                raise PoseEstimationError(f"inference failed on frame {frame.index}")
            height = self.height_at(frame.index)
            if height is None:
                return []
            return [make_pose(FRAME_HEIGHT - height, runner_x(frame.index))]
        finally:
            with self._counter_lock:
                self.active -= 1


class FakeVideoSource:
    """In-memory VideoSource producing blank frames."""

    def __init__(
        self,
        duration: float = 5.0,
        fps: float | None = 30.0,
        missing: Iterable[int] = (),
        failing: Iterable[int] = (),
        slow: Iterable[int] = (),
        slow_delay_s: float = 0.5,
    ) -> None:
        self._duration = duration
        self._fps = fps
        self.missing = set(missing)
        self.failing = set(failing)
        self.slow = set(slow)
        self.slow_delay_s = slow_delay_s
        self.reads: list[int] = []

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def fps(self) -> float | None:
        return self._fps

    def read_at(self, timestamp: float) -> np.ndarray | None:
        index = round(timestamp * (self._fps or 30.0))
        self.reads.append(index)
        if index in self.slow:
            time.sleep(self.slow_delay_s)
        if index in self.failing:
            raise VideoStreamError(f"seek to frame {index} failed")
        if index in self.missing:
            return None
        return np.zeros((FRAME_HEIGHT, FRAME_WIDTH, 3), dtype=np.uint8)


def make_samples(
    airborne: Iterable[int],
    count: int,
    stride: int = 1,
    height_px: float = 120.0,
) -> list[AnkleHeightSample]:
    """Create a sampled signal airborne at the given frame indices."""
    flagged = set(airborne)
    return [
        AnkleHeightSample(
            frame_index=i * stride,
            height_px=height_px if i * stride in flagged else GROUND_HEIGHT_PX,
            is_airborne=i * stride in flagged,
            x_px=runner_x(i * stride),
            y_px=FRAME_HEIGHT - (height_px if i * stride in flagged else GROUND_HEIGHT_PX),
        )
        for i in range(count)
    ]


@pytest.fixture
def fake_model() -> FakePoseModel:
    """Pose model producing one clearance."""
    return FakePoseModel()


@pytest.fixture
def fake_video() -> FakeVideoSource:
    """Five second 30 fps video."""
    return FakeVideoSource()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults and short timeouts."""
    return Settings(
        sampling=SamplingSettings(seek_timeout_s=1.0, inference_timeout_s=1.0),
        phase=PhaseDetectionSettings(),
        metrics=MetricsSettings(),
        simulation=SimulationSettings(),
    )


@pytest.fixture
def full_stats() -> SamplingStats:
    """Every planned frame read with a pose."""
    return SamplingStats(planned=30, read=30, with_pose=30)


@pytest.fixture
def senior_reference() -> ObstacleReference:
    """106.7 cm hurdle spanning 213.4 px (0.5 cm per px) at x=370."""
    return ObstacleReference(bar_x_px=370.0, bar_top_y_px=266.6, ground_y_px=480.0)


@pytest.fixture
def model_factory() -> type[FakePoseModel]:
    """Build pose models with custom behavior."""
    return FakePoseModel


@pytest.fixture
def video_factory() -> type[FakeVideoSource]:
    """Build videos with custom duration or failures."""
    return FakeVideoSource


@pytest.fixture
def pose_at() -> Callable[..., Pose]:
    """Build a pose with ankles at a given y coordinate."""
    return make_pose


@pytest.fixture
def samples_factory() -> Callable[..., list[AnkleHeightSample]]:
    """Build an ankle height signal."""
    return make_samples
