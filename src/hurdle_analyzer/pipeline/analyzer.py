"""Hurdle clearance analysis orchestration."""

from __future__ import annotations

import threading
from enum import Enum, auto

import numpy as np

from hurdle_analyzer.analysis.detector import detect_flight_phases, select_interval
from hurdle_analyzer.analysis.extractor import AnkleHeightExtractor
from hurdle_analyzer.analysis.metrics import MetricsCalculator
from hurdle_analyzer.analysis.profiles import get_obstacle_profile
from hurdle_analyzer.analysis.scoring import TechniqueScorer
from hurdle_analyzer.analysis.simulation import SimulatedMetricsGenerator, demo_result
from hurdle_analyzer.core.config import Settings, get_settings
from hurdle_analyzer.core.exceptions import InsufficientDataError, PoseEstimationError
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import (
    AnalysisResult,
    ObstacleProfile,
    ObstacleReference,
    PoseModel,
    VideoSource,
)
from hurdle_analyzer.pipeline.guard import SerializedPoseModel
from hurdle_analyzer.pipeline.sampler import FrameSampler

logger = get_logger(__name__)


class ModelStatus(Enum):
    """Availability of the pose model."""

    UNINITIALIZED = auto()
    READY = auto()
    FAILED = auto()
    ABSENT = auto()


class HurdleAnalyzer:
    """Runs the full pipeline for one video at a time.

    Coordinates:
    - Frame sampling and pose inference
    - Ankle height extraction
    - Flight phase detection and interval selection
    - Metric calculation and technique scoring

    Falls back to the simulated generator when the pose model is missing
    or failed to load, or when no frame could be read.
    """

    def __init__(
        self,
        pose_model: PoseModel | None = None,
        settings: Settings | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        """Initialize analyzer.

        Args:
            pose_model: Pose inference capability owned by the caller
            settings: Application settings (uses defaults if None)
            rng: Random source for the simulated fallback
        """
        self.settings = settings or get_settings()

        if pose_model is None or isinstance(pose_model, SerializedPoseModel):
            self._model = pose_model
        else:
            self._model = SerializedPoseModel(pose_model)

        self._status = (
            ModelStatus.ABSENT if pose_model is None else ModelStatus.UNINITIALIZED
        )
        self._init_lock = threading.Lock()

        self._extractor = AnkleHeightExtractor(self.settings.phase)
        self._calculator = MetricsCalculator(self.settings.metrics)
        self._simulator = SimulatedMetricsGenerator(
            rng=rng,
            settings=self.settings.simulation,
            max_height_cm=self.settings.metrics.max_obstacle_height_cm,
        )
        self._scorer = TechniqueScorer()

    @property
    def status(self) -> ModelStatus:
        """Get pose model status."""
        return self._status

    @property
    def is_degraded(self) -> bool:
        """True when analyses are routed to the simulated generator."""
        return self._status in (ModelStatus.FAILED, ModelStatus.ABSENT)

    def initialize(self) -> ModelStatus:
        """Load the pose model.

        A load failure is logged and leaves the analyzer degraded rather
        than raising.

        Returns:
            Resulting model status
        """
        if self._model is None:
            logger.warning("No pose model configured; using simulated metrics")
            self._status = ModelStatus.ABSENT
            return self._status

        try:
            self._model.initialize()
            self._status = ModelStatus.READY
            logger.info("Hurdle analyzer initialized")
        except PoseEstimationError as e:
            logger.warning("Pose model unavailable, using simulated metrics: %s", e)
            self._status = ModelStatus.FAILED

        return self._status

    def profile(self, hurdle_height_cm: float) -> ObstacleProfile:
        """Obstacle profile for a height.

        Raises:
            ValidationError: If the height is outside the supported domain
        """
        return get_obstacle_profile(
            hurdle_height_cm,
            self.settings.metrics.max_obstacle_height_cm,
        )

    def analyze(
        self,
        video: VideoSource,
        hurdle_height_cm: float,
        reference: ObstacleReference | None = None,
        cancel_event: threading.Event | None = None,
    ) -> AnalysisResult:
        """Analyze one hurdle clearance video.

        Args:
            video: Seekable video, not read concurrently by anyone else
            hurdle_height_cm: Obstacle height in centimeters
            reference: Obstacle position in the frame for distance calibration
            cancel_event: Stops sampling early; frames already sampled are
                still used

        Returns:
            Scored AnalysisResult

        Raises:
            ValidationError: If the hurdle height is invalid
        """
        profile = self.profile(hurdle_height_cm)

        with self._init_lock:
            if self._status == ModelStatus.UNINITIALIZED:
                self.initialize()

        if self.is_degraded or self._model is None:
            return self._fallback(profile)

        sampler = FrameSampler(video, self._model, self.settings.sampling, cancel_event)
        samples = [
            self._extractor.extract(sampled.pose, sampled.frame)
            for sampled in sampler
            if sampled.pose is not None
        ]

        detection = detect_flight_phases(samples)
        interval = select_interval(
            detection.intervals,
            self.settings.phase.interval_policy,
            self.settings.phase,
        )

        try:
            result = self._calculator.calculate(
                interval=interval,
                samples=detection.samples,
                stats=sampler.stats,
                profile=profile,
                fps=sampler.fps,
                reference=reference,
                closed_count=len(detection.intervals),
            )
        except InsufficientDataError as e:
            logger.warning("%s; using simulated metrics", e)
            return self._fallback(profile)

        logger.info(
            "Flight %.3f s, confidence %.2f (%s)",
            result.flight_time_s,
            result.confidence,
            result.source.value,
        )
        return self._scorer.apply(result, profile)

    def simulate(self, hurdle_height_cm: float) -> AnalysisResult:
        """Scored simulated result for a height.

        Raises:
            ValidationError: If the hurdle height is invalid
        """
        return self._fallback(self.profile(hurdle_height_cm))

    def demo(self, hurdle_height_cm: float) -> AnalysisResult:
        """Scored fixed placeholder result labelled DEMO.

        Raises:
            ValidationError: If the hurdle height is invalid
        """
        profile = self.profile(hurdle_height_cm)
        return self._scorer.apply(demo_result(profile.height_cm), profile)

    def _fallback(self, profile: ObstacleProfile) -> AnalysisResult:
        return self._scorer.apply(self._simulator.generate(profile), profile)
