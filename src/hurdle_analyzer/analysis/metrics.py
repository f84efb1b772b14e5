"""Metric derivation from flight intervals.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from hurdle_analyzer.core.config import MetricsSettings
from hurdle_analyzer.core.exceptions import InsufficientDataError, ValidationError
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import (
    AnalysisResult,
    AnkleHeightSample,
    FlightInterval,
    ObstacleProfile,
    ObstacleReference,
    ResultSource,
    SamplingStats,
)

logger = get_logger(__name__)

METRIC_FIELDS = (
    "flight_time_s",
    "takeoff_distance_m",
    "landing_distance_m",
    "takeoff_contact_s",
    "landing_contact_s",
    "clearance_cm",
)


def round_metrics(values: dict[str, float]) -> dict[str, float]:
    """Apply output precision: times 3 decimals, distances 2, heights 1."""
    return {
        "flight_time_s": round(values["flight_time_s"], 3),
        "takeoff_distance_m": round(values["takeoff_distance_m"], 2),
        "landing_distance_m": round(values["landing_distance_m"], 2),
        "takeoff_contact_s": round(values["takeoff_contact_s"], 3),
        "landing_contact_s": round(values["landing_contact_s"], 3),
        "clearance_cm": round(values["clearance_cm"], 1),
    }


def baseline_metrics(profile: ObstacleProfile) -> dict[str, float]:
    """Bracket baseline values for every metric field."""
    return {
        "flight_time_s": profile.baseline_flight_time_s,
        "takeoff_distance_m": profile.baseline_takeoff_distance_m,
        "landing_distance_m": profile.baseline_landing_distance_m,
        "takeoff_contact_s": profile.baseline_takeoff_contact_s,
        "landing_contact_s": profile.baseline_landing_contact_s,
        "clearance_cm": profile.baseline_clearance_cm,
    }


def sampling_stride(samples: list[AnkleHeightSample]) -> int:
    """Smallest gap between consecutive sampled frame indices (1 if unknown)."""
    gaps = [
        b.frame_index - a.frame_index
        for a, b in zip(samples, samples[1:])
        if b.frame_index > a.frame_index
    ]
    return min(gaps) if gaps else 1


@dataclass
class _MetricDraft:
    values: dict[str, float]
    estimated: list[str] = field(default_factory=list)

    def estimate(self, name: str, value: float) -> None:
        self.values[name] = value
        self.estimated.append(name)


class MetricsCalculator:
    """Converts a flight interval into the final metric set.

    Distances and clearance need a pixel scale, which comes from an
    ObstacleReference (bar position and height in the frame). Without one,
    those fields fall back to the bracket baselines and are reported in
    ``estimated_fields``.
    """

    def __init__(self, settings: MetricsSettings | None = None) -> None:
        """Initialize calculator with settings.

        Args:
            settings: Metric parameters (uses defaults if None)
        """
        self.settings = settings or MetricsSettings()

    def confidence(self, stats: SamplingStats, closed_count: int) -> float:
        """Fraction of planned frames with a pose, penalized when ambiguous.

        Args:
            stats: Sampling counters
            closed_count: Number of closed flight intervals detected

        Returns:
            Confidence in [0, 1]
        """
        if stats.planned <= 0:
            return 0.0

        ratio = min(max(stats.with_pose / stats.planned, 0.0), 1.0)
        if closed_count != 1:
            ratio *= self.settings.ambiguity_penalty
        return ratio

    def calculate(
        self,
        interval: FlightInterval | None,
        samples: list[AnkleHeightSample],
        stats: SamplingStats,
        profile: ObstacleProfile,
        fps: float,
        reference: ObstacleReference | None = None,
        closed_count: int | None = None,
    ) -> AnalysisResult:
        """Calculate the metrics of one run.

        Args:
            interval: Canonical flight interval (None or NO_FLIGHT if none)
            samples: Height samples in frame order
            stats: Sampling counters of the run
            profile: Obstacle profile for baselines and height
            fps: Video frame rate
            reference: Obstacle position for pixel scale calibration
            closed_count: Closed intervals detected (defaults to 1 if the
                interval is valid, else 0)

        Returns:
            AnalysisResult with rounded fields

        Raises:
            InsufficientDataError: If no frame was read
            ValidationError: If fps is not positive
        """
        if stats.read <= 0:
            raise InsufficientDataError("No frames were sampled from the video")
        if fps <= 0:
            raise ValidationError(f"Frame rate must be positive, got {fps}")

        if interval is not None and not interval.is_valid:
            interval = None
        if closed_count is None:
            closed_count = 0 if interval is None else 1

        confidence = self.confidence(stats, closed_count)
        baseline = baseline_metrics(profile)

        if interval is None:
            logger.warning(
                "No flight interval detected; using %s bracket baselines",
                profile.category.name,
            )
            return self._build(
                _MetricDraft(values=dict(baseline), estimated=list(METRIC_FIELDS)),
                confidence,
                profile,
            )

        draft = _MetricDraft(values={"flight_time_s": interval.frames / fps})

        ordered = sorted(samples, key=lambda s: s.frame_index)
        stride = sampling_stride(ordered)
        self._contact_times(draft, interval, ordered, stride, fps, baseline)

        if reference is None:
            for name in ("takeoff_distance_m", "landing_distance_m", "clearance_cm"):
                draft.estimate(name, baseline[name])
        else:
            cm_per_px = profile.height_cm / reference.span_px
            self._distances(draft, interval, ordered, reference, cm_per_px, baseline)
            self._clearance(draft, interval, ordered, reference, cm_per_px, baseline)

        return self._build(draft, confidence, profile)

    def _contact_times(
        self,
        draft: _MetricDraft,
        interval: FlightInterval,
        samples: list[AnkleHeightSample],
        stride: int,
        fps: float,
        baseline: dict[str, float],
    ) -> None:
        positions = {s.frame_index: i for i, s in enumerate(samples)}

        before = 0
        start_pos = positions.get(interval.start_frame)
        if start_pos is not None:
            next_frame = interval.start_frame
            for sample in reversed(samples[:start_pos]):
                # A gap means frames without a pose broke the contact run
                if sample.is_airborne or next_frame - sample.frame_index > stride:
                    break
                before += 1
                next_frame = sample.frame_index

        after = 0
        end_pos = positions.get(interval.end_frame)
        if end_pos is not None:
            previous_frame = interval.end_frame
            for sample in samples[end_pos:]:
                if sample.is_airborne or sample.frame_index - previous_frame > stride:
                    break
                after += 1
                previous_frame = sample.frame_index

        if before:
            draft.values["takeoff_contact_s"] = before * stride / fps
        else:
            draft.estimate("takeoff_contact_s", baseline["takeoff_contact_s"])

        if after:
            draft.values["landing_contact_s"] = after * stride / fps
        else:
            draft.estimate("landing_contact_s", baseline["landing_contact_s"])

    def _distances(
        self,
        draft: _MetricDraft,
        interval: FlightInterval,
        samples: list[AnkleHeightSample],
        reference: ObstacleReference,
        cm_per_px: float,
        baseline: dict[str, float],
    ) -> None:
        by_frame = {s.frame_index: s for s in samples}

        for name, frame_index in (
            ("takeoff_distance_m", interval.start_frame),
            ("landing_distance_m", interval.end_frame),
        ):
            sample = by_frame.get(frame_index)
            if sample is None or sample.x_px is None:
                draft.estimate(name, baseline[name])
                continue
            displacement_px = abs(reference.bar_x_px - sample.x_px)
            draft.values[name] = displacement_px * cm_per_px / 100.0

    def _clearance(
        self,
        draft: _MetricDraft,
        interval: FlightInterval,
        samples: list[AnkleHeightSample],
        reference: ObstacleReference,
        cm_per_px: float,
        baseline: dict[str, float],
    ) -> None:
        rows = [
            s.y_px
            for s in samples
            if interval.start_frame <= s.frame_index < interval.end_frame and s.y_px is not None
        ]
        if not rows:
            draft.estimate("clearance_cm", baseline["clearance_cm"])
            return

        # Rows grow downward, so the peak is the smallest row
        above_bar_px = reference.bar_top_y_px - min(rows)
        draft.values["clearance_cm"] = max(0.0, above_bar_px * cm_per_px)

    def _build(
        self,
        draft: _MetricDraft,
        confidence: float,
        profile: ObstacleProfile,
    ) -> AnalysisResult:
        source = ResultSource.ESTIMATED if draft.estimated else ResultSource.MEASURED
        if draft.estimated:
            logger.info("Estimated from baselines: %s", ", ".join(draft.estimated))

        return AnalysisResult(
            **round_metrics(draft.values),
            confidence=confidence,
            source=source,
            estimated_fields=tuple(draft.estimated),
            hurdle_height_cm=profile.height_cm,
        )
