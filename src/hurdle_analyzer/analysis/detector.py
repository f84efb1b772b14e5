"""Flight phase detection state machine.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from hurdle_analyzer.core.config import PhaseDetectionSettings
from hurdle_analyzer.core.exceptions import PhaseDetectionError
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import AnkleHeightSample, FlightInterval, FlightPhase

logger = get_logger(__name__)


class IntervalPolicy(str, Enum):
    """How the canonical interval is chosen among several."""

    LONGEST = "longest"
    FIRST = "first"
    MERGE = "merge"


@dataclass
class DetectorState:
    """Internal state for flight phase detection."""

    phase: FlightPhase = FlightPhase.GROUNDED
    takeoff_frame: int = -1
    last_frame: int | None = None
    intervals: list[FlightInterval] = field(default_factory=list)


@dataclass(frozen=True)
class PhaseDetection:
    """Result of running the detector over a whole signal."""

    intervals: list[FlightInterval]
    open_start: int | None
    samples: list[AnkleHeightSample]

    @property
    def is_ambiguous(self) -> bool:
        """True unless exactly one closed interval was found."""
        return len(self.intervals) != 1


class FlightPhaseDetector:
    """State machine segmenting an ankle height signal into flight intervals.

    Transitions:
        GROUNDED → AIRBORNE: sample flagged airborne, opens an interval
        AIRBORNE → GROUNDED: sample flagged grounded, closes the interval

    At most one interval is open at a time.
    """

    def __init__(self) -> None:
        self._state = DetectorState()

    @property
    def current_phase(self) -> FlightPhase:
        """Get current flight phase."""
        return self._state.phase

    @property
    def intervals(self) -> list[FlightInterval]:
        """Closed intervals in detection order."""
        return list(self._state.intervals)

    @property
    def open_start(self) -> int | None:
        """Takeoff frame of the unterminated interval, if airborne."""
        if self._state.phase == FlightPhase.AIRBORNE:
            return self._state.takeoff_frame
        return None

    def reset(self) -> None:
        """Reset detector to initial state."""
        self._state = DetectorState()

    def update(self, sample: AnkleHeightSample) -> FlightInterval | None:
        """Feed the next sample.

        Args:
            sample: Height sample, frame indices strictly increasing

        Returns:
            The interval closed by this sample, None otherwise

        Raises:
            PhaseDetectionError: If frame order is violated
        """
        last = self._state.last_frame
        if last is not None and sample.frame_index <= last:
            raise PhaseDetectionError(
                f"Frame {sample.frame_index} received after frame {last}"
            )
        self._state.last_frame = sample.frame_index

        if self._state.phase == FlightPhase.GROUNDED:
            if sample.is_airborne:
                self._state.phase = FlightPhase.AIRBORNE
                self._state.takeoff_frame = sample.frame_index
                logger.debug("Takeoff at frame %d", sample.frame_index)
            return None

        if not sample.is_airborne:
            interval = FlightInterval(
                start_frame=self._state.takeoff_frame,
                end_frame=sample.frame_index,
            )
            self._state.intervals.append(interval)
            self._state.phase = FlightPhase.GROUNDED
            self._state.takeoff_frame = -1
            logger.debug("Landing at frame %d", sample.frame_index)
            return interval

        return None


def detect_flight_phases(samples: Iterable[AnkleHeightSample]) -> PhaseDetection:
    """Run the detector over an ordered signal.

    Args:
        samples: Height samples in frame order

    Returns:
        PhaseDetection with closed intervals and any open takeoff
    """
    detector = FlightPhaseDetector()
    collected: list[AnkleHeightSample] = []

    for sample in samples:
        detector.update(sample)
        collected.append(sample)

    if detector.open_start is not None:
        logger.warning(
            "Signal ended while airborne (takeoff at frame %d); interval left open",
            detector.open_start,
        )

    return PhaseDetection(
        intervals=detector.intervals,
        open_start=detector.open_start,
        samples=collected,
    )


def merge_intervals(intervals: list[FlightInterval], max_gap: int) -> list[FlightInterval]:
    """Join intervals separated by at most ``max_gap`` grounded frames."""
    merged: list[FlightInterval] = []
    for interval in intervals:
        if merged and interval.start_frame - merged[-1].end_frame <= max_gap:
            merged[-1] = FlightInterval(merged[-1].start_frame, interval.end_frame)
        else:
            merged.append(interval)
    return merged


def select_interval(
    intervals: list[FlightInterval],
    policy: IntervalPolicy | str = IntervalPolicy.LONGEST,
    settings: PhaseDetectionSettings | None = None,
) -> FlightInterval | None:
    """Choose the canonical hurdle-clearance interval.

    Args:
        intervals: Closed intervals in detection order
        policy: Selection policy
        settings: Supplies the merge gap for MERGE

    Returns:
        Canonical interval, or None if there is none
    """
    valid = [i for i in intervals if i.is_valid]
    if not valid:
        return None

    policy = IntervalPolicy(policy)
    if len(valid) > 1:
        logger.info(
            "Detected %d flight intervals; selecting by %s policy",
            len(valid),
            policy.value,
        )

    if policy == IntervalPolicy.FIRST:
        return valid[0]

    if policy == IntervalPolicy.MERGE:
        gap = (settings or PhaseDetectionSettings()).merge_gap_frames
        valid = merge_intervals(valid, gap)

    # max() keeps the earliest on ties
    return max(valid, key=lambda i: i.frames)
