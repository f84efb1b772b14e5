"""Rule-based technique rating.

This module is pure logic with NO I/O and NO OpenCV imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from hurdle_analyzer.core.types import AnalysisResult, ObstacleProfile

# (minimum score, label), best first
RATINGS: list[tuple[float, str]] = [
    (95.0, "WORLD CLASS"),
    (85.0, "ELITE"),
    (75.0, "ADVANCED"),
    (60.0, "INTERMEDIATE"),
    (0.0, "NEEDS WORK"),
]

TAKEOFF_RANGE_M = (1.7, 2.3)
LANDING_RANGE_M = (0.9, 1.4)
MAX_TAKEOFF_CONTACT_S = 0.18
FLIGHT_TIME_TOLERANCE = 1.2
CLEARANCE_TOLERANCE = 1.5


@dataclass(frozen=True)
class TechniqueAssessment:
    """Technique score with its label and coaching remarks."""

    score: float
    rating: str
    remarks: list[str] = field(default_factory=list)

    @property
    def comment(self) -> str:
        """Remarks joined into one sentence block."""
        return " ".join(self.remarks)


def rating_for(score: float) -> str:
    """Map a score to its rating label."""
    for minimum, label in RATINGS:
        if score >= minimum:
            return label
    return RATINGS[-1][1]


class TechniqueScorer:
    """Scores a metric set against hurdle technique rules.

    Starts from 100 and subtracts a penalty per triggered rule. Landing
    distance carries the largest penalty since a short landing is a
    safety concern.
    """

    def __init__(
        self,
        takeoff_penalty: float = 10.0,
        landing_penalty: float = 15.0,
        flight_penalty: float = 10.0,
        clearance_penalty: float = 5.0,
        contact_penalty: float = 5.0,
    ) -> None:
        self.takeoff_penalty = takeoff_penalty
        self.landing_penalty = landing_penalty
        self.flight_penalty = flight_penalty
        self.clearance_penalty = clearance_penalty
        self.contact_penalty = contact_penalty

    def score(self, result: AnalysisResult, profile: ObstacleProfile) -> TechniqueAssessment:
        """Rate a metric set.

        Args:
            result: Measured or simulated metrics
            profile: Obstacle profile the metrics refer to

        Returns:
            TechniqueAssessment with score, rating and remarks
        """
        score = 100.0
        remarks: list[str] = []

        low, high = TAKEOFF_RANGE_M
        if result.takeoff_distance_m < low:
            score -= self.takeoff_penalty
            remarks.append(
                f"Takeoff is too close to the hurdle ({result.takeoff_distance_m:.2f} m); "
                "attack from further back."
            )
        elif result.takeoff_distance_m > high:
            score -= self.takeoff_penalty
            remarks.append(
                f"Takeoff is too far from the hurdle ({result.takeoff_distance_m:.2f} m); "
                "the lead leg has to reach."
            )

        low, high = LANDING_RANGE_M
        if result.landing_distance_m < low:
            score -= self.landing_penalty
            remarks.append(
                f"Landing is too close to the hurdle ({result.landing_distance_m:.2f} m); "
                "risk of clipping the trail leg."
            )
        elif result.landing_distance_m > high:
            score -= self.landing_penalty
            remarks.append(
                f"Landing is too far past the hurdle ({result.landing_distance_m:.2f} m); "
                "braking on touchdown."
            )

        if result.flight_time_s > profile.baseline_flight_time_s * FLIGHT_TIME_TOLERANCE:
            score -= self.flight_penalty
            remarks.append(
                f"Flight time of {result.flight_time_s:.3f} s is long; "
                "drive over the hurdle rather than jumping it."
            )

        if result.clearance_cm > profile.baseline_clearance_cm * CLEARANCE_TOLERANCE:
            score -= self.clearance_penalty
            remarks.append(
                f"Clearance of {result.clearance_cm:.1f} cm wastes height; "
                "keep the hips lower over the bar."
            )

        if result.takeoff_contact_s > MAX_TAKEOFF_CONTACT_S:
            score -= self.contact_penalty
            remarks.append(
                f"Takeoff contact of {result.takeoff_contact_s:.3f} s is slow; "
                "stay quick off the ground."
            )

        if not remarks:
            remarks.append("Clean clearance with efficient rhythm.")

        score = max(0.0, score)
        return TechniqueAssessment(score=score, rating=rating_for(score), remarks=remarks)

    def apply(self, result: AnalysisResult, profile: ObstacleProfile) -> AnalysisResult:
        """Return a copy of ``result`` carrying its score and remarks."""
        assessment = self.score(result, profile)
        return replace(
            result,
            technical_score=assessment.score,
            comment=f"{assessment.rating}: {assessment.comment}",
        )
