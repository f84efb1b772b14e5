"""Seedable fallback metrics generator.

All randomness goes through an injected numpy Generator so a fixed seed
reproduces the same output.
"""

from __future__ import annotations

import numpy as np

from hurdle_analyzer.analysis.metrics import METRIC_FIELDS, baseline_metrics, round_metrics
from hurdle_analyzer.analysis.profiles import DEFAULT_MAX_HEIGHT_CM, get_obstacle_profile
from hurdle_analyzer.core.config import SimulationSettings
from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import AnalysisResult, ObstacleProfile, ResultSource

logger = get_logger(__name__)

CONTACT_FIELDS = frozenset({"takeoff_contact_s", "landing_contact_s"})

# Fixed placeholder values shown by the demo mode
DEMO_VALUES = {
    "flight_time_s": 0.37,
    "takeoff_distance_m": 1.95,
    "landing_distance_m": 1.40,
    "takeoff_contact_s": 0.14,
    "landing_contact_s": 0.12,
    "clearance_cm": 45.2,
}


class SimulatedMetricsGenerator:
    """Synthesizes plausible metrics around the bracket baselines.

    Each field is ``baseline * (1 + u)`` with ``u`` drawn uniformly from
    ``[-variation / 2, variation / 2]``. Contact times use the smaller
    contact variation.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        settings: SimulationSettings | None = None,
        max_height_cm: float = DEFAULT_MAX_HEIGHT_CM,
    ) -> None:
        """Initialize generator.

        Args:
            rng: Random source (seeded from settings.seed if None)
            settings: Simulation parameters (uses defaults if None)
            max_height_cm: Largest supported obstacle height
        """
        self.settings = settings or SimulationSettings()
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.seed)
        self.max_height_cm = max_height_cm

    @classmethod
    def from_seed(
        cls,
        seed: int,
        settings: SimulationSettings | None = None,
    ) -> SimulatedMetricsGenerator:
        """Create a generator whose output is reproducible for ``seed``."""
        return cls(rng=np.random.default_rng(seed), settings=settings)

    def _variation(self, name: str) -> float:
        if name in CONTACT_FIELDS:
            return self.settings.contact_variation
        return self.settings.primary_variation

    def generate(self, obstacle: ObstacleProfile | float) -> AnalysisResult:
        """Generate a simulated metric set.

        Args:
            obstacle: Obstacle profile, or height in centimeters

        Returns:
            AnalysisResult labelled SIMULATED

        Raises:
            ValidationError: If a height outside the supported domain is given
        """
        profile = (
            obstacle
            if isinstance(obstacle, ObstacleProfile)
            else get_obstacle_profile(obstacle, self.max_height_cm)
        )
        baseline = baseline_metrics(profile)

        values: dict[str, float] = {}
        for name in METRIC_FIELDS:
            half = self._variation(name) / 2
            u = float(self.rng.uniform(-half, half))
            values[name] = baseline[name] * (1.0 + u)

        logger.info(
            "Simulated metrics for %.1f cm hurdle (%s bracket)",
            profile.height_cm,
            profile.category.name,
        )

        return AnalysisResult(
            **round_metrics(values),
            confidence=self.settings.simulated_confidence,
            source=ResultSource.SIMULATED,
            estimated_fields=METRIC_FIELDS,
            hurdle_height_cm=profile.height_cm,
        )


def demo_result(hurdle_height_cm: float | None = None) -> AnalysisResult:
    """Fixed placeholder result for demonstrations.

    Nothing is measured, so confidence is 0.
    """
    return AnalysisResult(
        **DEMO_VALUES,
        confidence=0.0,
        source=ResultSource.DEMO,
        estimated_fields=METRIC_FIELDS,
        hurdle_height_cm=hurdle_height_cm,
    )
