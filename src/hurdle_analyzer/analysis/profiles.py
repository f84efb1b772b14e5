"""Obstacle height brackets and their baseline metrics."""

from __future__ import annotations

import math

from hurdle_analyzer.core.exceptions import ValidationError
from hurdle_analyzer.core.types import ObstacleCategory, ObstacleProfile

DEFAULT_MAX_HEIGHT_CM = 120.0

# (upper bound cm inclusive, category, takeoff m, landing m, flight s, clearance cm)
BRACKETS: list[tuple[float, ObstacleCategory, float, float, float, float]] = [
    (76.2, ObstacleCategory.YOUTH, 1.80, 1.00, 0.30, 35.0),
    (83.8, ObstacleCategory.WOMEN, 1.95, 1.05, 0.32, 32.0),
    (99.1, ObstacleCategory.JUNIOR, 2.00, 1.10, 0.34, 30.0),
    (math.inf, ObstacleCategory.SENIOR, 2.10, 1.20, 0.36, 28.0),
]


def validate_height(height_cm: float, max_height_cm: float = DEFAULT_MAX_HEIGHT_CM) -> float:
    """Check an obstacle height is inside the supported domain.

    Raises:
        ValidationError: If the height is not a positive finite value up to
            max_height_cm
    """
    try:
        height = float(height_cm)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Obstacle height must be a number, got {height_cm!r}") from e

    if not math.isfinite(height) or height <= 0:
        raise ValidationError(f"Obstacle height must be positive and finite, got {height_cm}")
    if height > max_height_cm:
        raise ValidationError(
            f"Obstacle height {height:.1f} cm exceeds supported maximum {max_height_cm:.1f} cm"
        )
    return height


def get_obstacle_profile(
    height_cm: float,
    max_height_cm: float = DEFAULT_MAX_HEIGHT_CM,
) -> ObstacleProfile:
    """Look up the baseline profile for an obstacle height.

    Args:
        height_cm: Obstacle height in centimeters
        max_height_cm: Largest supported height

    Returns:
        ObstacleProfile of the first bracket whose bound is >= height

    Raises:
        ValidationError: If the height is invalid
    """
    height = validate_height(height_cm, max_height_cm)

    for upper, category, takeoff, landing, flight, clearance in BRACKETS:
        if height <= upper:
            return ObstacleProfile(
                height_cm=height,
                category=category,
                baseline_takeoff_distance_m=takeoff,
                baseline_landing_distance_m=landing,
                baseline_flight_time_s=flight,
                baseline_clearance_cm=clearance,
            )

    # Unreachable: the last bracket is unbounded
    raise ValidationError(f"No bracket for obstacle height {height}")
