"""Pure analysis logic: signal extraction, phase detection, metrics and scoring.

This module contains NO OpenCV or MediaPipe imports.
All functions operate on typed dataclasses and return results.
"""

from hurdle_analyzer.analysis.detector import (
    FlightPhaseDetector,
    IntervalPolicy,
    PhaseDetection,
    detect_flight_phases,
    select_interval,
)
from hurdle_analyzer.analysis.extractor import AnkleHeightExtractor
from hurdle_analyzer.analysis.metrics import MetricsCalculator
from hurdle_analyzer.analysis.profiles import get_obstacle_profile
from hurdle_analyzer.analysis.scoring import TechniqueAssessment, TechniqueScorer
from hurdle_analyzer.analysis.simulation import SimulatedMetricsGenerator, demo_result

__all__ = [
    "AnkleHeightExtractor",
    "FlightPhaseDetector",
    "IntervalPolicy",
    "PhaseDetection",
    "detect_flight_phases",
    "select_interval",
    "MetricsCalculator",
    "get_obstacle_profile",
    "SimulatedMetricsGenerator",
    "demo_result",
    "TechniqueScorer",
    "TechniqueAssessment",
]
