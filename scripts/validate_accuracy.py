#!/usr/bin/env python3
"""Validate flight time measurement accuracy.

Analyze recorded clearance videos and compare measured flight times
against reference values (e.g. from a high-speed camera or timing mat).
"""

from __future__ import annotations

import argparse
import csv
import sys
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from hurdle_analyzer.core.config import get_settings
from hurdle_analyzer.core.exceptions import HurdleAnalyzerError
from hurdle_analyzer.core.logging import get_logger, setup_logging
from hurdle_analyzer.core.types import AnalysisResult
from hurdle_analyzer.pipeline.analyzer import HurdleAnalyzer
from hurdle_analyzer.vision.pose import MediaPipePoseModel
from hurdle_analyzer.vision.video import OpenCVVideoSource

logger = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of validating a single video."""

    video: str
    measured_flight_s: float
    reference_flight_s: float
    source: str
    confidence: float
    flight_measured: bool

    @property
    def error_ms(self) -> float:
        """Signed error in milliseconds."""
        return (self.measured_flight_s - self.reference_flight_s) * 1000.0


def load_reference_data(csv_path: Path) -> list[tuple[Path, float, float]]:
    """Load reference flight times from CSV.

    Expected format: video,height_cm,flight_time_s (video relative to the CSV)

    Args:
        csv_path: Path to CSV file

    Returns:
        List of (video_path, height_cm, flight_time_s) tuples
    """
    references = []

    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            video = csv_path.parent / row["video"]
            references.append((video, float(row["height_cm"]), float(row["flight_time_s"])))

    logger.info("Loaded %d reference measurements", len(references))
    return references


def analyze_video(analyzer: HurdleAnalyzer, video_path: Path, height_cm: float) -> AnalysisResult:
    """Run the analyzer on one video file."""
    with OpenCVVideoSource(video_path) as video:
        return analyzer.analyze(video, height_cm)


def print_results(results: list[ValidationResult]) -> None:
    """Print validation results to console."""
    print("\n" + "=" * 70)
    print("VALIDATION RESULTS")
    print("=" * 70)
    print(f"{'Video':<24} {'Measured':<10} {'Reference':<10} {'Error ms':<10} {'Source':<10}")
    print("-" * 70)

    for r in results:
        print(
            f"{r.video:<24} "
            f"{r.measured_flight_s:<10.3f} "
            f"{r.reference_flight_s:<10.3f} "
            f"{r.error_ms:<+10.1f} "
            f"{r.source:<10}"
        )

    # Only flight times read from pose data count toward the error statistics
    measured = [r for r in results if r.flight_measured]
    if measured:
        errors = [abs(r.error_ms) for r in measured]
        print("\n" + "=" * 70)
        print(f"Measured videos:     {len(measured)} of {len(results)}")
        print(f"Mean Absolute Error: {np.mean(errors):.1f} ms")
        print(f"Std Dev Error:       {np.std(errors):.1f} ms")
        print(f"Max Error:           {max(errors):.1f} ms")


def main() -> int:
    """Run validation script."""
    parser = argparse.ArgumentParser(description="Validate flight time measurement accuracy")
    parser.add_argument("reference", type=Path, help="CSV with video,height_cm,flight_time_s")
    parser.add_argument("--output", "-o", type=Path, help="Output CSV for results")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.logging.level, levels=settings.logging.levels)

    references = load_reference_data(args.reference)
    if not references:
        logger.warning("No reference rows in %s", args.reference)
        return 1

    model = MediaPipePoseModel(settings.pose)
    analyzer = HurdleAnalyzer(model, settings=settings)
    results: list[ValidationResult] = []

    try:
        for video_path, height_cm, flight_s in references:
            try:
                result = analyze_video(analyzer, video_path, height_cm)
            except HurdleAnalyzerError as e:
                logger.warning("Skipping %s: %s", video_path.name, e)
                continue
            results.append(
                ValidationResult(
                    video=video_path.name,
                    measured_flight_s=result.flight_time_s,
                    reference_flight_s=flight_s,
                    source=result.source.value,
                    confidence=result.confidence,
                    flight_measured="flight_time_s" not in result.estimated_fields,
                )
            )
    finally:
        model.close()

    print_results(results)

    if args.output:
        with open(args.output, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["video", "measured_s", "reference_s", "error_ms", "source", "confidence"])
            for r in results:
                writer.writerow(
                    [
                        r.video,
                        r.measured_flight_s,
                        r.reference_flight_s,
                        round(r.error_ms, 1),
                        r.source,
                        r.confidence,
                    ]
                )
        logger.info("Results saved to %s", args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
