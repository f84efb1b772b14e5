"""Main entry point for Hurdle Analyzer."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from hurdle_analyzer.analysis.history import (
    DEFAULT_ATHLETE,
    export_result_csv,
    export_result_json,
    record_result,
)
from hurdle_analyzer.core.config import get_settings
from hurdle_analyzer.core.exceptions import HurdleAnalyzerError, ValidationError
from hurdle_analyzer.core.logging import get_logger, setup_logging
from hurdle_analyzer.core.types import AnalysisResult, ObstacleReference
from hurdle_analyzer.pipeline.analyzer import HurdleAnalyzer

logger = get_logger(__name__)

ROWS = [
    ("Flight time", "flight_time_s", "s", 3),
    ("Takeoff distance", "takeoff_distance_m", "m", 2),
    ("Landing distance", "landing_distance_m", "m", 2),
    ("Takeoff contact", "takeoff_contact_s", "s", 3),
    ("Landing contact", "landing_contact_s", "s", 3),
    ("Clearance", "clearance_cm", "cm", 1),
]


def build_parser() -> argparse.ArgumentParser:
    """Create the command line parser."""
    parser = argparse.ArgumentParser(
        description="Hurdle Analyzer - hurdle clearance metrics from video"
    )
    parser.add_argument("video", type=Path, nargs="?", help="Path to the video file")
    parser.add_argument(
        "--height",
        type=float,
        required=True,
        help="Hurdle height in cm (e.g. 76.2, 83.8, 91.4, 99.1, 106.7)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--demo",
        action="store_true",
        help="Show fixed placeholder values without reading a video",
    )
    mode.add_argument(
        "--simulate",
        action="store_true",
        help="Generate simulated metrics without pose inference",
    )
    parser.add_argument("--seed", type=int, help="Seed for simulated metrics")
    parser.add_argument("--bar-x", type=float, help="Hurdle bar x position in pixels")
    parser.add_argument("--bar-top", type=float, help="Hurdle bar top y position in pixels")
    parser.add_argument("--ground", type=float, help="Ground line y position in pixels")
    parser.add_argument("--json", type=Path, help="Write the result as JSON")
    parser.add_argument("--csv", type=Path, help="Write the result as CSV")
    parser.add_argument(
        "--athlete",
        default=DEFAULT_ATHLETE,
        help="Athlete name the result is recorded under",
    )
    parser.add_argument(
        "--history",
        type=Path,
        help="History JSON file the result is appended to",
    )
    parser.add_argument("--log-level", help="Override the log level")
    return parser


def reference_from_args(args: argparse.Namespace) -> ObstacleReference | None:
    """Build the obstacle reference when all three positions are given.

    Raises:
        ValidationError: If only some positions are given
    """
    values = (args.bar_x, args.bar_top, args.ground)
    if all(v is None for v in values):
        return None
    if any(v is None for v in values):
        raise ValidationError("--bar-x, --bar-top and --ground must be given together")
    return ObstacleReference(bar_x_px=args.bar_x, bar_top_y_px=args.bar_top, ground_y_px=args.ground)


def format_result(result: AnalysisResult) -> str:
    """Render a result as a text summary."""
    lines = [f"Source: {result.source.value}   Confidence: {result.confidence:.2f}"]
    for label, key, unit, digits in ROWS:
        value = getattr(result, key)
        marker = " (estimated)" if key in result.estimated_fields else ""
        lines.append(f"  {label:<18} {value:.{digits}f} {unit}{marker}")
    if result.technical_score is not None:
        lines.append(f"Technique score: {result.technical_score:.0f}")
    if result.comment:
        lines.append(result.comment)
    return "\n".join(lines)


def run_analysis(args: argparse.Namespace) -> int:
    """Run one analysis from parsed arguments.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    settings = get_settings()
    setup_logging(
        args.log_level or settings.logging.level,
        settings.logging.file,
        levels=settings.logging.levels,
    )

    rng = None
    if args.seed is not None:
        import numpy as np

        rng = np.random.default_rng(args.seed)

    try:
        if args.demo:
            result = HurdleAnalyzer(settings=settings).demo(args.height)
        elif args.simulate:
            result = HurdleAnalyzer(settings=settings, rng=rng).simulate(args.height)
        else:
            if args.video is None:
                raise ValidationError("A video path is required unless --demo or --simulate is set")
            reference = reference_from_args(args)
            from hurdle_analyzer.vision.pose import MediaPipePoseModel
            from hurdle_analyzer.vision.video import OpenCVVideoSource

            # The analyzer loads the model itself so a load failure degrades
            # to simulated metrics instead of aborting
            model = MediaPipePoseModel(settings.pose)
            try:
                with OpenCVVideoSource(args.video) as video:
                    analyzer = HurdleAnalyzer(model, settings=settings, rng=rng)
                    result = analyzer.analyze(video, args.height, reference=reference)
            finally:
                model.close()

        print(format_result(result))

        if args.json:
            export_result_json(result, args.json)
        if args.csv:
            export_result_csv(result, args.csv)
        if args.history:
            history = record_result(result, args.history, athlete=args.athlete)
            count = len(history.for_athlete(args.athlete))
            best = history.best_flight_time(args.athlete)
            print(f"Recorded for {args.athlete}: {count} analyses, best flight time {best:.3f} s")

        return 0

    except ValidationError as e:
        logger.error("Invalid input: %s", e)
        return 1

    except HurdleAnalyzerError as e:
        logger.error("Analysis failed: %s", e)
        return 2

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130


def main() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()
    sys.exit(run_analysis(args))


if __name__ == "__main__":
    main()
