"""Tests for the command line entry point."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from hurdle_analyzer.analysis.history import DEFAULT_ATHLETE, import_history
from hurdle_analyzer.core.exceptions import ValidationError
from hurdle_analyzer.core.types import ResultSource
from hurdle_analyzer.main import build_parser, reference_from_args, run_analysis


class TestParser:
    """Tests for argument parsing."""

    def test_athlete_and_history(self, tmp_path: Path) -> None:
        """Athlete name and history file are accepted."""
        history_path = tmp_path / "h.json"
        args = build_parser().parse_args(
            ["v.mp4", "--height", "106.7", "--athlete", "kim", "--history", str(history_path)]
        )
        assert args.athlete == "kim"
        assert args.history == history_path

    def test_athlete_defaults(self) -> None:
        """Without --athlete results go to the default athlete."""
        args = build_parser().parse_args(["v.mp4", "--height", "106.7"])
        assert args.athlete == DEFAULT_ATHLETE
        assert args.history is None

    def test_demo_and_simulate_exclusive(self) -> None:
        """Only one fallback mode can be chosen."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--height", "106.7", "--demo", "--simulate"])

    def test_partial_reference_rejected(self) -> None:
        """Bar and ground positions must be given together."""
        args = build_parser().parse_args(["v.mp4", "--height", "106.7", "--bar-x", "370"])
        with pytest.raises(ValidationError):
            reference_from_args(args)

    def test_full_reference(self) -> None:
        """All three positions build a reference."""
        args = build_parser().parse_args(
            [
                "v.mp4", "--height", "106.7",
                "--bar-x", "370", "--bar-top", "186.6", "--ground", "400",
            ]
        )
        reference = reference_from_args(args)
        assert reference is not None
        assert reference.ground_y_px == 400.0


class TestRunAnalysis:
    """Tests for run_analysis exit codes and outputs."""

    def test_simulate_records_history(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Each run appends to the history file under the given athlete."""
        history_path = tmp_path / "history.json"
        argv = ["--height", "99.1", "--simulate", "--seed", "3", "--history", str(history_path)]

        assert run_analysis(build_parser().parse_args([*argv, "--athlete", "kim"])) == 0
        assert run_analysis(build_parser().parse_args([*argv, "--athlete", "lee"])) == 0
        assert run_analysis(build_parser().parse_args([*argv, "--athlete", "kim"])) == 0

        history = import_history(history_path)
        assert len(history) == 3
        assert history.athletes == ["kim", "lee"]
        assert len(history.for_athlete("kim")) == 2
        assert history.latest.result.source == ResultSource.SIMULATED
        assert "Recorded for kim: 2 analyses" in capsys.readouterr().out

    def test_json_export(self, tmp_path: Path) -> None:
        """A demo result can be written as JSON."""
        out = tmp_path / "result.json"
        args = build_parser().parse_args(["--height", "106.7", "--demo", "--json", str(out)])

        assert run_analysis(args) == 0
        assert json.loads(out.read_text())["source"] == "demo"

    def test_invalid_height_exit_code(self, tmp_path: Path) -> None:
        """Invalid input exits with 1 and records nothing."""
        history_path = tmp_path / "history.json"
        args = build_parser().parse_args(
            ["--height", "0", "--demo", "--history", str(history_path)]
        )

        assert run_analysis(args) == 1
        assert not history_path.exists()

    def test_missing_video_exit_code(self) -> None:
        """Analysis without a video or fallback mode is invalid input."""
        assert run_analysis(build_parser().parse_args(["--height", "106.7"])) == 1
