"""Result history and export.

Keeps prior analyses per athlete and writes results as JSON or CSV.
"""

from __future__ import annotations

import csv
import json
import time
from dataclasses import dataclass, field
from pathlib import Path

from hurdle_analyzer.core.logging import get_logger
from hurdle_analyzer.core.types import AnalysisResult

logger = get_logger(__name__)

# (field, label, unit) rows of the CSV export
CSV_ROWS = [
    ("flight_time_s", "Flight time", "s"),
    ("takeoff_distance_m", "Takeoff distance", "m"),
    ("landing_distance_m", "Landing distance", "m"),
    ("takeoff_contact_s", "Takeoff contact", "s"),
    ("landing_contact_s", "Landing contact", "s"),
    ("clearance_cm", "Clearance", "cm"),
    ("confidence", "Confidence", ""),
]

DEFAULT_ATHLETE = "default"


@dataclass
class AnalysisRecord:
    """One stored analysis."""

    result: AnalysisResult
    athlete: str = DEFAULT_ATHLETE
    recorded_at: float = field(default_factory=time.time)

    @property
    def hurdle_height_cm(self) -> float | None:
        """Obstacle height of the analysis."""
        return self.result.hurdle_height_cm


class ResultHistory:
    """Ordered store of analyses for one or more athletes."""

    def __init__(self, records: list[AnalysisRecord] | None = None) -> None:
        self.records: list[AnalysisRecord] = list(records or [])

    def __len__(self) -> int:
        return len(self.records)

    @property
    def athletes(self) -> list[str]:
        """Athlete names in first-seen order."""
        return list(dict.fromkeys(r.athlete for r in self.records))

    @property
    def latest(self) -> AnalysisRecord | None:
        """Most recent record."""
        return self.records[-1] if self.records else None

    def add(
        self,
        result: AnalysisResult,
        athlete: str = DEFAULT_ATHLETE,
        recorded_at: float | None = None,
    ) -> AnalysisRecord:
        """Store a result and return its record."""
        record = AnalysisRecord(
            result=result,
            athlete=athlete,
            recorded_at=time.time() if recorded_at is None else recorded_at,
        )
        self.records.append(record)
        return record

    def for_athlete(self, athlete: str) -> list[AnalysisRecord]:
        """Records of one athlete in chronological order."""
        return [r for r in self.records if r.athlete == athlete]

    def best_flight_time(self, athlete: str | None = None) -> float | None:
        """Shortest flight time, optionally for one athlete.

        A shorter flight over the same hurdle is the more efficient clearance.
        """
        records = self.records if athlete is None else self.for_athlete(athlete)
        times = [r.result.flight_time_s for r in records]
        return min(times) if times else None

    def reset(self) -> None:
        """Clear all records."""
        self.records.clear()


def export_result_json(result: AnalysisResult, path: Path) -> None:
    """Write one result to a JSON file.

    Args:
        result: Result to export
        path: Output file path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(result.to_dict(), f, indent=2)

    logger.info("Exported result to %s", path)


def export_result_csv(result: AnalysisResult, path: Path) -> None:
    """Write one result as metric,value,unit rows.

    Args:
        result: Result to export
        path: Output file path
    """
    data = result.to_dict()

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["metric", "value", "unit"])
        for key, label, unit in CSV_ROWS:
            writer.writerow([label, data[key], unit])

    logger.info("Exported result to %s", path)


def export_history(history: ResultHistory, path: Path) -> None:
    """Write the whole history to a JSON file.

    Args:
        history: History to export
        path: Output file path
    """
    data = {
        "athletes": history.athletes,
        "records": [
            {
                "athlete": r.athlete,
                "recorded_at": r.recorded_at,
                "result": r.result.to_dict(),
            }
            for r in history.records
        ],
    }

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def import_history(path: Path) -> ResultHistory:
    """Load a history written by export_history.

    Args:
        path: Input file path

    Returns:
        Reconstructed ResultHistory
    """
    with open(path) as f:
        data = json.load(f)

    history = ResultHistory()
    for r in data.get("records", []):
        history.add(
            AnalysisResult.from_dict(r["result"]),
            athlete=r.get("athlete", DEFAULT_ATHLETE),
            recorded_at=r.get("recorded_at", 0.0),
        )

    return history


def record_result(
    result: AnalysisResult,
    path: Path,
    athlete: str = DEFAULT_ATHLETE,
) -> ResultHistory:
    """Append a result to the history file at ``path``, creating it if missing.

    Returns:
        The updated history
    """
    history = import_history(path) if path.exists() else ResultHistory()
    history.add(result, athlete=athlete)
    export_history(history, path)

    logger.info("Recorded result for %s in %s (%d records)", athlete, path, len(history))
    return history
