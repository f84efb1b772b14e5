"""Tests for settings loading."""

from __future__ import annotations

import pydantic
import pytest

from hurdle_analyzer.core.config import (
    LoggingSettings,
    MetricsSettings,
    PhaseDetectionSettings,
    SamplingSettings,
    Settings,
    SimulationSettings,
)


class TestSettings:
    """Tests for the settings sections."""

    def test_defaults(self) -> None:
        """Defaults match the documented sampling and detection values."""
        settings = Settings()
        assert settings.sampling.frame_stride == 5
        assert settings.sampling.max_frames == 150
        assert settings.phase.airborne_threshold_px == 50.0
        assert settings.phase.interval_policy == "longest"
        assert settings.metrics.max_obstacle_height_cm == 120.0

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Each section reads its own prefixed environment variables."""
        monkeypatch.setenv("PHASE_AIRBORNE_THRESHOLD_PX", "80")
        monkeypatch.setenv("SAMPLING_FRAME_STRIDE", "3")

        assert PhaseDetectionSettings().airborne_threshold_px == 80.0
        assert SamplingSettings().frame_stride == 3

    def test_invalid_policy_rejected(self) -> None:
        """Only known interval policies are accepted."""
        with pytest.raises(pydantic.ValidationError):
            PhaseDetectionSettings(interval_policy="random")

    def test_simulated_confidence_capped(self) -> None:
        """Simulated results can never claim more than 0.5 confidence."""
        with pytest.raises(pydantic.ValidationError):
            SimulationSettings(simulated_confidence=0.9)

    def test_penalty_range(self) -> None:
        """The ambiguity penalty is a factor in [0, 1]."""
        with pytest.raises(pydantic.ValidationError):
            MetricsSettings(ambiguity_penalty=1.5)

    def test_module_log_levels_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Per-module log levels are read as a JSON mapping."""
        monkeypatch.setenv("LOG_LEVELS", '{"pipeline.sampler": "DEBUG"}')
        assert LoggingSettings().levels == {"pipeline.sampler": "DEBUG"}
