"""Tests for logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from hurdle_analyzer.core.logging import ROOT_LOGGER, get_logger, setup_logging


class TestLogging:
    """Tests for logger configuration."""

    def test_names_are_namespaced(self) -> None:
        """Loggers live under the package namespace."""
        assert get_logger("sampler").name == f"{ROOT_LOGGER}.sampler"
        assert get_logger("hurdle_analyzer.pipeline").name == "hurdle_analyzer.pipeline"

    def test_file_handler_writes(self, tmp_path: Path) -> None:
        """A log file receives records at the configured level."""
        log_file = tmp_path / "logs" / "run.log"
        setup_logging("DEBUG", str(log_file))

        get_logger("test").debug("sampled frame 5")
        for handler in logging.getLogger(ROOT_LOGGER).handlers:
            handler.flush()

        assert "sampled frame 5" in log_file.read_text()

        setup_logging("WARNING")
        assert logging.getLogger(ROOT_LOGGER).level == logging.WARNING

    def test_module_level_override(self, tmp_path: Path) -> None:
        """A module can log below the package level."""
        log_file = tmp_path / "run.log"
        setup_logging("WARNING", str(log_file), levels={"pipeline.sampler": "debug"})
        sampler = get_logger("pipeline.sampler")

        try:
            sampler.debug("seek to frame 40")
            get_logger("pipeline.analyzer").info("not written")
            for handler in logging.getLogger(ROOT_LOGGER).handlers:
                handler.flush()

            text = log_file.read_text()
            assert sampler.getEffectiveLevel() == logging.DEBUG
            assert "seek to frame 40" in text
            assert "not written" not in text
        finally:
            sampler.setLevel(logging.NOTSET)
            setup_logging("WARNING")
