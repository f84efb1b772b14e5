"""Logging configuration and utilities."""

import logging
import sys
from collections.abc import Mapping
from pathlib import Path

ROOT_LOGGER = "hurdle_analyzer"


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    levels: Mapping[str, str] | None = None,
) -> None:
    """Configure application-wide logging.

    Handlers pass every record so that module overrides below the root
    level still reach the console.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        levels: Per-module levels keyed by name relative to the package
    """
    log_level = _parse_level(level)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.NOTSET)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(logging.NOTSET)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name, module_level in (levels or {}).items():
        get_logger(name).setLevel(_parse_level(module_level))

    # MediaPipe and absl are chatty at INFO
    logging.getLogger("mediapipe").setLevel(logging.WARNING)
    logging.getLogger("absl").setLevel(logging.WARNING)


def _parse_level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the hurdle_analyzer namespace
    """
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return logging.getLogger(name)
