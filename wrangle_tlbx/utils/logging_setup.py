"""Logger helpers for applications embedding the toolbox."""

from __future__ import annotations

import logging
import sys
from pathlib import Path


PACKAGE_LOGGER = "wrangle_tlbx"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """Get a named logger. Use :func:`configure_logging` once at program start."""
    return logging.getLogger(name)


def configure_logging(
    level: int = logging.INFO,
    log_file: str | Path | None = None,
    overwrite: bool = True,
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Configure logging of toolbox diagnostics to the console and optionally a file.

    Args:
        level: ``logging.INFO`` / ``logging.WARNING`` / etc.
        log_file: Optional path to write logs to.
        overwrite: If True, truncates the log file; else appends.
        name: Logger name (defaults to the package logger).

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Clear handlers from previous calls (notebooks / repeated runs)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console = logging.StreamHandler(stream=sys.stdout)
    console.setLevel(level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, mode="w" if overwrite else "a", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


__all__ = ["LOG_FORMAT", "PACKAGE_LOGGER", "configure_logging", "get_logger"]
