"""
Logging Configuration for Simultaneous Kelly

Handlers are attached to the `simultaneous_kelly` package logger, so
configuring the CLI leaves an embedding application's root logger alone.
"""

import logging
import sys
from pathlib import Path

from simultaneous_kelly.config.settings import CONFIG

PACKAGE_LOGGER = "simultaneous_kelly"


def setup_logging(
    level: str = None,
    log_file: Path = None,
    format_string: str = None
) -> logging.Logger:
    """
    Configure the package logger for a CLI run.

    Args:
        level: Logging level name, default from CONFIG.logging
        log_file: Optional file that receives the same records as stdout
        format_string: Record format, default from CONFIG.logging

    Returns:
        The `simultaneous_kelly` logger

    Raises:
        ValueError: If `level` is not a logging level name
    """
    config = CONFIG.logging
    level_name = (level or config.level).upper()
    numeric_level = logging.getLevelName(level_name)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level {level!r}")

    formatter = logging.Formatter(
        format_string or config.format_string,
        datefmt=config.date_format
    )

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the package namespace."""
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)
