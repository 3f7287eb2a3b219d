"""Logging setup for therapykit."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Set up the therapykit logger, with rotation when logging to a file.

    Handlers are only added once; later calls just update the level.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR).
        log_file: Log file path. None or "" logs to stderr instead.

    Returns:
        Configured "therapykit" logger.

    Raises:
        ValueError: If the level name is unknown.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logger = logging.getLogger("therapykit")
    logger.setLevel(numeric_level)

    # Only set up handlers if not already configured
    if not logger.handlers:
        if log_file:
            # File handler with rotation (10MB max, keep 2 backups)
            handler: logging.Handler = RotatingFileHandler(
                Path(log_file),
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=2,
                encoding="utf-8",
            )
        else:
            handler = logging.StreamHandler()

        # Structured format - explicit fields only
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
        logger.addHandler(handler)

    return logger
