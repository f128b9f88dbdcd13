# utils/logger.py
import logging
import sys
from pathlib import Path
from typing import Union

from config.paths import LOG_PATH
from utils.constants import LOG_LEVEL

LOGGER_NAME = "tournament"
MODULE_LOGGERS = ("core", "domain", "scheduler", "schedule")


def configure_logging(
    level: Union[int, str] = LOG_LEVEL, log_path: Path = LOG_PATH
) -> logging.Logger:
    """
    Attach a file handler and a stdout handler to the package loggers.

    Module loggers live under `core.*`, `domain.*`, `scheduler.*` and
    `schedule.*`, so the handlers are attached to those parents and to the
    "tournament" logger used by scripts driving the scheduler. Calling this
    more than once does not duplicate handlers.

    Args:
        level (int | str): Logging level, e.g. "INFO" or logging.DEBUG.
        log_path (Path): Destination of the log file.

    Returns:
        logging.Logger: The configured "tournament" logger.
    """
    log_path = Path(log_path)
    # Ensure directory exists
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Prevent duplicate handlers if called multiple times
    if not logger.handlers:
        # File handler
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_formatter = logging.Formatter(
            "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)

        # Stream handler
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_formatter = logging.Formatter("[%(levelname)s] %(message)s")
        stream_handler.setFormatter(stream_formatter)

        # Add both handlers
        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)

        for name in MODULE_LOGGERS:
            child = logging.getLogger(name)
            child.setLevel(level)
            child.addHandler(file_handler)
            child.addHandler(stream_handler)

        logger.debug(f"Logging to {log_path}")

    return logger
