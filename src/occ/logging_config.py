"""
Logging configuration for occ.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .constants import DEFAULT_LOG_LEVEL, TRACE_LEVEL

logging.addLevelName(TRACE_LEVEL, "TRACE")

# Indexed by numeric verbosity, most severe first
VERBOSITY_LEVELS = [
    logging.CRITICAL,  # panic
    logging.CRITICAL,  # fatal
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
    TRACE_LEVEL,
]

LEVEL_NAMES = {
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "trace": TRACE_LEVEL,
}


def parse_verbosity(verbosity: Optional[str], changed: bool = False) -> int:
    """Translate a verbosity setting into a logging level.

    Args:
        verbosity: Level name or number, as given on the command line
        changed: Whether the user set the option explicitly

    Returns:
        A ``logging`` level

    Raises:
        ValueError: If the verbosity is neither a known level name nor a number
    """
    if not verbosity:
        return logging.DEBUG if changed else LEVEL_NAMES[DEFAULT_LOG_LEVEL]

    try:
        index = abs(int(verbosity))
    except ValueError:
        pass
    else:
        return VERBOSITY_LEVELS[min(index, len(VERBOSITY_LEVELS) - 1)]

    level = LEVEL_NAMES.get(verbosity.strip().lower())
    if level is None:
        raise ValueError(f"not a valid log level: {verbosity!r}")
    return level


def setup_logging(
    verbosity: Optional[str] = None,
    changed: bool = False,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Set up logging configuration.

    Args:
        verbosity: Level name or number (see ``parse_verbosity``)
        changed: Whether the verbosity was set explicitly
        log_file: Optional file to write logs to

    Returns:
        Configured logger instance
    """
    invalid: Optional[ValueError] = None
    try:
        log_level = parse_verbosity(verbosity, changed)
    except ValueError as e:
        log_level = LEVEL_NAMES[DEFAULT_LOG_LEVEL]
        invalid = e

    # Create logger
    logger = logging.getLogger("occ")
    logger.setLevel(min(log_level, logging.DEBUG) if log_file else log_level)

    # Clear any existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler (stderr)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File handler (if specified)
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)  # Always log everything to file
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if invalid is not None:
        logger.warning(f"{invalid}, using {DEFAULT_LOG_LEVEL}")

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name, defaults to the package logger

    Returns:
        Logger instance
    """
    if name is None:
        name = "occ"

    return logging.getLogger(name)
