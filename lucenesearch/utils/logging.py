"""
Logging utilities for lucenesearch.

Every module logs through a child of the ``lucenesearch`` logger, so a
single ``setup_logger()`` call configures the whole package. Handlers
installed here are tagged and replaced on reconfiguration; handlers added
by the application are left alone.
"""

import logging
import sys
from typing import Optional, Union


PACKAGE_LOGGER = "lucenesearch"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_lucenesearch_handler"

LevelLike = Union[str, int]


def parse_level(level: LevelLike) -> int:
    """
    Convert a level name or number to a logging level.

    Raises:
        ValueError: If the name is not a standard level
    """
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: LevelLike = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger with a console handler and an optional file handler.

    Args:
        name: Logger name
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) or number
        format_string: Custom format string
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(parse_level(level))

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        format_string or DEFAULT_FORMAT,
        datefmt=DEFAULT_DATE_FORMAT,
    )

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    return logger


def get_logger(name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Logger for ``name`` inside the package namespace.

    Module names (``lucenesearch.query.runner``) are used as-is; other
    names are nested under ``lucenesearch``. No handlers are attached.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """Context manager for temporary log level changes."""

    def __init__(self, logger: logging.Logger, level: LevelLike):
        self.logger = logger
        self.new_level = parse_level(level)
        self.old_level = logger.level

    def __enter__(self) -> logging.Logger:
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, *args) -> None:
        self.logger.setLevel(self.old_level)
