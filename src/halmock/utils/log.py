"""
Logging Utilities
=================
Package logger helpers for halmock.

Every module logs through a child of the "halmock" logger. A NullHandler is
installed on the package logger so nothing is printed unless the test suite
or application configures logging itself (pytest's caplog/log_cli do).

Usage:
    from halmock.utils.log import get_logger

    logger = get_logger(__name__)
    logger.debug("loaded %d expectations", count)

Module: halmock.utils.log
Version: 1.0.0
"""

import logging

from halmock.core.constants import LOGGER_NAME

_package_logger = logging.getLogger(LOGGER_NAME)
_package_logger.addHandler(logging.NullHandler())


def get_logger(name=LOGGER_NAME):
    """
    Get a logger inside the halmock hierarchy.

    Args:
        name: Module name; names outside the package are nested under it

    Returns:
        logging.Logger
    """
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level):
    """
    Set the level of the package logger.

    Args:
        level: Level name ("DEBUG", "INFO", ...) or numeric level

    Raises:
        ValueError: If the level name is unknown
    """
    if isinstance(level, str):
        numeric = logging.getLevelName(level.upper())
        if not isinstance(numeric, int):
            raise ValueError(f"Unknown log level: {level}")
        level = numeric
    _package_logger.setLevel(level)
