"""Logging configuration."""

import sys

from loguru import logger


def setup_logger(verbose: bool = False, debug: bool = False) -> None:
    """
    Replace loguru's default sink with a stderr sink at the requested level.

    WARNING by default, INFO with verbose, DEBUG with debug.
    """
    logger.remove()

    if debug:
        level = "DEBUG"
        fmt = "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <7}</level> | {name}:{line} - {message}"
    elif verbose:
        level = "INFO"
        fmt = "<level>{message}</level>"
    else:
        level = "WARNING"
        fmt = "<level>{level}</level>: {message}"

    logger.add(sys.stderr, level=level, format=fmt)
