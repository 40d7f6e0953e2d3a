"""Logging configuration for linkshelf."""

import os
import sys

from loguru import logger


def configure_logging(*, verbose: bool = False, quiet: bool = False) -> None:
    """Route loguru to stderr.

    ``verbose`` wins over ``quiet``. ``LINKSHELF_LOG_LEVEL`` overrides both.
    """
    logger.remove()
    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    level = os.environ.get("LINKSHELF_LOG_LEVEL", level).upper()
    logger.add(sys.stderr, level=level, format="{level.icon} {module}: {message}")
