"""Logging setup for the command line."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send dracoclient log records to stderr in a plain text format.

    Library code only creates loggers; applications decide where records
    go. The CLI calls this once at start-up.

    Args:
        level: Logging level name or number for the ``dracoclient`` logger
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger("dracoclient")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
