"""Logging setup."""

import sys

from loguru import logger

from wraith.config.schema import LoggingConfig


def setup_logging(config: LoggingConfig | None = None, sink=None) -> int:
    """
    Replace loguru's default sink with one using the configured level and format.

    Args:
        config: Logging configuration. Defaults to LoggingConfig().
        sink: Where to write. Defaults to stderr.

    Returns:
        The id of the added sink.
    """
    config = config or LoggingConfig()
    logger.remove()
    return logger.add(
        sink or sys.stderr,
        level=config.level,
        format=config.format,
        colorize=config.colorize,
    )
