"""
Logging configuration.

Configures loguru sinks for the application.
"""

import sys

from loguru import logger

from referral_network.config.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level> | {extra}"
)


def setup_logging(
    level: str | None = None, log_file: str | None = None
) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum level (defaults to settings.log_level)
        log_file: Optional file path for a rotating sink
            (defaults to settings.log_file)
    """
    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file

    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="7 days",
            level=level,
            format=LOG_FORMAT,
        )

    logger.debug("Logging configured", extra={"level": level, "file": log_file})
