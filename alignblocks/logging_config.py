"""
Centralized logging configuration for alignblocks

Every module obtains its logger through get_logger() so that handler setup
and level selection happen in one place. The logging level is controlled via
the ALIGNBLOCKS_LOG_LEVEL environment variable.

Environment Variables:
    ALIGNBLOCKS_LOG_LEVEL: Set logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                           Default: WARNING

Examples:
    >>> from alignblocks.logging_config import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.error("Error processing CIGAR string %s", "8M2Q")
"""

import logging
import os

LOG_LEVEL_ENV_VAR = "ALIGNBLOCKS_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """
    Get or create a logger with the specified name

    Creates a logger with a consistent format and configurable logging level.
    Handlers are attached once per logger name, so repeated calls are cheap
    and never duplicate output.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Only configure if logger hasn't been configured yet
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        level_name = os.getenv(LOG_LEVEL_ENV_VAR, "WARNING").upper()
        level = getattr(logging, level_name, None)
        if isinstance(level, int):
            logger.setLevel(level)
        else:
            logger.setLevel(logging.WARNING)
            logger.warning(
                f"Invalid {LOG_LEVEL_ENV_VAR} '{level_name}'. Using WARNING instead. "
                f"Valid levels: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )

    return logger
