"""Internal logging utilities."""

import logging

# Create package logger
logger = logging.getLogger("flagtrace")

# Default to WARNING to avoid noise
logger.setLevel(logging.WARNING)


def log_internal_error(operation: str, error: Exception) -> None:
    """Log an internal error without raising to user code."""
    logger.warning("flagtrace internal error in %s: %s", operation, error, exc_info=True)


def log_debug(message: str, *args: object) -> None:
    """Log a debug message."""
    logger.debug(message, *args)
