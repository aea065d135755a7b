"""Logging utilities for the Tongyi LLM library."""

import logging
import sys

_LOGGER_NAME = "tongyi_llm_lib"


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the library.

    Module names that already live in the library namespace are used as-is,
    anything else is nested below the library root logger.

    Args:
        name: Optional sub-logger name. If None, returns the root library logger.

    Returns:
        The requested logger.
    """
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    if name == _LOGGER_NAME or name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def setup_logging(
    level: int = logging.INFO, format_str: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
) -> None:
    """Setup default logging configuration for the library.

    This adds a StreamHandler to the library's root logger.
    Should typically be called by the application using the library, not the library itself.

    Args:
        level: Logging level.
        format_str: Log format string.
    """
    logger = logging.getLogger(_LOGGER_NAME)

    # Avoid adding multiple handlers if called multiple times
    if any(not isinstance(h, logging.NullHandler) for h in logger.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_str))
    logger.addHandler(handler)
    logger.setLevel(level)


# Set default NullHandler to avoid "No handler found" warnings
logging.getLogger(_LOGGER_NAME).addHandler(logging.NullHandler())
