"""Logging configuration for Formula Bump.

This module provides centralized logging configuration with support for:
- Console output (stderr)
- Debug mode via --verbose or environment variable

Usage:
    from formula_bump.logging_config import setup_logging, get_logger

    # At application startup
    setup_logging()

    # In modules
    logger = get_logger(__name__)
    logger.info("Message")

Environment variables:
    FORMULA_BUMP_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
"""

import logging
import os
import sys

ROOT_LOGGER_NAME = "formula_bump"

# Log format
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_log_level() -> int:
    """Get log level from environment variable."""
    level_str = os.environ.get("FORMULA_BUMP_LOG_LEVEL", "INFO").upper()
    levels = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    return levels.get(level_str, logging.INFO)


def setup_logging(level: int | None = None) -> logging.Logger:
    """Configure logging for Formula Bump.

    Args:
        level: Log level (uses FORMULA_BUMP_LOG_LEVEL if not specified)

    Returns:
        The configured package logger
    """
    if level is None:
        level = get_log_level()

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(level)

    # Remove existing handlers
    package_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format, DATE_FORMAT))
    package_logger.addHandler(console_handler)

    # Don't propagate to root logger
    package_logger.propagate = False
    return package_logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the formula_bump namespace.

    Args:
        name: Logger name (usually __name__)
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_debug_mode(enabled: bool = True) -> None:
    """Enable or disable debug output on an already configured logger."""
    level = logging.DEBUG if enabled else logging.INFO
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
