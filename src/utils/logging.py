"""Logging configuration for Signal-Fuse."""

import logging
import sys
from typing import TextIO

# Logger name for the application
LOGGER_NAME = "signal_fuse"

# Child logger that records reasoning-service tie-break rationales
AUDIT_LOGGER_NAME = f"{LOGGER_NAME}.audit"

# Modules log through logging.getLogger(__name__), i.e. under the import package
PACKAGE_LOGGER_NAME = "src"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def configure_logging(
    level: str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the main application logger.

    The same stderr handler is attached to the application logger and to
    the package logger so module-level loggers share one output.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to INFO if not specified.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.
        stream: Stream for the console handler (defaults to stderr).

    Returns:
        The configured application logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    log_level = getattr(logging, (level or "INFO").upper(), logging.INFO)
    for target in (logger, package_logger):
        target.setLevel(log_level)

    if not _configured:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(log_level)
        handler.setFormatter(logging.Formatter(format_string, datefmt=date_format))

        for target in (logger, package_logger):
            target.handlers.clear()
            target.addHandler(handler)
            # Keep library loggers (litellm, aiosqlite) out of our handlers
            target.propagate = False

        _configured = True
    else:
        for handler in logger.handlers:
            handler.setLevel(log_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a child logger for a specific module.

    Args:
        name: The module name (will be prefixed with 'signal_fuse.').

    Returns:
        A child logger for the module.
    """
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_audit_logger() -> logging.Logger:
    """Logger used for the resolution audit trail."""
    return logging.getLogger(AUDIT_LOGGER_NAME)


def reset_logging() -> None:
    """Reset logging configuration (useful for testing)."""
    global _configured

    for name in (LOGGER_NAME, PACKAGE_LOGGER_NAME):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    _configured = False
