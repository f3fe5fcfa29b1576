# karasu_config/utils/logger.py

"""
Logging configuration and utilities for karasu-config.

All modules log through one ``karasu_config`` namespace logger so that a host
application can silence, redirect or raise the verbosity of the library in
one place. Message helpers prefix the emitting component, e.g.
``[REGISTRY] Config saved | Context: plugins/Foo/bar.json``.
"""

import logging
import sys
from typing import Any

from karasu_config.settings import get_settings

LOGGER_NAME = "karasu_config"

# Global logger instance for singleton pattern
_logger: logging.Logger | None = None

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str | None = None,
    log_file: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """
    Set up logging configuration for karasu-config.

    Replaces any handlers previously installed on the library logger with a
    console handler and, when ``log_file`` is given, a file handler.

    Args:
        level: Logging level name. Defaults to ``settings.log_level``.
        log_file: Path to a log file (optional). Defaults to ``settings.log_file``.
        format_string: Custom log format string (optional).

    Returns:
        Configured logger instance
    """
    global _logger

    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    log_file = log_file if log_file is not None else settings.log_file

    logger = logging.getLogger(LOGGER_NAME)
    logger.disabled = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    formatter = logging.Formatter(format_string or DEFAULT_LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """
    Get the global logger instance.

    Lazily configures the logger from the library settings on first use.
    """
    if _logger is None:
        return setup_logging()
    return _logger


def _format(module: str, message: str, context: str = "") -> str:
    text = f"[{module.upper()}] {message}"
    if context:
        text += f" | Context: {context}"
    return text


def log_error(
    module: str, error: str, context: str = "", exception: Exception | None = None
) -> None:
    """
    Log a standardized error message.

    If an exception is provided, its stack trace is attached to the record.
    """
    logger = get_logger()
    if exception is not None:
        logger.error(_format(module, error, context), exc_info=exception)
    else:
        logger.error(_format(module, error, context))


def log_warning(module: str, warning: str, context: str = "") -> None:
    """Log a standardized warning message."""
    get_logger().warning(_format(module, warning, context))


def log_info(module: str, message: str, context: str = "") -> None:
    """Log a standardized info message."""
    get_logger().info(_format(module, message, context))


def log_debug(module: str, message: str, context: str = "") -> None:
    """Log a standardized debug message."""
    get_logger().debug(_format(module, message, context))


def log_file_operation(
    operation: str, file_path: Any, success: bool, error: str | None = None
) -> None:
    """
    Log a file operation.

    Args:
        operation: Type of operation (read, write, mkdir, ...)
        file_path: Path to the file being operated on
        success: Whether the operation was successful
        error: Error message if the operation failed (optional)
    """
    logger = get_logger()
    if success:
        logger.debug(f"File {operation}: {file_path}")
    else:
        logger.error(f"File {operation} failed: {file_path} - {error}")
