"""
================================================================================
Autotest Tools Common Utilities
================================================================================

This module provides shared logging setup and small filesystem helpers for
the test suites and the runner.

Exports:
    - init_logger: Function to initialize loguru logger with standard settings
    - ensure_directory: Create a directory if it does not exist

Usage:
    from autotest_tools.common import init_logger

    init_logger(level="DEBUG", log_file="reports/logs/run.log")

================================================================================
"""

import os
import sys
from typing import Optional

from loguru import logger


# ============================================================
# Logging Setup
# ============================================================

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_logger_initialized = False


def init_logger(
    level: Optional[str] = None,
    format_string: Optional[str] = None,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """
    Initializes the loguru logger with standard settings.

    Only the first call in a process takes effect.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to LOG_LEVEL env or INFO.
        format_string: Log format string. Uses default if not provided.
        log_file: Optional file path to write logs to (LOG_FILE env).
        rotation: File sink rotation policy
        retention: File sink retention policy

    Example:
        init_logger()  # Use defaults
        init_logger(level="DEBUG", log_file="logs/suite.log")
    """
    global _logger_initialized

    if _logger_initialized:
        return

    # Remove default handler
    logger.remove()

    level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    format_string = format_string or DEFAULT_FORMAT

    logger.add(
        sys.stderr,
        format=format_string,
        level=level,
        colorize=True,
    )

    log_file = log_file or os.environ.get("LOG_FILE")
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            ensure_directory(log_dir)

        logger.add(
            log_file,
            format=format_string,
            level=level,
            rotation=rotation,
            retention=retention,
        )

    _logger_initialized = True
    logger.debug("Logger initialized successfully")


# ============================================================
# Common Utilities
# ============================================================

def ensure_directory(path: str) -> str:
    """
    Ensures a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The path (for chaining)
    """
    os.makedirs(path, exist_ok=True)
    return path


# Export public API
__all__ = [
    "init_logger",
    "ensure_directory",
]
