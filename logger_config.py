#!/usr/bin/env python3
"""
Centralized logging configuration for the blog feed build.
Every module logs through get_logger(__name__); structured events go
through log_event() so the formatter can append their data.
"""

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# LOG_LEVEL=DEBUG shows per-build mapping events
DEFAULT_LOG_LEVEL = logging.INFO


class StructuredFormatter(logging.Formatter):
    """Formats records as '<timestamp> [LEVEL] name: message | {event data}'."""

    def format(self, record: logging.LogRecord) -> str:
        record.timestamp = datetime.now(timezone.utc).isoformat()
        line = f"{record.timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"

        event_data = getattr(record, "event_data", None)
        if event_data:
            pairs = " ".join(f"{key}={value}" for key, value in event_data.items())
            line = f"{line} | {pairs}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def resolve_level(value: Optional[str] = None) -> int:
    """Map a level name such as 'debug' to its logging constant."""
    name = (value or os.getenv("LOG_LEVEL") or "").strip().upper()
    level = logging.getLevelName(name) if name else DEFAULT_LOG_LEVEL
    return level if isinstance(level, int) else DEFAULT_LOG_LEVEL


def setup_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Set up a logger writing structured lines to stdout.

    Args:
        name: Logger name (typically __name__ from calling module)
        level: Logging level (default: LOG_LEVEL env var, else INFO)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid duplicate handlers if logger already configured
    if logger.handlers:
        return logger

    level = resolve_level() if level is None else level
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(StructuredFormatter())
    logger.addHandler(handler)

    return logger


def log_event(logger: logging.Logger, level: str, event_type: str, data: Optional[Dict[str, Any]] = None) -> None:
    """
    Log a structured event with optional data.

    Args:
        logger: Logger instance
        level: Log level ('debug', 'info', 'warning', 'error', 'critical')
        event_type: Short event name, e.g. 'feed_written'
        data: Optional dictionary of additional data
    """
    log_func = getattr(logger, level.lower())
    log_func(event_type, extra={"event_data": data or {}})


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance."""
    return setup_logger(name)
