"""Coloured logging configuration for the bench-mode tool.

This module provides a pre-configured logger with coloured output formatting
so the operator can follow each power scheme step as it happens.
"""

from __future__ import annotations

import logging
import os
import re
from typing import ClassVar

CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")


class LogMessageFilter(logging.Filter):
    """A logging filter to remove problematic control characters from log messages.

    powercfg output is echoed at debug level and may carry stray control bytes.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter log records, removing only problematic control characters.

        Returns:
            True if the log record should be processed, False otherwise.
        """
        if isinstance(record.msg, str):
            record.msg = CONTROL_CHARS.sub("", record.msg)
        if record.exc_text:
            record.exc_text = CONTROL_CHARS.sub("", record.exc_text)
        return True


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colour codes to different log levels."""

    # ANSI colour codes
    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[90m",  # Grey
        "INFO": "\033[92m",  # Green
        "WARNING": "\033[93m",  # Yellow
        "ERROR": "\033[91m",  # Red
        "CRITICAL": "\033[95m",  # Magenta
    }
    RESET: ClassVar[str] = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with appropriate colours.

        Returns:
            The formatted log record with appropriate colours.
        """
        colour = self.COLORS.get(record.levelname, "")
        formatted = super().format(record)
        if colour:
            formatted = f"{colour}{formatted}{self.RESET}"
        return formatted


def _resolve_level(name: str | None) -> int:
    """Map a level name such as ``"info"`` to its logging constant, defaulting to DEBUG."""
    level = logging.getLevelName((name or "DEBUG").upper())
    return level if isinstance(level, int) else logging.DEBUG


LOG_LEVEL = _resolve_level(os.getenv("LOG_LEVEL"))

# Create and configure logger with colour formatting
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)

console_handler = logging.StreamHandler()
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(ColoredFormatter("%(asctime)s - %(levelname)s - %(message)s"))
console_handler.addFilter(LogMessageFilter())

logger.addHandler(console_handler)

# Prevent duplicate logs from root logger
logger.propagate = False
