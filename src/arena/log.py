"""Logging setup with colored console output.

Adds ANSI color codes to log levels when writing to a terminal:
- DEBUG: Cyan
- INFO: Green
- WARNING: Yellow
- ERROR: Red
- CRITICAL: Bold Red
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s:%(funcName)s:%(lineno)d] - %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Valid log levels
VALID_LOG_LEVELS = frozenset(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when the stream is a TTY."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str = DEFAULT_FORMAT,
        datefmt: str | None = DEFAULT_DATEFMT,
        use_colors: bool = True,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors and hasattr(sys.stderr, "isatty") and sys.stderr.isatty()

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, coloring the level name if enabled."""
        if not self.use_colors or record.levelname not in self.COLORS:
            return super().format(record)

        original = record.levelname
        record.levelname = f"{self.COLORS[original]}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def setup_logging(level: str | int = "INFO", use_colors: bool = True) -> None:
    """Configure the root logger with a single colored stderr handler.

    :param level: Level name (e.g., "INFO") or numeric logging level.
    :param use_colors: Whether to color level names on a terminal.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColoredFormatter(use_colors=use_colors))
    root.setLevel(level)
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module."""
    return logging.getLogger(name)


__all__ = [
    "ColoredFormatter",
    "DEFAULT_FORMAT",
    "VALID_LOG_LEVELS",
    "get_logger",
    "setup_logging",
]
