"""Arena exception hierarchy.

All arena-specific exceptions derive from :class:`ArenaError` so callers can
catch all arena-related errors uniformly. The chart engine itself never raises
on malformed snapshots; these are raised by the outer layers (configuration
and snapshot sources).
"""

from __future__ import annotations


class ArenaError(Exception):
    """Base class for arena-related exceptions.

    Derived exceptions should extend this class so that callers can catch all
    arena-specific errors uniformly.
    """


class ConfigError(ArenaError):
    """Raised when configuration files or parameters are invalid."""


class DataSourceError(ArenaError):
    """Raised when fetching or decoding a snapshot batch fails."""


__all__ = [
    "ArenaError",
    "ConfigError",
    "DataSourceError",
]
