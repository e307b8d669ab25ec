"""Arena package root."""

from arena.exceptions import ArenaError, ConfigError, DataSourceError

__all__ = ["ArenaError", "ConfigError", "DataSourceError"]
