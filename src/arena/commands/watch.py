"""Configuration for the watch command.

Example config file (arena.yaml):

    timeframe: "5m"
    trading_mode: "paper"
    source:
      type: "http"
      params:
        base_url: "http://localhost:8802"
    refresh:
      interval: 60
      deduping_interval: 30
    chart:
      window_size: null  # Trailing aligned points, null = all
      palette: null  # List of colors, null = default palette
      fallback_color: "#7E8494"
    logging:
      level: "INFO"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from arena.chart.colors import FALLBACK_COLOR
from arena.exceptions import ConfigError
from arena.log import VALID_LOG_LEVELS
from arena.types import ArenaConfig

# Timeframes served by the asset-curve endpoint
VALID_TIMEFRAMES = frozenset(["1m", "5m", "15m", "1h", "4h", "1d"])

# Valid snapshot source types
VALID_SOURCE_TYPES = frozenset(["http", "json", "csv"])


def _positive_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"'{name}' must be a positive number")
    return float(value)


def _optional_mapping(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping")
    return section


def load_arena_config(config_path: str | Path) -> ArenaConfig:
    """Parse and validate an arena configuration file.

    :param config_path: Path to YAML configuration file.
    :returns: Validated ArenaConfig object.
    :raises ConfigError: If file cannot be read or config is invalid.
    """
    config_path = Path(config_path)

    # Read and parse YAML
    try:
        with open(config_path) as f:
            raw_config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError("Configuration must be a YAML mapping")

    if "source" not in raw_config:
        raise ConfigError("Missing required field: source")

    # Parse timeframe and trading mode
    timeframe = raw_config.get("timeframe", "5m")
    if not isinstance(timeframe, str) or timeframe not in VALID_TIMEFRAMES:
        raise ConfigError(
            f"Invalid timeframe '{timeframe}'. "
            f"Valid options: {sorted(VALID_TIMEFRAMES)}"
        )

    trading_mode = raw_config.get("trading_mode", "paper")
    if not isinstance(trading_mode, str) or not trading_mode.strip():
        raise ConfigError("'trading_mode' must be a non-empty string")

    # Parse source
    raw_source = raw_config["source"]
    if not isinstance(raw_source, dict):
        raise ConfigError("'source' must be a mapping")
    if "type" not in raw_source:
        raise ConfigError("'source.type' is required")

    source_type = str(raw_source["type"]).lower()
    if source_type not in VALID_SOURCE_TYPES:
        raise ConfigError(
            f"Invalid source type '{raw_source['type']}'. "
            f"Valid options: {sorted(VALID_SOURCE_TYPES)}"
        )

    source_params: dict[str, Any] = raw_source.get("params") or {}
    if not isinstance(source_params, dict):
        raise ConfigError("'source.params' must be a mapping")

    # Parse refresh (optional)
    raw_refresh = _optional_mapping(raw_config, "refresh")
    refresh_interval = _positive_number(raw_refresh.get("interval", 60), "refresh.interval")

    deduping_interval = raw_refresh.get("deduping_interval", min(30.0, refresh_interval))
    if (
        isinstance(deduping_interval, bool)
        or not isinstance(deduping_interval, (int, float))
        or deduping_interval < 0
    ):
        raise ConfigError("'refresh.deduping_interval' must be a non-negative number")
    if deduping_interval > refresh_interval:
        raise ConfigError("'refresh.deduping_interval' must not exceed 'refresh.interval'")

    # Parse chart (optional)
    raw_chart = _optional_mapping(raw_config, "chart")

    window_size: int | None = raw_chart.get("window_size")
    if window_size is not None:
        if isinstance(window_size, bool) or not isinstance(window_size, int) or window_size <= 0:
            raise ConfigError("'chart.window_size' must be a positive integer")

    palette: list[str] | None = raw_chart.get("palette")
    if palette is not None:
        if not isinstance(palette, list) or not all(isinstance(c, str) for c in palette):
            raise ConfigError("'chart.palette' must be a list of color strings")

    fallback_color = raw_chart.get("fallback_color", FALLBACK_COLOR)
    if not isinstance(fallback_color, str):
        raise ConfigError("'chart.fallback_color' must be a string")

    # Parse logging (optional)
    raw_logging = _optional_mapping(raw_config, "logging")
    log_level = str(raw_logging.get("level", "INFO")).upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid log level '{log_level}'. "
            f"Valid options: {sorted(VALID_LOG_LEVELS)}"
        )

    return ArenaConfig(
        timeframe=timeframe,
        trading_mode=trading_mode,
        source_type=source_type,
        source_params=source_params,
        refresh_interval=refresh_interval,
        deduping_interval=float(deduping_interval),
        window_size=window_size,
        palette=palette,
        fallback_color=fallback_color,
        log_level=log_level,
    )
