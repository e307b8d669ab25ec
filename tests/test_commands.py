"""Tests for the watch command configuration loader."""

from pathlib import Path

import pytest
import yaml

from arena.commands.watch import load_arena_config
from arena.exceptions import ConfigError
from arena.types import ArenaConfig


def _write_config(tmp_path: Path, config: dict | str) -> Path:
    path = tmp_path / "arena.yaml"
    if isinstance(config, str):
        path.write_text(config)
    else:
        path.write_text(yaml.safe_dump(config))
    return path


@pytest.fixture
def valid_config() -> dict:
    """A complete, valid arena configuration."""
    return {
        "timeframe": "1h",
        "trading_mode": "live",
        "source": {"type": "http", "params": {"base_url": "http://localhost:8802"}},
        "refresh": {"interval": 120, "deduping_interval": 10},
        "chart": {
            "window_size": 50,
            "palette": ["#111111", "#222222"],
            "fallback_color": "#000000",
        },
        "logging": {"level": "debug"},
    }


class TestLoadArenaConfig:
    """Tests for load_arena_config."""

    def test_load_valid_config(self, tmp_path: Path, valid_config: dict) -> None:
        """Every section is parsed into ArenaConfig."""
        config = load_arena_config(_write_config(tmp_path, valid_config))

        assert isinstance(config, ArenaConfig)
        assert config.timeframe == "1h"
        assert config.trading_mode == "live"
        assert config.source_type == "http"
        assert config.source_params == {"base_url": "http://localhost:8802"}
        assert config.refresh_interval == 120.0
        assert config.deduping_interval == 10.0
        assert config.window_size == 50
        assert config.palette == ["#111111", "#222222"]
        assert config.fallback_color == "#000000"
        assert config.log_level == "DEBUG"

    def test_defaults(self, tmp_path: Path) -> None:
        """Only the source section is required."""
        config = load_arena_config(
            _write_config(tmp_path, {"source": {"type": "json", "params": {"file_path": "x.json"}}})
        )

        assert config.timeframe == "5m"
        assert config.trading_mode == "paper"
        assert config.refresh_interval == 60.0
        assert config.deduping_interval == 30.0
        assert config.window_size is None
        assert config.palette is None
        assert config.fallback_color == "#7E8494"
        assert config.log_level == "INFO"

    def test_dedupe_defaults_to_interval_when_shorter(self, tmp_path: Path) -> None:
        """Without an explicit dedupe interval it never exceeds the refresh interval."""
        config = load_arena_config(
            _write_config(tmp_path, {"source": {"type": "http"}, "refresh": {"interval": 5}})
        )
        assert config.deduping_interval == 5.0

    def test_source_type_case_insensitive(self, tmp_path: Path) -> None:
        """Source type is normalized to lower case."""
        config = load_arena_config(_write_config(tmp_path, {"source": {"type": "CSV"}}))
        assert config.source_type == "csv"

    def test_file_not_found(self, tmp_path: Path) -> None:
        """Missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_arena_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Malformed YAML raises ConfigError."""
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_arena_config(_write_config(tmp_path, "source: [unclosed"))

    def test_non_mapping(self, tmp_path: Path) -> None:
        """A top-level list is rejected."""
        with pytest.raises(ConfigError, match="mapping"):
            load_arena_config(_write_config(tmp_path, "- a\n- b\n"))

    def test_missing_source(self, tmp_path: Path) -> None:
        """The source section is required."""
        with pytest.raises(ConfigError, match="Missing required field: source"):
            load_arena_config(_write_config(tmp_path, {"timeframe": "5m"}))

    def test_missing_source_type(self, tmp_path: Path) -> None:
        """source.type is required."""
        with pytest.raises(ConfigError, match="source.type"):
            load_arena_config(_write_config(tmp_path, {"source": {"params": {}}}))

    def test_invalid_source_type(self, tmp_path: Path) -> None:
        """Unknown source types are rejected."""
        with pytest.raises(ConfigError, match="Invalid source type"):
            load_arena_config(_write_config(tmp_path, {"source": {"type": "ftp"}}))

    def test_invalid_timeframe(self, tmp_path: Path, valid_config: dict) -> None:
        """Unknown timeframes are rejected."""
        valid_config["timeframe"] = "7m"
        with pytest.raises(ConfigError, match="Invalid timeframe"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_non_string_timeframe(self, tmp_path: Path, valid_config: dict) -> None:
        """A list timeframe is rejected with ConfigError."""
        valid_config["timeframe"] = ["5m"]
        with pytest.raises(ConfigError, match="Invalid timeframe"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_blank_trading_mode(self, tmp_path: Path, valid_config: dict) -> None:
        """Trading mode must be a non-empty string."""
        valid_config["trading_mode"] = "  "
        with pytest.raises(ConfigError, match="trading_mode"):
            load_arena_config(_write_config(tmp_path, valid_config))

    @pytest.mark.parametrize("interval", [0, -5, "fast", True])
    def test_invalid_refresh_interval(
        self, tmp_path: Path, valid_config: dict, interval: object
    ) -> None:
        """Refresh interval must be a positive number."""
        valid_config["refresh"] = {"interval": interval}
        with pytest.raises(ConfigError, match="refresh.interval"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_negative_dedupe_interval(self, tmp_path: Path, valid_config: dict) -> None:
        """Dedupe interval must not be negative."""
        valid_config["refresh"]["deduping_interval"] = -1
        with pytest.raises(ConfigError, match="non-negative"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_dedupe_exceeding_interval(self, tmp_path: Path, valid_config: dict) -> None:
        """Dedupe interval must not exceed the refresh interval."""
        valid_config["refresh"]["deduping_interval"] = 500
        with pytest.raises(ConfigError, match="must not exceed"):
            load_arena_config(_write_config(tmp_path, valid_config))

    @pytest.mark.parametrize("size", [0, -3, 2.5, "ten"])
    def test_invalid_window_size(self, tmp_path: Path, valid_config: dict, size: object) -> None:
        """Window size must be a positive integer."""
        valid_config["chart"]["window_size"] = size
        with pytest.raises(ConfigError, match="window_size"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_invalid_palette(self, tmp_path: Path, valid_config: dict) -> None:
        """Palette must be a list of strings."""
        valid_config["chart"]["palette"] = ["#111111", 42]
        with pytest.raises(ConfigError, match="palette"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_invalid_fallback_color(self, tmp_path: Path, valid_config: dict) -> None:
        """Fallback color must be a string."""
        valid_config["chart"]["fallback_color"] = 7
        with pytest.raises(ConfigError, match="fallback_color"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_invalid_section_type(self, tmp_path: Path, valid_config: dict) -> None:
        """Optional sections must be mappings when present."""
        valid_config["chart"] = ["not", "a", "mapping"]
        with pytest.raises(ConfigError, match="'chart' must be a mapping"):
            load_arena_config(_write_config(tmp_path, valid_config))

    def test_invalid_log_level(self, tmp_path: Path, valid_config: dict) -> None:
        """Unknown log levels are rejected."""
        valid_config["logging"]["level"] = "verbose"
        with pytest.raises(ConfigError, match="Invalid log level"):
            load_arena_config(_write_config(tmp_path, valid_config))
