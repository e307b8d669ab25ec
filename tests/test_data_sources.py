"""Tests for snapshot source implementations."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from arena.data.sources import (CSVSnapshotSource, HTTPSnapshotSource,
                                JSONFileSnapshotSource, MockSnapshotSource,
                                SnapshotSource, resolve_snapshot_source,
                                source_for_file)
from arena.exceptions import DataSourceError
from arena.types import ArenaConfig


@pytest.fixture
def snapshots() -> list[dict]:
    """A small backend batch."""
    return [
        {"datetime_str": "2024-01-01T00:00:00", "account_id": 1, "total_assets": 100.0, "username": "alpha"},
        {"datetime_str": "2024-01-01T00:00:00", "account_id": 2, "total_assets": 200.0, "username": "beta"},
    ]


def _session_returning(payload: object = None, status_error: Exception | None = None) -> MagicMock:
    response = MagicMock()
    response.json.return_value = payload
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    session = MagicMock(spec=requests.Session)
    session.get.return_value = response
    return session


class TestSnapshotSourceProtocol:
    """Tests for the SnapshotSource abstract base class."""

    def test_source_is_abstract(self) -> None:
        """SnapshotSource cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            SnapshotSource()  # type: ignore[abstract]

    def test_subclass_must_implement_fetch_snapshots(self) -> None:
        """Subclasses must implement fetch_snapshots."""

        class IncompleteSource(SnapshotSource):
            pass

        with pytest.raises(TypeError, match="abstract"):
            IncompleteSource()  # type: ignore[abstract]


class TestHTTPSnapshotSource:
    """Tests for HTTPSnapshotSource."""

    def test_requires_base_url(self) -> None:
        """Missing base_url should raise DataSourceError."""
        with pytest.raises(DataSourceError, match="base_url"):
            HTTPSnapshotSource({})

    def test_defaults(self) -> None:
        """Path and timeout have defaults."""
        source = HTTPSnapshotSource({"base_url": "http://arena.local/"}, session=MagicMock())

        assert source.timeout == 30
        assert source.url == "http://arena.local/api/arena/asset-curve"

    def test_fetch_passes_timeframe_and_mode(self, snapshots: list[dict]) -> None:
        """The request carries timeframe and trading mode as query params."""
        session = _session_returning(snapshots)
        source = HTTPSnapshotSource(
            {"base_url": "http://arena.local", "path": "/curve", "timeout": 5}, session=session
        )

        result = source.fetch_snapshots("5m", "paper")

        assert result == snapshots
        session.get.assert_called_once_with(
            "http://arena.local/curve",
            params={"timeframe": "5m", "trading_mode": "paper"},
            timeout=5,
        )

    def test_unwraps_data_envelope(self, snapshots: list[dict]) -> None:
        """A {"data": [...]} envelope is unwrapped."""
        session = _session_returning({"data": snapshots})
        source = HTTPSnapshotSource({"base_url": "http://arena.local"}, session=session)

        assert source.fetch_snapshots("5m", "paper") == snapshots

    def test_non_list_payload_raises(self) -> None:
        """A payload without a snapshot list raises DataSourceError."""
        session = _session_returning({"error": "nope"})
        source = HTTPSnapshotSource({"base_url": "http://arena.local"}, session=session)

        with pytest.raises(DataSourceError, match="Expected a list"):
            source.fetch_snapshots("5m", "paper")

    def test_http_error_raises(self) -> None:
        """Non-2xx responses raise DataSourceError."""
        session = _session_returning(status_error=requests.exceptions.HTTPError("502"))
        source = HTTPSnapshotSource({"base_url": "http://arena.local"}, session=session)

        with pytest.raises(DataSourceError, match="Failed to fetch"):
            source.fetch_snapshots("5m", "paper")

    def test_timeout_raises(self) -> None:
        """Timeouts raise DataSourceError."""
        session = MagicMock(spec=requests.Session)
        session.get.side_effect = requests.exceptions.Timeout()
        source = HTTPSnapshotSource({"base_url": "http://arena.local"}, session=session)

        with pytest.raises(DataSourceError, match="timeout"):
            source.fetch_snapshots("5m", "paper")

    def test_invalid_json_raises(self) -> None:
        """Undecodable bodies raise DataSourceError."""
        session = _session_returning()
        session.get.return_value.json.side_effect = ValueError("bad json")
        source = HTTPSnapshotSource({"base_url": "http://arena.local"}, session=session)

        with pytest.raises(DataSourceError, match="Invalid JSON"):
            source.fetch_snapshots("5m", "paper")


class TestJSONFileSnapshotSource:
    """Tests for JSONFileSnapshotSource."""

    def test_requires_file_path(self) -> None:
        """Missing file_path should raise DataSourceError."""
        with pytest.raises(DataSourceError, match="file_path"):
            JSONFileSnapshotSource({})

    def test_reads_array(self, tmp_path: Path, snapshots: list[dict]) -> None:
        """A JSON array is returned as-is."""
        path = tmp_path / "batch.json"
        path.write_text(json.dumps(snapshots))

        assert JSONFileSnapshotSource({"file_path": str(path)}).fetch_snapshots("5m", "paper") == snapshots

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        """Undecodable bytes raise DataSourceError."""
        path = tmp_path / "batch.json"
        path.write_bytes(b'[{"account_id": 1, "timestamp": 1, "username": "\xff\xfe"}]')

        with pytest.raises(DataSourceError, match="UTF-8"):
            JSONFileSnapshotSource({"file_path": str(path)}).fetch_snapshots("5m", "paper")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing file raises DataSourceError."""
        source = JSONFileSnapshotSource({"file_path": str(tmp_path / "missing.json")})

        with pytest.raises(DataSourceError, match="not found"):
            source.fetch_snapshots("5m", "paper")

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        """Malformed JSON raises DataSourceError."""
        path = tmp_path / "batch.json"
        path.write_text("[{")

        with pytest.raises(DataSourceError, match="Invalid JSON"):
            JSONFileSnapshotSource({"file_path": str(path)}).fetch_snapshots("5m", "paper")


class TestCSVSnapshotSource:
    """Tests for CSVSnapshotSource."""

    def test_requires_file_path(self) -> None:
        """Missing file_path should raise DataSourceError."""
        with pytest.raises(DataSourceError, match="file_path"):
            CSVSnapshotSource({})

    def test_reads_rows_and_drops_empty_cells(self, tmp_path: Path) -> None:
        """Rows become dicts without empty cells."""
        path = tmp_path / "batch.csv"
        path.write_text(
            "datetime_str,timestamp,account_id,total_assets,username\n"
            "2024-01-01T00:00:00,,1,100.5,alpha\n"
            ",1704067200,2,,\n"
        )

        rows = CSVSnapshotSource({"file_path": str(path)}).fetch_snapshots("5m", "paper")

        assert rows == [
            {"datetime_str": "2024-01-01T00:00:00", "account_id": "1", "total_assets": "100.5", "username": "alpha"},
            {"timestamp": "1704067200", "account_id": "2"},
        ]

    def test_custom_delimiter(self, tmp_path: Path) -> None:
        """The delimiter is configurable."""
        path = tmp_path / "batch.csv"
        path.write_text("timestamp;account_id\n1;7\n")

        rows = CSVSnapshotSource({"file_path": str(path), "delimiter": ";"}).fetch_snapshots("", "")

        assert rows == [{"timestamp": "1", "account_id": "7"}]

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        """Undecodable bytes raise DataSourceError."""
        path = tmp_path / "batch.csv"
        path.write_bytes(b"timestamp,account_id,username\n1,1,\xff\xfe\n")

        with pytest.raises(DataSourceError, match="UTF-8"):
            CSVSnapshotSource({"file_path": str(path)}).fetch_snapshots("5m", "paper")

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """A missing file raises DataSourceError."""
        source = CSVSnapshotSource({"file_path": str(tmp_path / "missing.csv")})

        with pytest.raises(DataSourceError, match="not found"):
            source.fetch_snapshots("5m", "paper")


class TestMockSnapshotSource:
    """Tests for MockSnapshotSource."""

    def test_serves_batches_in_order_then_repeats(self) -> None:
        """Batches are served in order and the last one repeats."""
        source = MockSnapshotSource([[{"a": 1}], [{"b": 2}]])

        assert source.fetch_snapshots("5m", "paper") == [{"a": 1}]
        assert source.fetch_snapshots("5m", "paper") == [{"b": 2}]
        assert source.fetch_snapshots("5m", "paper") == [{"b": 2}]
        assert source.calls == [("5m", "paper")] * 3

    def test_empty_source_returns_empty_batch(self) -> None:
        """A source with nothing queued returns an empty batch."""
        assert MockSnapshotSource().fetch_snapshots("5m", "paper") == []

    def test_fail_with(self) -> None:
        """A configured error is raised until cleared."""
        source = MockSnapshotSource([[{"a": 1}]])
        source.fail_with(DataSourceError("down"))

        with pytest.raises(DataSourceError, match="down"):
            source.fetch_snapshots("5m", "paper")

        source.fail_with(None)
        assert source.fetch_snapshots("5m", "paper") == [{"a": 1}]


class TestResolveSnapshotSource:
    """Tests for resolve_snapshot_source and source_for_file."""

    def test_resolves_http(self) -> None:
        """source_type 'http' builds an HTTPSnapshotSource."""
        config = ArenaConfig(source_type="http", source_params={"base_url": "http://x"})
        assert isinstance(resolve_snapshot_source(config), HTTPSnapshotSource)

    def test_resolves_json_and_csv(self, tmp_path: Path) -> None:
        """File source types resolve case-insensitively."""
        params = {"file_path": str(tmp_path / "f")}
        assert isinstance(
            resolve_snapshot_source(ArenaConfig(source_type="JSON", source_params=params)),
            JSONFileSnapshotSource,
        )
        assert isinstance(
            resolve_snapshot_source(ArenaConfig(source_type="csv", source_params=params)),
            CSVSnapshotSource,
        )

    def test_unknown_type_raises(self) -> None:
        """Unknown source types raise DataSourceError."""
        with pytest.raises(DataSourceError, match="Unrecognized"):
            resolve_snapshot_source(ArenaConfig(source_type="ftp"))

    def test_source_for_file_by_extension(self, tmp_path: Path) -> None:
        """CSV files get a CSV source, everything else JSON."""
        assert isinstance(source_for_file(tmp_path / "a.CSV"), CSVSnapshotSource)
        assert isinstance(source_for_file(tmp_path / "a.json"), JSONFileSnapshotSource)
