"""Snapshot source implementations for the arena asset curve.

This module provides an abstract interface for snapshot sources and concrete
implementations for the arena HTTP API, JSON files and CSV files.
"""

from __future__ import annotations

import csv
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

import requests

from arena.exceptions import DataSourceError
from arena.log import get_logger

if TYPE_CHECKING:
    from arena.types import ArenaConfig

logger = get_logger(__name__)

DEFAULT_CURVE_PATH = "/api/arena/asset-curve"


def _unwrap_batch(payload: Any, origin: str) -> list[dict[str, Any]]:
    """Extract the snapshot list from a decoded payload.

    Accepts a bare JSON array or an object with a ``data`` array.

    :raises DataSourceError: If the payload holds no snapshot list.
    """
    if isinstance(payload, dict) and "data" in payload:
        payload = payload["data"]
    if not isinstance(payload, list):
        raise DataSourceError(
            f"Expected a list of snapshots from {origin}, got {type(payload).__name__}"
        )
    return payload


class SnapshotSource(ABC):
    """Abstract base class for snapshot sources.

    All snapshot source implementations must inherit from this class and
    implement the `fetch_snapshots` method.
    """

    @abstractmethod
    def fetch_snapshots(self, timeframe: str, trading_mode: str) -> list[dict[str, Any]]:
        """Fetch the current asset-curve batch.

        :param timeframe: Curve timeframe (e.g., "5m").
        :param trading_mode: Trading mode (e.g., "paper").
        :returns: Raw snapshot records, unvalidated.
        :raises DataSourceError: If fetching fails.
        """
        ...


class HTTPSnapshotSource(SnapshotSource):
    """Snapshot source that polls the arena backend over HTTP.

    :param source_params: Required parameters:
        - base_url: Backend root URL (e.g., "http://localhost:8802").
        Optional parameters:
        - path: Asset-curve endpoint path (default: "/api/arena/asset-curve")
        - timeout: Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        source_params: dict[str, Any] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize HTTP snapshot source.

        :param source_params: Configuration with base_url and optional path/timeout.
        :param session: Session to reuse, created if omitted.
        :raises DataSourceError: If base_url is not provided.
        """
        self.params = source_params or {}
        self.base_url = self.params.get("base_url")
        if not self.base_url:
            raise DataSourceError("HTTPSnapshotSource requires 'base_url' in source_params")
        self.path = self.params.get("path", DEFAULT_CURVE_PATH)
        self.timeout = self.params.get("timeout", 30)
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        """Full asset-curve endpoint URL."""
        return f"{self.base_url.rstrip('/')}/{self.path.lstrip('/')}"

    def fetch_snapshots(self, timeframe: str, trading_mode: str) -> list[dict[str, Any]]:
        """Fetch the asset-curve batch from the backend.

        :param timeframe: Curve timeframe.
        :param trading_mode: Trading mode.
        :returns: Raw snapshot records.
        :raises DataSourceError: On transport errors, non-2xx responses or
            undecodable bodies.
        """
        params = {"timeframe": timeframe, "trading_mode": trading_mode}
        logger.debug("GET %s params=%s", self.url, params)

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise DataSourceError(f"Request timeout after {self.timeout}s: {self.url}") from e
        except requests.exceptions.RequestException as e:
            raise DataSourceError(f"Failed to fetch asset curve from {self.url}: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON from {self.url}: {e}") from e

        return _unwrap_batch(payload, self.url)


class JSONFileSnapshotSource(SnapshotSource):
    """Snapshot source that reads a saved batch from a JSON file.

    :param source_params: Required parameters:
        - file_path: Path to a JSON array of snapshots (or ``{"data": [...]}``).
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize JSON file source.

        :param source_params: Configuration with file_path.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("JSONFileSnapshotSource requires 'file_path' in source_params")

    def fetch_snapshots(self, timeframe: str, trading_mode: str) -> list[dict[str, Any]]:
        """Read the batch from disk.

        :param timeframe: Ignored for file sources.
        :param trading_mode: Ignored for file sources.
        :returns: Raw snapshot records.
        :raises DataSourceError: If the file is missing or not a snapshot list.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"JSON file not found: {self.file_path}")

        try:
            with open(path, encoding="utf-8") as f:
                payload = json.load(f)
        except json.JSONDecodeError as e:
            raise DataSourceError(f"Invalid JSON in {self.file_path}: {e}") from e
        except UnicodeDecodeError as e:
            raise DataSourceError(f"JSON file is not valid UTF-8: {self.file_path}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read JSON file: {e}") from e

        return _unwrap_batch(payload, str(path))


class CSVSnapshotSource(SnapshotSource):
    """Snapshot source that reads a batch from a CSV file.

    Columns use the backend field names (``account_id``, ``total_assets``,
    ``datetime_str``, ``timestamp``, ``date``, ``username``, ...). Empty
    cells are dropped so they read as missing fields.

    :param source_params: Required parameters:
        - file_path: Path to the CSV file.
        Optional parameters:
        - delimiter: CSV delimiter (default: ",")
    """

    def __init__(self, source_params: dict[str, Any] | None = None) -> None:
        """Initialize CSV snapshot source.

        :param source_params: Configuration with file_path and optional delimiter.
        :raises DataSourceError: If file_path is not provided.
        """
        self.params = source_params or {}
        self.file_path = self.params.get("file_path")
        if not self.file_path:
            raise DataSourceError("CSVSnapshotSource requires 'file_path' in source_params")
        self.delimiter = self.params.get("delimiter", ",")

    def fetch_snapshots(self, timeframe: str, trading_mode: str) -> list[dict[str, Any]]:
        """Read the batch from the CSV file.

        :param timeframe: Ignored for file sources.
        :param trading_mode: Ignored for file sources.
        :returns: Raw snapshot records with string values.
        :raises DataSourceError: If reading fails.
        """
        path = Path(self.file_path)
        if not path.exists():
            raise DataSourceError(f"CSV file not found: {self.file_path}")

        try:
            with open(path, newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                return [
                    {key: value for key, value in row.items() if key and value not in (None, "")}
                    for row in reader
                ]
        except csv.Error as e:
            raise DataSourceError(f"CSV parsing error: {e}") from e
        except UnicodeDecodeError as e:
            raise DataSourceError(f"CSV file is not valid UTF-8: {self.file_path}") from e
        except OSError as e:
            raise DataSourceError(f"Failed to read CSV file: {e}") from e


class MockSnapshotSource(SnapshotSource):
    """In-memory snapshot source for tests and demos.

    Each fetch returns the next queued batch; the last batch repeats once the
    queue is exhausted.

    :param batches: Batches to serve in order.
    """

    def __init__(self, batches: list[list[dict[str, Any]]] | None = None) -> None:
        self._batches = list(batches or [])
        self._error: DataSourceError | None = None
        self.calls: list[tuple[str, str]] = []

    def push(self, batch: list[dict[str, Any]]) -> None:
        """Queue another batch."""
        self._batches.append(batch)

    def fail_with(self, error: DataSourceError | None) -> None:
        """Make subsequent fetches raise ``error`` (None to stop failing)."""
        self._error = error

    def fetch_snapshots(self, timeframe: str, trading_mode: str) -> list[dict[str, Any]]:
        """Return the next queued batch."""
        self.calls.append((timeframe, trading_mode))
        if self._error is not None:
            raise self._error
        if not self._batches:
            return []
        if len(self._batches) > 1:
            return self._batches.pop(0)
        return self._batches[0]


def resolve_snapshot_source(config: ArenaConfig) -> SnapshotSource:
    """Construct a snapshot source from configuration.

    :param config: ArenaConfig with source_type and source_params.
    :returns: SnapshotSource instance for the specified type.
    :raises DataSourceError: If source_type is unrecognized.
    """
    source_type = config.source_type.lower()

    if source_type == "http":
        return HTTPSnapshotSource(config.source_params)
    elif source_type == "json":
        return JSONFileSnapshotSource(config.source_params)
    elif source_type == "csv":
        return CSVSnapshotSource(config.source_params)
    else:
        raise DataSourceError(
            f"Unrecognized snapshot source type: '{config.source_type}'. "
            f"Supported types: http, json, csv"
        )


def source_for_file(file_path: str | Path) -> SnapshotSource:
    """Pick a file source from the file extension (``.csv`` or JSON otherwise)."""
    params = {"file_path": str(file_path)}
    if Path(file_path).suffix.lower() == ".csv":
        return CSVSnapshotSource(params)
    return JSONFileSnapshotSource(params)
