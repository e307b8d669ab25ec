"""Snapshot sources for the arena asset curve."""

from arena.data.sources import (CSVSnapshotSource, HTTPSnapshotSource,
                                JSONFileSnapshotSource, MockSnapshotSource,
                                SnapshotSource, resolve_snapshot_source,
                                source_for_file)

__all__ = [
    "SnapshotSource",
    "HTTPSnapshotSource",
    "JSONFileSnapshotSource",
    "CSVSnapshotSource",
    "MockSnapshotSource",
    "resolve_snapshot_source",
    "source_for_file",
]
