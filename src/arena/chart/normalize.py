"""Snapshot normalization into the engine's canonical point format.

Upstream snapshots are best-effort: a record may carry any of three time
encodings and may have a missing or garbled equity value. Normalization never
raises. Records without a usable time field or account id are skipped, and
bad equity values become 0.0.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, Mapping, Union

from pydantic import ValidationError

from arena.chart.timekeys import (epoch_to_datetime, format_display_time,
                                  parse_iso, parse_time_key)
from arena.log import get_logger
from arena.types import AccountId, NormalizedPoint, RawSnapshot

logger = get_logger(__name__)

SnapshotLike = Union[RawSnapshot, NormalizedPoint, Mapping[str, Any]]


def coerce_snapshot(raw: RawSnapshot | Mapping[str, Any]) -> RawSnapshot | None:
    """Validate a mapping into a RawSnapshot.

    :param raw: Snapshot model or mapping with backend field names.
    :returns: RawSnapshot, or None if the record cannot be validated.
    """
    if isinstance(raw, RawSnapshot):
        return raw
    if not isinstance(raw, Mapping):
        logger.debug("Skipping non-mapping snapshot of type %s", type(raw).__name__)
        return None
    try:
        return RawSnapshot.model_validate(raw)
    except ValidationError as e:
        logger.debug("Skipping invalid snapshot %r: %s", raw, e.errors()[0]["msg"])
        return None


def _stringify_timestamp(timestamp: int | float) -> str:
    if isinstance(timestamp, float) and timestamp.is_integer():
        return str(int(timestamp))
    return str(timestamp)


def resolve_time_key(snapshot: RawSnapshot) -> str | None:
    """Pick the canonical bucket key: iso_time, then date_label, then timestamp."""
    if snapshot.iso_time is not None:
        return snapshot.iso_time
    if snapshot.date_label is not None:
        return snapshot.date_label
    if snapshot.timestamp is not None:
        return _stringify_timestamp(snapshot.timestamp)
    return None


def resolve_instant(snapshot: RawSnapshot) -> datetime | None:
    """Resolve the instant a snapshot describes, or None if no field parses."""
    if snapshot.iso_time is not None:
        parsed = parse_iso(snapshot.iso_time)
        if parsed is not None:
            return parsed
    if snapshot.timestamp is not None:
        parsed = epoch_to_datetime(snapshot.timestamp)
        if parsed is not None:
            return parsed
    if snapshot.date_label is not None:
        return parse_time_key(snapshot.date_label)
    return None


def default_display_name(account_id: int) -> str:
    """Name shown for an account that reports none."""
    return f"Account {account_id}"


def normalize_snapshot(raw: RawSnapshot | Mapping[str, Any]) -> NormalizedPoint | None:
    """Normalize one raw snapshot.

    :param raw: Snapshot model or mapping with backend field names.
    :returns: NormalizedPoint, or None if the record has no usable time field
        or no valid account id.
    """
    snapshot = coerce_snapshot(raw)
    if snapshot is None:
        return None

    time_key = resolve_time_key(snapshot)
    if time_key is None:
        return None

    instant = resolve_instant(snapshot)
    display_time = format_display_time(instant) if instant is not None else time_key

    return NormalizedPoint(
        time_key=time_key,
        display_time=display_time,
        account_id=AccountId(snapshot.account_id),
        value=snapshot.total_assets,
        display_name=snapshot.display_name or default_display_name(snapshot.account_id),
    )


def normalize_batch(snapshots: Iterable[SnapshotLike]) -> list[NormalizedPoint]:
    """Normalize a batch, dropping unusable records.

    Items that are already normalized pass through unchanged.

    :param snapshots: Raw snapshots, mappings or normalized points.
    :returns: Normalized points in input order.
    """
    points: list[NormalizedPoint] = []
    dropped = 0
    for item in snapshots:
        if isinstance(item, NormalizedPoint):
            points.append(item)
            continue
        point = normalize_snapshot(item)
        if point is None:
            dropped += 1
        else:
            points.append(point)

    if dropped:
        logger.debug("Dropped %d unusable snapshot(s) out of %d", dropped, dropped + len(points))
    return points
