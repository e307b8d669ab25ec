"""Alignment of per-account snapshots into shared time buckets.

Snapshots for different accounts arrive independently, so the chart needs one
row per distinct time key holding whatever accounts were observed there. An
account missing from a bucket stays missing; the renderer draws a gap rather
than a drop to zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Sequence

from arena.chart.colors import account_key
from arena.chart.normalize import SnapshotLike, normalize_batch
from arena.chart.timekeys import parse_time_key
from arena.types import AlignedPoint


@dataclass
class _Bucket:
    """Accumulator for one time key while a batch is being aligned."""

    time_key: str
    display_time: str
    first_seen: int
    values: dict[str, float] = field(default_factory=dict)


def align(snapshots: Iterable[SnapshotLike]) -> list[AlignedPoint]:
    """Group snapshots by time key into ordered aligned points.

    Within a bucket a later observation for the same account overwrites an
    earlier one. Buckets whose key parses as a time are ordered by that time
    (ties keep first-seen order); the rest follow in first-seen order.

    :param snapshots: Raw snapshots, mappings or normalized points.
    :returns: Aligned points, oldest first.
    """
    buckets: dict[str, _Bucket] = {}
    for point in normalize_batch(snapshots):
        bucket = buckets.get(point.time_key)
        if bucket is None:
            bucket = _Bucket(
                time_key=point.time_key,
                display_time=point.display_time,
                first_seen=len(buckets),
            )
            buckets[point.time_key] = bucket
        bucket.values[account_key(point.account_id)] = point.value

    timed: list[tuple[datetime, int, _Bucket]] = []
    untimed: list[_Bucket] = []
    for bucket in buckets.values():
        instant = parse_time_key(bucket.time_key)
        if instant is None:
            untimed.append(bucket)
        else:
            timed.append((instant, bucket.first_seen, bucket))

    timed.sort(key=lambda item: (item[0], item[1]))
    ordered = [bucket for _, _, bucket in timed] + untimed

    return [
        AlignedPoint(
            time_key=bucket.time_key,
            display_time=bucket.display_time,
            values=dict(bucket.values),
        )
        for bucket in ordered
    ]


def window(points: Sequence[AlignedPoint], size: int | None) -> list[AlignedPoint]:
    """Keep only the trailing ``size`` aligned points.

    :param points: Aligned points, oldest first.
    :param size: Number of points to keep, or None to keep all.
    :returns: The trailing slice.
    """
    if size is None:
        return list(points)
    if size <= 0:
        return []
    return list(points[-size:])
