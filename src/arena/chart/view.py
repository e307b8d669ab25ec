"""One refresh of the arena chart: snapshots in, renderable view out."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import AbstractSet, Iterable

from arena.chart.active_set import reconcile
from arena.chart.align import align, window
from arena.chart.colors import ColorAssigner
from arena.chart.domain import compute_domain
from arena.chart.endpoints import locate_endpoints
from arena.chart.normalize import SnapshotLike, normalize_batch
from arena.chart.ranking import collect_accounts, rank
from arena.types import ChartView


def build_chart_view(
    snapshots: Iterable[SnapshotLike],
    active: AbstractSet[str] | None = None,
    *,
    window_size: int | None = None,
    colors: ColorAssigner | None = None,
) -> ChartView:
    """Build every derived chart structure from one snapshot batch.

    The identity table is collected from the whole batch, while ranking,
    domain and endpoints only see the trailing ``window_size`` points. The
    active set passed in is reconciled against the batch's accounts and the
    reconciled set is returned in the view.

    :param snapshots: Raw snapshots, mappings or normalized points.
    :param active: Active keys carried over from the previous refresh.
    :param window_size: Trailing aligned points to keep, or None for all.
    :param colors: Color assigner, defaults to the standard palette.
    :returns: The chart view for this batch.
    """
    normalized = normalize_batch(snapshots)
    accounts = collect_accounts(normalized)
    points = window(align(normalized), window_size)

    rankings = rank(points, accounts, colors)
    active_keys = reconcile(active or frozenset(), [a.account_key for a in accounts])

    return ChartView(
        points=points,
        domain=compute_domain(points, active_keys),
        rankings=rankings,
        active_keys=active_keys,
        endpoints=locate_endpoints(points, [a.account_key for a in accounts]),
        generated_at=datetime.now(timezone.utc),
    )


def with_active_keys(view: ChartView, active_keys: AbstractSet[str]) -> ChartView:
    """Return a copy of ``view`` showing a different set of series.

    The keys are reconciled against the view's accounts, so unknown keys are
    dropped and an empty set shows every series again. Only the active set
    and the domain are recomputed.
    """
    keys = reconcile(active_keys, [series.account_key for series in view.rankings])
    return view.model_copy(
        update={
            "active_keys": keys,
            "domain": compute_domain(view.points, keys),
        }
    )
