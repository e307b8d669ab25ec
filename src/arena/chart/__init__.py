"""Equity curve alignment, ranking and visibility for the arena chart."""

from arena.chart.active_set import ActiveSetManager, reconcile, toggle
from arena.chart.align import align, window
from arena.chart.colors import (DEFAULT_PALETTE, FALLBACK_COLOR, ColorAssigner,
                                account_key, parse_account_key)
from arena.chart.domain import DEFAULT_DOMAIN, compute_domain, domain
from arena.chart.endpoints import endpoint_label, locate_endpoints
from arena.chart.normalize import normalize_batch, normalize_snapshot
from arena.chart.ranking import collect_accounts, rank
from arena.chart.view import build_chart_view, with_active_keys

__all__ = [
    # Normalization and alignment
    "normalize_snapshot",
    "normalize_batch",
    "align",
    "window",
    # Derived structures
    "DEFAULT_DOMAIN",
    "compute_domain",
    "domain",
    "collect_accounts",
    "rank",
    "locate_endpoints",
    "endpoint_label",
    # Identity and visibility
    "DEFAULT_PALETTE",
    "FALLBACK_COLOR",
    "ColorAssigner",
    "account_key",
    "parse_account_key",
    "ActiveSetManager",
    "reconcile",
    "toggle",
    # Views
    "build_chart_view",
    "with_active_keys",
]
