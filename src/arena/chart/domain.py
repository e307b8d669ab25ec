"""Y-axis domain for the equity chart."""

from __future__ import annotations

import math
from typing import AbstractSet, Sequence

from arena.types import AlignedPoint

DEFAULT_DOMAIN: tuple[float, float] = (0.0, 100000.0)
PADDING_RATIO = 0.1
MIN_PADDING = 50.0


def compute_domain(
    points: Sequence[AlignedPoint],
    active_keys: AbstractSet[str] | None = None,
) -> tuple[float, float]:
    """Compute a padded ``(min, max)`` range over the visible series.

    Padding is 10% of the observed range but never less than 50. The lower
    bound is clamped at 0.

    :param points: Aligned chart points.
    :param active_keys: Account keys to include, or None for all accounts.
    :returns: ``DEFAULT_DOMAIN`` when no finite value is visible.
    """
    low = math.inf
    high = -math.inf
    for point in points:
        for key, value in point.values.items():
            if active_keys is not None and key not in active_keys:
                continue
            if not math.isfinite(value):
                continue
            low = min(low, value)
            high = max(high, value)

    if low == math.inf:
        return DEFAULT_DOMAIN

    padding = max((high - low) * PADDING_RATIO, MIN_PADDING)
    return (max(0.0, low - padding), high + padding)


# Alias
domain = compute_domain
