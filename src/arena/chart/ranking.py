"""Leaderboard ranking of competing accounts by latest equity."""

from __future__ import annotations

from typing import Iterable, Sequence

from arena.chart.colors import ColorAssigner, account_key
from arena.types import (AccountId, AccountIdentity, AccountSeries, AlignedPoint,
                         NormalizedPoint)


def collect_accounts(points: Iterable[NormalizedPoint]) -> list[AccountIdentity]:
    """Build the identity table for every account in a batch.

    Accounts are listed in first-seen order. The display name comes from the
    account's latest record in batch order; ``peak_value`` is the highest
    value observed anywhere in the batch.

    :param points: Normalized points of the whole batch.
    :returns: One identity per distinct account id.
    """
    names: dict[int, str] = {}
    peaks: dict[int, float] = {}
    for point in points:
        names[point.account_id] = point.display_name
        peak = peaks.get(point.account_id)
        if peak is None or point.value > peak:
            peaks[point.account_id] = point.value

    return [
        AccountIdentity(
            account_id=AccountId(account_id),
            account_key=account_key(account_id),
            display_name=name,
            peak_value=peaks[account_id],
            position=position,
        )
        for position, (account_id, name) in enumerate(names.items())
    ]


def latest_value(points: Sequence[AlignedPoint], account: AccountIdentity) -> float:
    """Most recent value of an account in the window.

    Falls back to the account's batch peak when the window holds no point
    for it.
    """
    for point in reversed(points):
        value = point.values.get(account.account_key)
        if value is not None:
            return value
    return account.peak_value


def rank(
    points: Sequence[AlignedPoint],
    accounts: Iterable[AccountIdentity],
    colors: ColorAssigner | None = None,
) -> list[AccountSeries]:
    """Rank accounts by latest value, best first.

    Ties are broken by ascending account id.

    :param points: Aligned chart points in the current window.
    :param accounts: Identity table from :func:`collect_accounts`.
    :param colors: Color assigner, defaults to the standard palette.
    :returns: One series per account, with ``rank`` starting at 1.
    """
    colors = colors or ColorAssigner()
    scored = [(latest_value(points, account), account) for account in accounts]
    scored.sort(key=lambda item: (-item[0], item[1].account_id))

    return [
        AccountSeries(
            account_id=account.account_id,
            account_key=account.account_key,
            display_name=account.display_name,
            color_index=colors.color_index(account.account_id, account.position),
            color=colors.color_for(account.account_id, account.position),
            latest_value=value,
            rank=position + 1,
        )
        for position, (value, account) in enumerate(scored)
    ]
