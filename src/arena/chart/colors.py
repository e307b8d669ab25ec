"""Stable series keys and display colors for competing accounts."""

from __future__ import annotations

import math
from typing import Sequence

from arena.types import AccountKey

ACCOUNT_KEY_PREFIX = "account_"

DEFAULT_PALETTE: tuple[str, ...] = (
    "#F0B90B",
    "#0ECB81",
    "#F6465D",
    "#627eea",
    "#9945ff",
    "#00B8D9",
    "#FF9F43",
    "#8A63D2",
)
FALLBACK_COLOR = "#7E8494"


def account_key(account_id: int) -> AccountKey:
    """Derive the series key for an account.

    :param account_id: Identifier of the account.
    :returns: Key of the form ``account_<id>``.
    """
    return AccountKey(f"{ACCOUNT_KEY_PREFIX}{account_id}")


def parse_account_key(key: str) -> int | None:
    """Recover the account id from a series key.

    :param key: Series key produced by :func:`account_key`.
    :returns: Account id, or None if the key was not produced by ``account_key``.
    """
    if not key.startswith(ACCOUNT_KEY_PREFIX):
        return None
    try:
        return int(key[len(ACCOUNT_KEY_PREFIX):])
    except ValueError:
        return None


class ColorAssigner:
    """Assigns each account a color that survives refreshes and reordering.

    The palette index is derived from the account id, so the same account
    keeps its color regardless of where it appears in a batch. Only ids that
    are not finite integers fall back to the account's enumeration position.

    :param palette: Colors to cycle through.
    :param fallback: Color used when the palette has no entry to offer.
    """

    def __init__(
        self,
        palette: Sequence[str] | None = None,
        fallback: str = FALLBACK_COLOR,
    ) -> None:
        self.palette: tuple[str, ...] = tuple(DEFAULT_PALETTE if palette is None else palette)
        self.fallback = fallback

    def color_index(self, account_id: int | float | None, position: int) -> int | None:
        """Palette index for an account.

        :param account_id: Identifier of the account.
        :param position: Position of the account in a stable enumeration order.
        :returns: Palette index, or None if the palette is empty.
        """
        size = len(self.palette)
        if size == 0:
            return None
        if _is_finite_integer(account_id):
            return abs(int(account_id)) % size  # type: ignore[arg-type]
        return position % size

    def color_for(self, account_id: int | float | None, position: int) -> str:
        """Display color for an account.

        :param account_id: Identifier of the account.
        :param position: Position of the account in a stable enumeration order.
        :returns: Palette color, or the fallback color.
        """
        index = self.color_index(account_id, position)
        if index is None or index >= len(self.palette):
            return self.fallback
        return self.palette[index]


def _is_finite_integer(value: int | float | None) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value) and value.is_integer()
