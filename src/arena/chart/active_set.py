"""Visibility state for chart series.

The set of visible account keys is the only state the engine carries between
refreshes. It changes through exactly two transitions, :func:`reconcile` and
:func:`toggle`, and is never empty once at least one account exists.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable

from arena.log import get_logger

logger = get_logger(__name__)


def reconcile(active: AbstractSet[str], universe: Iterable[str]) -> frozenset[str]:
    """Restrict the active set to the accounts in a new batch.

    If none of the previously active accounts survive (including the first
    run, when nothing is active yet), every account in the universe becomes
    active. An empty universe leaves the active set unchanged.

    :param active: Currently active account keys.
    :param universe: Account keys observed in the latest batch.
    :returns: The reconciled active set.
    """
    universe_keys = frozenset(universe)
    if not universe_keys:
        return frozenset(active)

    kept = frozenset(active) & universe_keys
    return kept if kept else universe_keys


def toggle(active: AbstractSet[str], key: str) -> frozenset[str]:
    """Show or hide one series.

    Hiding the last visible series is refused; the key stays active alone.

    :param active: Currently active account keys.
    :param key: Account key to toggle.
    :returns: The updated active set.
    """
    if key not in active:
        return frozenset(active) | {key}

    remaining = frozenset(active) - {key}
    return remaining if remaining else frozenset([key])


class ActiveSetManager:
    """Owner of the active set across refreshes.

    :param keys: Initial active keys (usually empty until the first batch).
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys = frozenset(keys)

    @property
    def keys(self) -> frozenset[str]:
        """Currently active account keys."""
        return self._keys

    def is_active(self, key: str) -> bool:
        """Return True if the series for ``key`` is shown."""
        return key in self._keys

    def reconcile(self, universe: Iterable[str]) -> frozenset[str]:
        """Apply :func:`reconcile` against a new account universe."""
        previous = self._keys
        self._keys = reconcile(previous, universe)
        if previous and self._keys != previous:
            logger.debug("Active set reconciled: %d -> %d key(s)", len(previous), len(self._keys))
        return self._keys

    def toggle(self, key: str) -> frozenset[str]:
        """Apply :func:`toggle` for one account key."""
        self._keys = toggle(self._keys, key)
        return self._keys
