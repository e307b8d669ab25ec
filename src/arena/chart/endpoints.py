"""Terminal point lookup for end-of-line series labels."""

from __future__ import annotations

from typing import Iterable, Sequence

from arena.types import AlignedPoint, Endpoint


def locate_endpoints(
    points: Sequence[AlignedPoint],
    keys: Iterable[str] | None = None,
) -> dict[str, Endpoint]:
    """Find the last aligned point carrying a value for each account.

    :param points: Aligned chart points, oldest first.
    :param keys: Account keys to locate, or None for every key present.
    :returns: Mapping of account key to its endpoint. Accounts without any
        point get no entry.
    """
    wanted = set(keys) if keys is not None else None
    endpoints: dict[str, Endpoint] = {}
    for index, point in enumerate(points):
        for key, value in point.values.items():
            if wanted is None or key in wanted:
                endpoints[key] = Endpoint(index=index, value=value)
    return endpoints


def endpoint_label(display_name: str, max_initials: int = 3) -> str:
    """Initials drawn on a series' end dot.

    Takes the uppercased first letter of each space-separated word, up to
    ``max_initials`` of them.

    :param display_name: Account display name.
    :param max_initials: Maximum number of letters in the label.
    :returns: The initials, or ``"A"`` if the name has none.
    """
    initials = "".join(part[0].upper() for part in display_name.split(" ") if part)
    return initials[:max_initials] or "A"
