"""Parsing and display helpers for the three snapshot time encodings."""

from __future__ import annotations

import re
from datetime import datetime, timezone

DISPLAY_TIME_FORMAT = "%m/%d %H:%M"

# Epochs whose integer string form is longer than this are milliseconds
EPOCH_SECONDS_MAX_DIGITS = 10

# Fallback formats for free-form date labels, tried in order
LABEL_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%m/%d/%Y",
)

_EPOCH_PATTERN = re.compile(r"^-?\d+(\.\d+)?$")


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def epoch_to_datetime(timestamp: int | float) -> datetime | None:
    """Convert an epoch timestamp in seconds or milliseconds to a datetime.

    Values whose integer string form exceeds ten characters are treated as
    milliseconds.

    :param timestamp: Epoch value.
    :returns: UTC datetime, or None if the value is out of range.
    """
    try:
        digits = str(abs(int(timestamp)))
        seconds = timestamp / 1000 if len(digits) > EPOCH_SECONDS_MAX_DIGITS else timestamp
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_iso(value: str) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed), naive values as UTC."""
    try:
        return _as_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    except ValueError:
        return None


def parse_label(value: str) -> datetime | None:
    """Parse a free-form date label against the known label formats."""
    text = value.strip()
    for fmt in LABEL_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    return None


def parse_time_key(key: str) -> datetime | None:
    """Resolve a bucket key to a comparable instant.

    Tries epoch digits, then ISO-8601, then the label formats. Digit-only
    keys are always read as epochs, never as compact ISO dates.

    :param key: Time key of an aligned bucket.
    :returns: UTC datetime, or None if the key is not a recognizable time.
    """
    text = key.strip()
    if _EPOCH_PATTERN.match(text):
        return epoch_to_datetime(float(text))
    parsed = parse_iso(text)
    if parsed is not None:
        return parsed
    return parse_label(text)


def format_display_time(dt: datetime) -> str:
    """Render an instant for axis labels and tooltips (UTC, 24-hour)."""
    return _as_utc(dt).strftime(DISPLAY_TIME_FORMAT)
