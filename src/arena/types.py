"""Core type definitions for the arena chart engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Any, NewType

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# Type aliases for domain-specific identifiers
AccountId = NewType("AccountId", int)
AccountKey = NewType("AccountKey", str)


# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


def _finite_or_none(value: Any) -> float | None:
    """Coerce a loosely typed numeric value to a finite float.

    Booleans, unparseable strings and non-finite numbers yield None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


# ---------------------------------------------------------------------------
# Snapshot Types
# ---------------------------------------------------------------------------


class RawSnapshot(FrozenModel):
    """One equity observation as delivered by the arena backend.

    Field names accept the backend's wire names as well as camelCase
    variants. Unknown fields are ignored. Numeric fields are lenient: a bad
    ``total_assets`` becomes 0.0 and a bad ``timestamp`` is treated as
    missing, so only a missing or invalid ``account_id`` fails validation.

    :param timestamp: Epoch time in seconds or milliseconds.
    :param iso_time: ISO-8601 datetime string.
    :param date_label: Free-form date label.
    :param account_id: Identifier of the competing account.
    :param total_assets: Total account equity at this instant.
    :param display_name: Human-readable account name.
    :param cash: Cash component of the equity, if reported.
    :param positions_value: Position component of the equity, if reported.
    :param user_id: Owner of the account, if reported.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    timestamp: int | float | None = None
    iso_time: str | None = Field(
        default=None,
        validation_alias=AliasChoices("iso_time", "isoTime", "datetime_str"),
    )
    date_label: str | None = Field(
        default=None,
        validation_alias=AliasChoices("date_label", "dateLabel", "date"),
    )
    account_id: int = Field(validation_alias=AliasChoices("account_id", "accountId"))
    total_assets: float = Field(
        default=0.0,
        validation_alias=AliasChoices("total_assets", "totalAssets"),
    )
    display_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("display_name", "displayName", "username"),
    )
    cash: float | None = None
    positions_value: float | None = Field(
        default=None,
        validation_alias=AliasChoices("positions_value", "positionsValue"),
    )
    user_id: int | str | None = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId"),
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        number = _finite_or_none(value)
        if number is None:
            return None
        return int(number) if number.is_integer() else number

    @field_validator("iso_time", "date_label", "display_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("total_assets", mode="before")
    @classmethod
    def _coerce_total_assets(cls, value: Any) -> float:
        number = _finite_or_none(value)
        return 0.0 if number is None else number

    @field_validator("cash", "positions_value", mode="before")
    @classmethod
    def _coerce_optional_number(cls, value: Any) -> float | None:
        return _finite_or_none(value)

    def has_time(self) -> bool:
        """Return True if any of the three time encodings is present."""
        return (
            self.iso_time is not None
            or self.date_label is not None
            or self.timestamp is not None
        )


class NormalizedPoint(FrozenModel):
    """A snapshot reduced to the engine's canonical format.

    :param time_key: Canonical bucket key (iso_time > date_label > timestamp).
    :param display_time: Human-readable rendering of the resolved instant.
    :param account_id: Identifier of the account.
    :param value: Total assets; always a finite number.
    :param display_name: Account name, defaulted when missing.
    """

    time_key: str
    display_time: str
    account_id: AccountId
    value: float
    display_name: str


class AlignedPoint(FrozenModel):
    """A single time bucket holding every account observed at that instant.

    An account with no observation in the bucket has no entry in ``values``;
    absence is never represented as zero.

    :param time_key: Bucket key shared by all merged observations.
    :param display_time: Display label of the bucket.
    :param values: Equity per account key.
    """

    time_key: str
    display_time: str
    values: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Account Types
# ---------------------------------------------------------------------------


class AccountIdentity(FrozenModel):
    """Identity-table row for one account seen in a batch.

    :param account_id: Identifier of the account.
    :param account_key: Stable series key derived from the id.
    :param display_name: Account name from the latest record in the batch.
    :param peak_value: Highest value observed for the account in the batch.
    :param position: First-seen order of the account in the batch.
    """

    account_id: AccountId
    account_key: AccountKey
    display_name: str
    peak_value: float
    position: int


class AccountSeries(FrozenModel):
    """Leaderboard entry for one account.

    :param account_id: Identifier of the account.
    :param account_key: Stable series key derived from the id.
    :param display_name: Account name.
    :param color_index: Palette index, or None when the fallback color is used.
    :param color: Display color.
    :param latest_value: Most recent value in the window, or the batch peak.
    :param rank: 1-based leaderboard position.
    """

    account_id: AccountId
    account_key: AccountKey
    display_name: str
    color_index: int | None
    color: str
    latest_value: float
    rank: int


class Endpoint(FrozenModel):
    """Last data-bearing point of a series.

    :param index: Index of the point in the aligned sequence.
    :param value: Value of the series at that point.
    """

    index: int
    value: float


class ChartView(FrozenModel):
    """Everything a renderer needs after one refresh.

    :param points: Aligned chart data, oldest first.
    :param domain: Padded ``(min, max)`` y-axis range.
    :param rankings: Accounts ordered by latest value, best first.
    :param active_keys: Account keys currently shown.
    :param endpoints: Terminal point per account key.
    :param generated_at: When the view was built.
    """

    points: list[AlignedPoint] = Field(default_factory=list)
    domain: tuple[float, float]
    rankings: list[AccountSeries] = Field(default_factory=list)
    active_keys: frozenset[str] = Field(default_factory=frozenset)
    endpoints: dict[str, Endpoint] = Field(default_factory=dict)
    generated_at: datetime


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class ArenaConfig(FrozenModel):
    """Configuration for watching an arena asset curve.

    :param timeframe: Curve timeframe requested from the backend (e.g., "5m").
    :param trading_mode: Trading mode requested from the backend (e.g., "paper").
    :param source_type: Snapshot source type ("http", "json" or "csv").
    :param source_params: Source-specific parameters.
    :param refresh_interval: Seconds between refreshes.
    :param deduping_interval: Minimum seconds between two fetches.
    :param window_size: Trailing aligned points kept on the chart (None = all).
    :param palette: Series colors, or None for the default palette.
    :param fallback_color: Color used when no palette entry applies.
    :param log_level: Logging level.
    """

    timeframe: str = "5m"
    trading_mode: str = "paper"
    source_type: str = "http"
    source_params: dict[str, Any] = Field(default_factory=dict)
    refresh_interval: float = 60.0
    deduping_interval: float = 30.0
    window_size: int | None = None
    palette: list[str] | None = None
    fallback_color: str = "#7E8494"
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Type aliases
    "AccountId",
    "AccountKey",
    # Base models
    "FrozenModel",
    # Snapshots
    "RawSnapshot",
    "NormalizedPoint",
    "AlignedPoint",
    # Accounts
    "AccountIdentity",
    "AccountSeries",
    "Endpoint",
    "ChartView",
    # Configuration
    "ArenaConfig",
]
