"""Live monitor that polls an asset-curve source and keeps the chart current."""

from __future__ import annotations

import signal
import time
from datetime import datetime
from typing import Any, Callable

from pydantic import BaseModel

from arena.chart.active_set import ActiveSetManager
from arena.chart.colors import ColorAssigner
from arena.chart.view import build_chart_view, with_active_keys
from arena.data.sources import SnapshotSource, resolve_snapshot_source
from arena.exceptions import DataSourceError
from arena.log import get_logger
from arena.types import ArenaConfig, ChartView

logger = get_logger(__name__)


class MonitorStatus(BaseModel):
    """Current status of the live monitor.

    :param timeframe: Curve timeframe being watched.
    :param trading_mode: Trading mode being watched.
    :param running: Whether the poll loop is currently running.
    :param ticks: Number of refresh attempts.
    :param fetches: Number of batches actually fetched.
    :param failures: Number of failed fetches.
    :param last_refresh: When the current view was built.
    :param accounts: Accounts in the current view.
    :param points: Aligned points in the current view.
    :param active_accounts: Accounts currently shown.
    """

    timeframe: str
    trading_mode: str
    running: bool = False
    ticks: int = 0
    fetches: int = 0
    failures: int = 0
    last_refresh: datetime | None = None
    accounts: int = 0
    points: int = 0
    active_accounts: int = 0


class ArenaMonitor:
    """Polls a snapshot source and rebuilds the chart view on each refresh.

    Example usage::

        from arena.live import ArenaMonitor
        from arena.types import ArenaConfig

        config = ArenaConfig(
            timeframe="5m",
            trading_mode="paper",
            source_type="http",
            source_params={"base_url": "http://localhost:8802"},
        )
        monitor = ArenaMonitor(config)

        # Run until interrupted
        monitor.run(on_view=lambda view: print(view.rankings[:3]))

    Fetches closer together than ``config.deduping_interval`` are served from
    the cached view. A failed fetch keeps the previous view.

    :param config: Arena configuration.
    :param source: Snapshot source (resolved from config if omitted).
    :param colors: Color assigner (built from the config palette if omitted).
    :param clock: Monotonic clock used for deduplication.
    :param sleep: Sleep function used between refreshes.
    """

    def __init__(
        self,
        config: ArenaConfig,
        source: SnapshotSource | None = None,
        colors: ColorAssigner | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.source = source or resolve_snapshot_source(config)
        self.colors = colors or ColorAssigner(config.palette, config.fallback_color)
        self.active = ActiveSetManager()
        self._clock = clock
        self._sleep = sleep

        self._view: ChartView | None = None
        self._last_fetch: float | None = None
        self._running = False
        self._ticks = 0
        self._fetches = 0
        self._failures = 0

    @property
    def view(self) -> ChartView:
        """Current chart view; an empty view before the first fetch."""
        if self._view is None:
            return build_chart_view([], self.active.keys, colors=self.colors)
        return self._view

    def status(self) -> MonitorStatus:
        """Get current monitor status.

        :returns: Current status information.
        """
        return MonitorStatus(
            timeframe=self.config.timeframe,
            trading_mode=self.config.trading_mode,
            running=self._running,
            ticks=self._ticks,
            fetches=self._fetches,
            failures=self._failures,
            last_refresh=self._view.generated_at if self._view else None,
            accounts=len(self._view.rankings) if self._view else 0,
            points=len(self._view.points) if self._view else 0,
            active_accounts=len(self.active.keys),
        )

    def refresh(self, force: bool = False) -> ChartView:
        """Fetch a new batch and rebuild the view.

        :param force: Fetch even inside the deduplication interval.
        :returns: The current chart view.
        """
        self._ticks += 1
        now = self._clock()

        if (
            not force
            and self._view is not None
            and self._last_fetch is not None
            and now - self._last_fetch < self.config.deduping_interval
        ):
            logger.debug("Skipping fetch, last one was %.1fs ago", now - self._last_fetch)
            return self._view

        try:
            batch = self.source.fetch_snapshots(self.config.timeframe, self.config.trading_mode)
        except DataSourceError as e:
            self._failures += 1
            logger.warning("Refresh failed, keeping previous view: %s", e)
            return self.view

        self._last_fetch = now
        self._fetches += 1

        view = build_chart_view(
            batch,
            self.active.keys,
            window_size=self.config.window_size,
            colors=self.colors,
        )
        self.active.reconcile(series.account_key for series in view.rankings)
        self._view = view

        logger.info(
            "Refreshed %s/%s: %d snapshot(s), %d point(s), %d account(s)",
            self.config.timeframe,
            self.config.trading_mode,
            len(batch),
            len(view.points),
            len(view.rankings),
        )
        return view

    def toggle(self, key: str) -> frozenset[str]:
        """Show or hide one series without refetching.

        :param key: Account key to toggle.
        :returns: The updated active set.
        """
        keys = self.active.toggle(key)
        if self._view is not None:
            self._view = with_active_keys(self._view, keys)
        return keys

    def run(
        self,
        max_ticks: int | None = None,
        on_view: Callable[[ChartView], None] | None = None,
    ) -> None:
        """Run the poll loop.

        Runs continuously until interrupted (Ctrl+C) or max_ticks reached.

        :param max_ticks: Optional maximum number of refreshes.
        :param on_view: Callback invoked with the view after each refresh.
        """
        self._running = True

        # Set up signal handler for graceful shutdown
        def signal_handler(signum: int, frame: Any) -> None:
            logger.info("Stopping arena monitor...")
            self._running = False

        original_handler = signal.signal(signal.SIGINT, signal_handler)

        try:
            logger.info(
                "Watching %s/%s every %.0fs",
                self.config.timeframe,
                self.config.trading_mode,
                self.config.refresh_interval,
            )

            while self._running:
                if max_ticks and self._ticks >= max_ticks:
                    break

                try:
                    view = self.refresh()
                    if on_view is not None:
                        on_view(view)
                except Exception:
                    logger.exception("Refresh error")

                if self._running and not (max_ticks and self._ticks >= max_ticks):
                    self._sleep(self.config.refresh_interval)

        finally:
            signal.signal(signal.SIGINT, original_handler)
            self._running = False
            logger.info("Arena monitor stopped after %d refresh(es)", self._ticks)
