#!/usr/bin/env python3
"""Command-line interface for the arena asset curve."""

from __future__ import annotations

import argparse
import sys

from arena.types import ChartView


def format_leaderboard(view: ChartView) -> str:
    """Render a chart view as a plain-text leaderboard table.

    :param view: Chart view to render.
    :returns: Formatted table, one row per account.
    """
    lines = [
        "=" * 72,
        f"{'#':>3} {'Account':<28} {'Key':<16} {'Assets':>14} {'Shown':>6}",
        "-" * 72,
    ]

    for series in view.rankings:
        shown = "yes" if series.account_key in view.active_keys else "no"
        lines.append(
            f"{series.rank:>3} {series.display_name[:28]:<28} {series.account_key:<16} "
            f"{series.latest_value:>14,.2f} {shown:>6}"
        )

    if not view.rankings:
        lines.append("   No chart data available")

    lines.append("=" * 72)
    low, high = view.domain
    lines.append(f"Domain: {low:,.2f} .. {high:,.2f}   Points: {len(view.points)}")
    return "\n".join(lines)


def format_endpoints(view: ChartView) -> str:
    """Render the terminal point of every shown series."""
    from arena.chart import endpoint_label

    lines = []
    for series in view.rankings:
        endpoint = view.endpoints.get(series.account_key)
        if endpoint is None or series.account_key not in view.active_keys:
            continue
        point = view.points[endpoint.index]
        lines.append(
            f"   [{endpoint_label(series.display_name):>3}] {series.display_name:<28} "
            f"{point.display_time:>12}  ${endpoint.value:,.2f}"
        )
    return "\n".join(lines)


def cmd_render(args: argparse.Namespace) -> int:
    """Build a chart view from a saved snapshot file and print it."""
    from arena.chart import ActiveSetManager, build_chart_view, with_active_keys
    from arena.data import source_for_file
    from arena.exceptions import DataSourceError

    try:
        batch = source_for_file(args.file).fetch_snapshots("", "")
    except DataSourceError as e:
        print(f"Data source error: {e}")
        return 1

    view = build_chart_view(batch, window_size=args.window)

    if args.hide:
        manager = ActiveSetManager(view.active_keys)
        for key in args.hide:
            if manager.is_active(key):
                manager.toggle(key)
        view = with_active_keys(view, manager.keys)

    if args.json:
        print(view.model_dump_json(indent=2))
        return 0

    print(f"Snapshots: {len(batch)} from {args.file}")
    print(format_leaderboard(view))
    endpoints = format_endpoints(view)
    if endpoints:
        print("\n📍 Endpoints:")
        print(endpoints)
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    """Poll the configured source and print the leaderboard on each refresh."""
    from arena.commands.watch import load_arena_config
    from arena.exceptions import ConfigError, DataSourceError
    from arena.live import ArenaMonitor
    from arena.log import setup_logging

    try:
        config = load_arena_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1

    setup_logging(config.log_level)

    print("=" * 60)
    print("ARENA WATCH")
    print("=" * 60)
    print(f"Timeframe:    {config.timeframe}")
    print(f"Trading mode: {config.trading_mode}")
    print(f"Source:       {config.source_type}")
    print(f"Refresh:      every {config.refresh_interval:.0f}s")
    print("   Press Ctrl+C to stop\n")

    try:
        monitor = ArenaMonitor(config)
    except DataSourceError as e:
        print(f"Data source error: {e}")
        return 1

    monitor.run(max_ticks=args.max_ticks, on_view=lambda view: print(format_leaderboard(view)))

    status = monitor.status()
    print(f"\n✅ Stopped after {status.ticks} refresh(es), {status.failures} failure(s)")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Arena asset curve CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser(
        "render", help="Render the leaderboard for a saved snapshot batch"
    )
    render_parser.add_argument("file", help="Path to a JSON or CSV snapshot file")
    render_parser.add_argument(
        "-w", "--window", type=int, default=None, help="Keep only the last N points"
    )
    render_parser.add_argument(
        "--hide", nargs="*", default=[], metavar="KEY", help="Account keys to hide"
    )
    render_parser.add_argument(
        "--json", action="store_true", help="Print the chart view as JSON"
    )

    # Watch command
    watch_parser = subparsers.add_parser(
        "watch", help="Poll the arena backend and print the leaderboard"
    )
    watch_parser.add_argument("config", help="Path to YAML configuration file")
    watch_parser.add_argument(
        "--max-ticks", type=int, default=None, help="Stop after N refreshes"
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "render":
        return cmd_render(args)
    elif args.command == "watch":
        return cmd_watch(args)

    return 0


if __name__ == "__main__":
    sys.exit(main())
