"""CLI for syncing RA.co festival listings into the catalog store.

Usage::

    # Sync the configured regions (SYNC_REGIONS, default Costa Rica)
    python -m festival_pulse.cli.sync

    # Sync specific regions over the next six months
    python -m festival_pulse.cli.sync run --region costa_rica --region berlin --months 6

    # Explicit window
    python -m festival_pulse.cli.sync run --region 26 --from 2026-01-01 --to 2026-03-31

    # List the region labels the CLI understands
    python -m festival_pulse.cli.sync regions

    # Show recent scrape logs and catalog row counts
    python -m festival_pulse.cli.sync status --limit 10

A run exits 0 even when some regions finish ``partial``; the per-region
errors are in the scrape log.  Configuration errors (unknown region, bad
dates) exit 1 before anything is fetched.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date

from festival_pulse.config.settings import Settings
from festival_pulse.providers.event.ra_graphql_provider import (
    RA_AREA_IDS,
    REGION_DISPLAY_NAMES,
)
from festival_pulse.utils.errors import ConfigurationError
from festival_pulse.utils.logging import configure_logging, wants_json

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _resolve_window(args: argparse.Namespace, settings: Settings) -> tuple[str, str]:
    """Return the ``(date_from, date_lte)`` window from flags or settings."""
    from festival_pulse.services.sync_service import add_months, default_window

    months = args.months or settings.sync_window_months
    if not args.date_from and not args.date_to:
        return default_window(months=months)
    try:
        start = date.fromisoformat(args.date_from) if args.date_from else date.today()
        end = date.fromisoformat(args.date_to) if args.date_to else add_months(start, months)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid date: {exc}") from exc
    if end < start:
        raise ConfigurationError(f"--to {end} is before --from {start}")
    return start.isoformat(), end.isoformat()


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_run(args: argparse.Namespace, settings: Settings) -> int:
    """Sync every requested region and print a per-region summary."""
    import httpx

    from festival_pulse.main import build_store, build_sync_orchestrator, resolve_regions

    try:
        regions = resolve_regions(args.region or settings.sync_regions)
        date_from, date_lte = _resolve_window(args, settings)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Syncing {len(regions)} region(s), {date_from} to {date_lte}")
    print()

    store = await build_store(settings, args.db)
    async with httpx.AsyncClient() as client:
        orchestrator = build_sync_orchestrator(settings, client, store)
        summary = await orchestrator.run(regions, date_from, date_lte)

    print(f"{'Region':<20} {'Area ID':>8} {'Status':<9} {'Festivals':>10} {'Artists':>8} {'Errors':>7}")
    print("-" * 67)
    for result in summary.regions:
        print(
            f"{result.region:<20} {result.area_id:>8} {result.log.status.value:<9} "
            f"{result.festivals_found:>10} {result.artists_found:>8} {len(result.errors):>7}"
        )
    print("-" * 67)
    print(
        f"{'TOTAL':<20} {'':>8} {'':<9} "
        f"{summary.total_festivals:>10} {summary.total_artists:>8} {summary.total_errors:>7}"
    )
    return 0


async def _handle_regions(args: argparse.Namespace, settings: Settings) -> int:
    """Print the known region labels and their RA area codes."""
    configured = set(settings.sync_regions)
    print(f"{'Region':<16} {'Display name':<20} {'Area ID':>8}")
    print("-" * 46)
    for key, area_id in sorted(RA_AREA_IDS.items()):
        marker = " *" if key in configured else ""
        print(f"{key:<16} {REGION_DISPLAY_NAMES.get(key, key):<20} {area_id:>8}{marker}")
    print()
    print("* configured in SYNC_REGIONS")
    return 0


async def _handle_status(args: argparse.Namespace, settings: Settings) -> int:
    """Show row counts and the most recent scrape logs."""
    from festival_pulse.main import build_store

    store = await build_store(settings, args.db)
    counts = await store.count_rows()
    logs = await store.list_scrape_logs(limit=args.limit)

    print("Catalog")
    print("=" * 40)
    for table, count in counts.items():
        print(f"  {table:<20} {count:>10,}")
    print()

    print("Recent runs")
    print("=" * 72)
    if not logs:
        print("  (no runs recorded)")
        return 0
    print(f"{'Scraped at':<22} {'Region':<16} {'Status':<9} {'Fest':>5} {'Art':>5} {'Err':>4} {'ms':>7}")
    print("-" * 72)
    for log in logs:
        region = log.region or "-"
        print(
            f"{log.scraped_at.strftime('%Y-%m-%d %H:%M:%S'):<22} {region:<16} "
            f"{log.status.value:<9} {log.festivals_found:>5} {log.artists_found:>5} "
            f"{len(log.errors):>4} {log.duration_ms:>7}"
        )
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _add_run_arguments(parser: argparse.ArgumentParser, default: object = None) -> None:
    """Register the ``run`` flags.

    They are accepted both before and after the ``run`` subcommand.  The
    subparser copy uses ``argparse.SUPPRESS`` so its unset flags do not
    overwrite values already parsed at the top level.
    """
    parser.add_argument(
        "--region",
        action="append",
        default=default,
        help="Region label or RA area code; repeatable (default: SYNC_REGIONS)",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=default,
        help="Window length in months from --from (default: SYNC_WINDOW_MONTHS)",
    )
    parser.add_argument(
        "--from",
        dest="date_from",
        default=default,
        help="Window start, YYYY-MM-DD (default: today)",
    )
    parser.add_argument(
        "--to",
        dest="date_to",
        default=default,
        help="Window end, YYYY-MM-DD, inclusive",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the sync CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m festival_pulse.cli.sync",
        description="Sync RA.co festival listings into the Festival Pulse catalog.",
    )
    parser.add_argument("--db", default=None, help="SQLite path (default: DB_PATH setting)")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    _add_run_arguments(parser)

    subparsers = parser.add_subparsers(dest="command", help="Sync commands")

    # -- run --
    run_parser = subparsers.add_parser("run", help="Sync listings (default command)")
    _add_run_arguments(run_parser, default=argparse.SUPPRESS)

    # -- regions --
    subparsers.add_parser("regions", help="List known regions and area codes")

    # -- status --
    status_parser = subparsers.add_parser("status", help="Show recent runs and row counts")
    status_parser.add_argument("--limit", type=int, default=20, help="Logs to show (default: 20)")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for the sync tool.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(
        args.log_level or settings.log_level,
        json_output=wants_json(settings.app_env, force=args.json_logs),
    )

    command = args.command or "run"
    if command == "run":
        return asyncio.run(_handle_run(args, settings))
    if command == "regions":
        return asyncio.run(_handle_regions(args, settings))
    if command == "status":
        return asyncio.run(_handle_status(args, settings))

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
