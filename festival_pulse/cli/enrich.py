"""CLI for applying a curated YAML catalog to the festival store.

Usage::

    python -m festival_pulse.cli.enrich config/curated_example.yaml

    # Use rapidfuzz token similarity instead of prefix containment
    python -m festival_pulse.cli.enrich catalog.yaml --policy token --threshold 0.85

See :mod:`festival_pulse.config.loader` for the catalog format.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from festival_pulse.config.settings import Settings
from festival_pulse.utils.errors import ConfigurationError
from festival_pulse.utils.logging import configure_logging, wants_json


async def _handle_enrich(args: argparse.Namespace, settings: Settings) -> int:
    """Load, validate and apply one curated catalog."""
    from festival_pulse.config.loader import load_curated_catalog
    from festival_pulse.main import build_curated_service, build_store

    try:
        catalog = load_curated_catalog(args.catalog)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"Catalog: {len(catalog.venues)} venue(s), {len(catalog.events)} event(s)")

    store = await build_store(settings, args.db)
    try:
        service = build_curated_service(settings, store)
    except (ConfigurationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    result = await service.apply(catalog)

    print(f"  Venues corrected: {result.venues_updated}")
    print(f"  Created:          {len(result.created)}")
    for name in result.created:
        print(f"    + {name}")
    print(f"  Enriched:         {len(result.enriched)}")
    for name in result.enriched:
        print(f"    ~ {name}")
    print(f"  Skipped:          {len(result.skipped)}")
    for name in result.skipped:
        print(f"    = {name}")
    print(f"  Artists linked:   {result.artists_linked}")
    if result.errors:
        print(f"  Errors:           {len(result.errors)}")
        for error in result.errors:
            print(f"    ! {error}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m festival_pulse.cli.enrich",
        description="Apply a curated festival catalog (venue fixes and non-RA events).",
    )
    parser.add_argument("catalog", help="Path to the curated YAML catalog")
    parser.add_argument("--db", default=None, help="SQLite path (default: DB_PATH setting)")
    parser.add_argument(
        "--policy",
        choices=["prefix", "token"],
        default=None,
        help="Name similarity policy (default: DEDUP_POLICY)",
    )
    parser.add_argument(
        "--prefix-length",
        type=int,
        default=None,
        help="Characters compared by the prefix policy (default: DEDUP_PREFIX_LENGTH)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=None,
        help="Token policy threshold, 0-1 (default: DEDUP_SIMILARITY_THRESHOLD)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for curated enrichment.  Returns the process exit code."""
    args = _build_parser().parse_args(argv)

    overrides = {
        key: value
        for key, value in (
            ("dedup_policy", args.policy),
            ("dedup_prefix_length", args.prefix_length),
            ("dedup_similarity_threshold", args.threshold),
        )
        if value is not None
    }
    settings = Settings(**overrides)
    configure_logging(
        args.log_level or settings.log_level,
        json_output=wants_json(settings.app_env, force=args.json_logs),
    )

    return asyncio.run(_handle_enrich(args, settings))


if __name__ == "__main__":
    sys.exit(main())
