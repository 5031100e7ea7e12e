# =============================================================================
# festival_pulse/cli/__init__.py: CLI Module Overview
# =============================================================================
#
# Command-line entry points for Festival Pulse. Each submodule is a
# self-contained tool that can be run via `python -m festival_pulse.cli.<module>`.
#
#   1. SYNC (sync.py)
#      Pulls RA.co event listings for the configured regions and date window,
#      reconciles them into the catalog store and writes one scrape log per
#      region. Also lists known regions and shows recent run status.
#
#   2. CURATED ENRICHMENT (enrich.py)
#      Applies a hand-maintained YAML catalog: venue corrections plus
#      festivals that RA does not list, guarded by the name dedup check.
#
# Architecture Notes:
#   - argparse only; no Click/Typer.
#   - Service imports are deferred inside handlers so `regions` and `--help`
#     stay fast.
#   - Dependencies are wired through festival_pulse.main; the store handle is
#     created once per invocation and passed down.
# =============================================================================

"""CLI tools for Festival Pulse.

- ``python -m festival_pulse.cli.sync``: sync RA listings into the catalog.
- ``python -m festival_pulse.cli.enrich``: apply a curated YAML catalog.
"""
