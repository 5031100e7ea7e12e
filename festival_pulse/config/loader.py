"""YAML loader for curated catalogs.

A curated catalog looks like::

    venues:
      - name: Rancho La Merced
        city: Uvita, Puntarenas
        country: Costa Rica
    events:
      - name: Envision Festival
        enrich: true
        start_date: 2026-02-23
        end_date: 2026-03-02
        website_url: https://www.envisionfestival.com/
        venue: {name: Rancho La Merced}
        artists: [Bob Moses, CloZee]
      - name: Tardeo Sunset Party
        slug: tardeo-sunset-party-2026
        start_date: 2026-02-15
        venue: {name: San Ramon, city: San Ramon, country: Costa Rica}

The file is parsed with ``yaml.safe_load`` and validated into a
:class:`~festival_pulse.models.curated.CuratedCatalog`.
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from festival_pulse.models.curated import CuratedCatalog
from festival_pulse.utils.errors import ConfigurationError


def load_curated_catalog(path: str | Path) -> CuratedCatalog:
    """Load and validate a curated catalog file.

    Args:
        path: Path to the YAML catalog.

    Returns:
        The validated catalog.

    Raises:
        ConfigurationError: If the file is missing, not valid YAML, or does
            not match the catalog schema.
    """
    catalog_path = Path(path)
    if not catalog_path.exists():
        raise ConfigurationError(f"Curated catalog not found: {catalog_path}")

    try:
        with open(catalog_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {catalog_path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigurationError(f"{catalog_path} must contain a mapping at the top level")

    try:
        return CuratedCatalog.model_validate(raw)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid curated catalog {catalog_path}: {exc}") from exc
