"""Configuration: environment-driven ``Settings`` and the curated catalog loader."""

from festival_pulse.config.loader import load_curated_catalog
from festival_pulse.config.settings import Settings

__all__ = ["Settings", "load_curated_catalog"]
