"""Catalog store implementations."""

from festival_pulse.providers.store.sqlite_festival_store import SQLiteFestivalStore

__all__ = ["SQLiteFestivalStore"]
