"""Abstract base class for the festival catalog store.

The store handle is created once by the entry point and passed to the
reconciliation engine, the sync orchestrator and the curated ingestion
service at construction.  Nothing reaches it through module-level state.

Lookups return ``None`` when nothing matches; implementations raise
:class:`~festival_pulse.utils.errors.StoreError` only for real I/O failures.
The schema must enforce unique ``artists.slug``, unique ``festivals.slug``
and unique ``(festival_id, artist_id)`` on lineups.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from festival_pulse.models.catalog import Artist, Festival, LineupEntry, Venue
from festival_pulse.models.sync import ScrapeLog


# Concrete implementation: SQLiteFestivalStore (festival_pulse/providers/store/)
class IFestivalStore(ABC):
    """Contract for catalog and scrape-log persistence.

    All operations are async to support network-backed stores.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables, unique constraints and indices if they don't exist."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this store."""

    # -- Venues ---------------------------------------------------------

    @abstractmethod
    async def find_venue_by_name(self, name: str) -> Venue | None:
        """Return the venue whose name equals *name* exactly, or ``None``."""

    @abstractmethod
    async def insert_venue(self, venue: Venue) -> Venue:
        """Insert *venue* and return it with ``id`` and timestamps set."""

    @abstractmethod
    async def update_venue(self, venue_id: str, **fields: Any) -> Venue | None:
        """Overwrite the given columns on a venue.  Returns ``None`` if absent."""

    # -- Artists --------------------------------------------------------

    @abstractmethod
    async def find_artist_by_slug(self, slug: str) -> Artist | None:
        """Return the artist with *slug*, or ``None``."""

    @abstractmethod
    async def insert_artist(self, artist: Artist) -> Artist:
        """Insert *artist* and return it with ``id`` and timestamps set."""

    # -- Festivals ------------------------------------------------------

    @abstractmethod
    async def find_festival_by_slug(self, slug: str) -> Festival | None:
        """Return the festival with *slug*, or ``None``."""

    @abstractmethod
    async def insert_festival(self, festival: Festival) -> Festival:
        """Insert *festival* and return it with ``id`` and timestamps set."""

    @abstractmethod
    async def update_festival(self, festival_id: str, **fields: Any) -> Festival | None:
        """Overwrite the given columns on a festival.  Returns ``None`` if absent."""

    @abstractmethod
    async def list_festivals(self) -> list[Festival]:
        """Return every festival, oldest first."""

    # -- Lineups --------------------------------------------------------

    @abstractmethod
    async def link_artist(self, entry: LineupEntry) -> bool:
        """Insert a lineup row.

        Returns ``True`` when a row was written and ``False`` when the
        ``(festival_id, artist_id)`` pair already existed.
        """

    @abstractmethod
    async def get_lineup(self, festival_id: str) -> list[LineupEntry]:
        """Return the lineup rows of a festival."""

    # -- Scrape logs ----------------------------------------------------

    @abstractmethod
    async def insert_scrape_log(self, log: ScrapeLog) -> ScrapeLog:
        """Append a scrape log row and return it with ``id`` set."""

    @abstractmethod
    async def list_scrape_logs(self, limit: int = 20) -> list[ScrapeLog]:
        """Return the most recent scrape logs, newest first."""

    # -- Stats ----------------------------------------------------------

    @abstractmethod
    async def count_rows(self) -> dict[str, int]:
        """Return row counts keyed by table name."""
