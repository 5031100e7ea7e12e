"""Festival Pulse domain models -- re-exports all public model classes.

The models are organized by concern:
    - ra_event.py -- Listings as returned by RA's GraphQL API
    - catalog.py  -- Venue, artist, festival and lineup rows in the store
    - sync.py     -- Sync phases, per-listing outcomes, scrape logs
    - curated.py  -- Hand-curated catalogs for the supplementary ingestion path
"""

from __future__ import annotations

from festival_pulse.models.catalog import (
    Artist,
    Festival,
    FestivalStatus,
    LineupEntry,
    Venue,
)
from festival_pulse.models.curated import (
    CuratedCatalog,
    CuratedEvent,
    CuratedIngestionResult,
    CuratedVenue,
)
from festival_pulse.models.ra_event import (
    RAArtist,
    RAEvent,
    RAEventPage,
    RAListing,
    RAVenue,
)
from festival_pulse.models.sync import (
    MAX_LOGGED_ERRORS,
    ListingOutcome,
    ReconcileTotals,
    RegionSyncResult,
    ScrapeLog,
    ScrapeStatus,
    SyncPhase,
    SyncSummary,
)

__all__ = [
    "MAX_LOGGED_ERRORS",
    "Artist",
    "CuratedCatalog",
    "CuratedEvent",
    "CuratedIngestionResult",
    "CuratedVenue",
    "Festival",
    "FestivalStatus",
    "LineupEntry",
    "ListingOutcome",
    "RAArtist",
    "RAEvent",
    "RAEventPage",
    "RAListing",
    "RAVenue",
    "ReconcileTotals",
    "RegionSyncResult",
    "ScrapeLog",
    "ScrapeStatus",
    "SyncPhase",
    "SyncSummary",
    "Venue",
]
