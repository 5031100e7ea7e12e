"""Sync run models: phases, per-listing outcomes, region results and run logs.

The orchestrator walks each region through :class:`SyncPhase` in order and
finishes by writing one :class:`ScrapeLog`.  Errors are collected as plain
strings rather than raised, so one bad listing or artist never stops the
rest of the region.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Upper bound on error messages persisted per scrape log.
MAX_LOGGED_ERRORS = 20


class SyncPhase(str, Enum):  # noqa: UP042
    """Phases of one region sync: START -> FETCH -> PROCESS_LISTINGS -> FINALIZE."""

    START = "START"
    FETCH = "FETCH"
    PROCESS_LISTINGS = "PROCESS_LISTINGS"
    FINALIZE = "FINALIZE"


class ScrapeStatus(str, Enum):  # noqa: UP042
    """Outcome stored on a scrape log row."""

    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"


class ListingOutcome(BaseModel):
    """What reconciling a single listing produced."""

    model_config = ConfigDict(frozen=True)

    festival_id: str
    venue_id: str | None = None
    artist_ids: list[str] = Field(default_factory=list)
    new_lineups: int = 0
    errors: list[str] = Field(default_factory=list)


class ReconcileTotals(BaseModel):
    """Aggregated counts for a batch of listings.

    ``festivals_found`` counts listings whose festival upsert succeeded and
    ``artists_found`` counts artist slots, whether the rows were new or reused.
    """

    model_config = ConfigDict(frozen=True)

    festivals_found: int = 0
    artists_found: int = 0
    new_lineups: int = 0
    errors: list[str] = Field(default_factory=list)


class ScrapeLog(BaseModel):
    """One append-only record per region sync."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    region: str | None = None
    status: ScrapeStatus
    festivals_found: int = 0
    artists_found: int = 0
    errors: list[str] = Field(default_factory=list, max_length=MAX_LOGGED_ERRORS)
    duration_ms: int = 0
    scraped_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=timezone.utc)  # noqa: UP017
    )


class RegionSyncResult(BaseModel):
    """Result of syncing one region, returned alongside the persisted log.

    ``errors`` holds every collected message; the log keeps only the first
    :data:`MAX_LOGGED_ERRORS`.
    """

    model_config = ConfigDict(frozen=True)

    region: str
    area_id: int
    festivals_found: int = 0
    artists_found: int = 0
    errors: list[str] = Field(default_factory=list)
    log: ScrapeLog


class SyncSummary(BaseModel):
    """Informational totals across every region in a run."""

    model_config = ConfigDict(frozen=True)

    regions: list[RegionSyncResult] = Field(default_factory=list)

    @property
    def total_festivals(self) -> int:
        return sum(r.festivals_found for r in self.regions)

    @property
    def total_artists(self) -> int:
        return sum(r.artists_found for r in self.regions)

    @property
    def total_errors(self) -> int:
        return sum(len(r.errors) for r in self.regions)
