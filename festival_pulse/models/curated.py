"""Models for hand-curated catalogs used by the supplementary ingestion path.

A curated catalog is a YAML file (see :func:`festival_pulse.config.loader.load_curated_catalog`)
listing venue corrections and events that do not come from the RA API and
so have no external identifier.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from festival_pulse.models.catalog import FestivalStatus


class CuratedVenue(BaseModel):
    """A venue as written in a curated catalog."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    city: str | None = None
    country: str | None = None
    address: str | None = None


class CuratedEvent(BaseModel):
    """A festival entry without an external identifier.

    ``enrich`` controls what happens when the dedup guard finds an existing
    festival: ``True`` updates it in place, ``False`` skips the entry.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    slug: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    website_url: str | None = None
    status: FestivalStatus = FestivalStatus.UPCOMING
    venue: CuratedVenue | None = None
    artists: list[str] = Field(default_factory=list)
    enrich: bool = False

    @model_validator(mode="after")
    def _check_dates(self) -> CuratedEvent:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(f"{self.name}: end_date is before start_date")
        return self


class CuratedCatalog(BaseModel):
    """Top-level document of a curated catalog file."""

    model_config = ConfigDict(frozen=True)

    venues: list[CuratedVenue] = Field(default_factory=list)
    events: list[CuratedEvent] = Field(default_factory=list)


class CuratedIngestionResult(BaseModel):
    """Counts and errors from applying a curated catalog."""

    model_config = ConfigDict(frozen=True)

    venues_updated: int = 0
    created: list[str] = Field(default_factory=list)
    enriched: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    artists_linked: int = 0
    errors: list[str] = Field(default_factory=list)
