"""Catalog models: the venue, artist, festival and lineup rows in the store.

Every model is frozen.  A model with ``id=None`` is an insert payload built
by the entity resolver; the store returns the same model with ``id`` and the
timestamps filled in.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FestivalStatus(str, Enum):  # noqa: UP042
    """Lifecycle status of a festival.  Transitions are managed outside the core."""

    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    PAST = "past"
    CANCELLED = "cancelled"


class Venue(BaseModel):
    """A venue.  Identity is the exact, case-sensitive name."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    city: str | None = None
    country: str | None = None
    address: str | None = None
    latitude: str | None = None
    longitude: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Artist(BaseModel):
    """An artist.  Identity is :attr:`slug`."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    slug: str
    bio: str | None = None
    genres: list[str] = Field(default_factory=list)
    image_url: str | None = None
    ra_url: str | None = None
    youtube_url: str | None = None
    soundcloud_url: str | None = None
    instagram_url: str | None = None
    spotify_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class Festival(BaseModel):
    """A festival or event.  Identity is :attr:`slug`.

    For API-sourced rows the slug is the title slug suffixed with the RA
    event id, and ``metadata`` carries ``ra_id`` and ``attending``.
    """

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    name: str
    slug: str
    description: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    venue_id: str | None = None
    website_url: str | None = None
    ticket_url: str | None = None
    image_url: str | None = None
    status: FestivalStatus = FestivalStatus.UPCOMING
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class LineupEntry(BaseModel):
    """An artist's slot on a festival.  ``(festival_id, artist_id)`` is unique."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    festival_id: str
    artist_id: str
    stage: str | None = None
    performance_date: date | None = None
    start_time: str | None = Field(default=None, description="'HH:MM'")
    end_time: str | None = Field(default=None, description="'HH:MM'")
    is_headliner: bool = False
    announced_at: datetime | None = None
    created_at: datetime | None = None
