"""Pydantic v2 models for Resident Advisor (RA.co) event listings.

All models use frozen config (immutable).  They mirror the nested shape of
RA's ``eventListings`` GraphQL response closely enough that the entity
resolver can derive venue, festival, artist and lineup rows without going
back to the raw payload.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RAArtist(BaseModel):
    """An artist listed on an RA event."""

    model_config = ConfigDict(frozen=True)

    ra_id: str = Field(default="", description="RA's internal artist ID.")
    name: str = Field(description="Artist/DJ name as listed on RA.")


class RAVenue(BaseModel):
    """A venue from an RA event listing, including its area taxonomy."""

    model_config = ConfigDict(frozen=True)

    ra_id: str = Field(default="", description="RA's internal venue ID.")
    name: str = Field(description="Venue name.")
    address: str | None = Field(default=None, description="Street address.")
    area_name: str | None = Field(
        default=None, description="Area/city name from RA's taxonomy."
    )
    country_name: str | None = Field(
        default=None, description="Country name from RA's area taxonomy."
    )


class RAEvent(BaseModel):
    """A single event as returned inside an RA listing."""

    model_config = ConfigDict(frozen=True)

    ra_id: str = Field(description="RA's internal event ID.")
    title: str = Field(description="Event title/name.")
    date_str: str | None = Field(
        default=None, description="Event date as an ISO-8601 timestamp string."
    )
    start_time: str | None = Field(
        default=None, description="Start as an ISO-8601 timestamp string."
    )
    end_time: str | None = Field(
        default=None, description="End as an ISO-8601 timestamp string."
    )
    content_url: str | None = Field(
        default=None,
        description="Relative URL path on ra.co (e.g. '/events/123456').",
    )
    image_filename: str | None = Field(
        default=None, description="Filename of the first flyer image, if any."
    )
    attending: int = Field(
        default=0, description="Number of guests marked as attending on RA."
    )
    venue: RAVenue | None = Field(default=None, description="Venue details.")
    artists: list[RAArtist] = Field(
        default_factory=list, description="Artists on the lineup, in listing order."
    )

    @property
    def event_date(self) -> date | None:
        """The calendar date of :attr:`date_str`, or ``None`` when unparseable."""
        return parse_iso_date(self.date_str)

    @classmethod
    def from_graphql(cls, event_data: dict[str, Any]) -> RAEvent:
        """Parse the ``event`` object of one ``eventListings`` element.

        Raises
        ------
        ValueError
            If the event carries no identifier.
        """
        ra_id = str(event_data.get("id") or "")
        if not ra_id:
            raise ValueError("RA event has no id")

        # Nested objects that are not dicts (e.g. "venue": "TBA") count as absent.
        venue_raw = _as_dict(event_data.get("venue"))
        venue: RAVenue | None = None
        if venue_raw.get("name"):
            area = _as_dict(venue_raw.get("area"))
            country = _as_dict(area.get("country"))
            venue = RAVenue(
                ra_id=str(venue_raw.get("id") or ""),
                name=venue_raw["name"],
                address=venue_raw.get("address") or None,
                area_name=area.get("name") or None,
                country_name=country.get("name") or None,
            )

        artists_raw = event_data.get("artists")
        artists = [
            RAArtist(ra_id=str(a.get("id") or ""), name=a["name"])
            for a in (artists_raw if isinstance(artists_raw, list) else [])
            if isinstance(a, dict) and a.get("name")
        ]

        images = event_data.get("images") or []
        image_filename = None
        if images and isinstance(images[0], dict):
            image_filename = images[0].get("filename") or None

        attending_raw = event_data.get("attending") or 0

        return cls(
            ra_id=ra_id,
            title=event_data.get("title") or "Untitled Event",
            date_str=event_data.get("date"),
            start_time=event_data.get("startTime"),
            end_time=event_data.get("endTime"),
            content_url=event_data.get("contentUrl"),
            image_filename=image_filename,
            attending=attending_raw if isinstance(attending_raw, int) else 0,
            venue=venue,
            artists=artists,
        )


class RAListing(BaseModel):
    """One element of ``data.eventListings.data[]``."""

    model_config = ConfigDict(frozen=True)

    ra_id: str = Field(default="", description="RA's listing ID.")
    listing_date: str | None = Field(default=None, description="ISO listing date.")
    event: RAEvent

    @classmethod
    def from_graphql(cls, item: dict[str, Any]) -> RAListing:
        """Parse a single listing element.

        Raises
        ------
        ValueError
            If the listing has no ``event`` object or the event has no id.
        """
        event_data = item.get("event")
        if not isinstance(event_data, dict):
            raise ValueError("RA listing has no event")
        return cls(
            ra_id=str(item.get("id") or ""),
            listing_date=item.get("listingDate"),
            event=RAEvent.from_graphql(event_data),
        )


class RAEventPage(BaseModel):
    """A single page of results from an RA GraphQL event listings query.

    ``raw_count`` is the number of items RA returned on the page, including
    any that failed to parse; pagination advances on it rather than on
    ``len(listings)``.
    """

    model_config = ConfigDict(frozen=True)

    listings: list[RAListing] = Field(default_factory=list)
    raw_count: int = Field(default=0)
    total_results: int = Field(default=0)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_iso_date(value: str | None) -> date | None:
    """Return the date portion of an RA ISO-8601 timestamp, or ``None``."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
