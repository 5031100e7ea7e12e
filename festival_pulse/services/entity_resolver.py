"""Identity keys and insert payloads derived from RA listings.

Everything here is pure and deterministic: the same listing always yields
the same keys and the same row payloads.  Keys:

    venue     -> the raw venue name (exact, case-sensitive match)
    artist    -> slugify(name)
    festival  -> slugify(title) + "-" + RA event id

The festival key carries the RA id so two different events that share a
title ("Sunset Session") never collapse into one row.
"""

from __future__ import annotations

from festival_pulse.models.catalog import Artist, Festival, FestivalStatus, LineupEntry, Venue
from festival_pulse.models.ra_event import RAArtist, RAEvent
from festival_pulse.utils.errors import EntityResolutionError
from festival_pulse.utils.text_normalizer import slugify

RA_BASE_URL = "https://ra.co"
RA_FLYER_URL_TEMPLATE = "https://ra.co/images/events/flyer/{filename}"
RA_ARTIST_URL_TEMPLATE = "https://ra.co/dj/{slug}"


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def venue_key(event: RAEvent) -> str | None:
    """Return the venue lookup key, or ``None`` when the event has no venue."""
    if event.venue is None or not event.venue.name:
        return None
    return event.venue.name


def artist_key(name: str) -> str:
    """Return the artist slug.

    Raises
    ------
    EntityResolutionError
        If *name* has no ASCII letters or digits to build a slug from.
    """
    slug = slugify(name)
    if not slug:
        raise EntityResolutionError(f"Artist name '{name}' produces an empty slug")
    return slug


def festival_key(title: str, external_id: str) -> str:
    """Return ``slugify(title) + "-" + external_id``, dropping empty parts."""
    return "-".join(part for part in (slugify(title), external_id.strip()) if part)


# ---------------------------------------------------------------------------
# Derived fields
# ---------------------------------------------------------------------------


def clock_time(timestamp: str | None) -> str | None:
    """Cut ``HH:MM`` out of an ISO timestamp such as ``2026-02-23T22:00:00.000``."""
    if not timestamp or "T" not in timestamp:
        return None
    clock = timestamp.split("T", 1)[1][:5]
    return clock if len(clock) == 5 and clock[2] == ":" else None


def flyer_url(event: RAEvent) -> str | None:
    if not event.image_filename:
        return None
    return RA_FLYER_URL_TEMPLATE.format(filename=event.image_filename)


def event_url(event: RAEvent) -> str | None:
    if not event.content_url:
        return None
    return f"{RA_BASE_URL}{event.content_url}"


# ---------------------------------------------------------------------------
# Insert payloads
# ---------------------------------------------------------------------------


def build_venue(event: RAEvent) -> Venue | None:
    """Venue insert payload, or ``None`` for "TBA" events."""
    if venue_key(event) is None:
        return None
    venue = event.venue
    return Venue(
        name=venue.name,
        city=venue.area_name,
        country=venue.country_name,
        address=venue.address,
    )


def build_artist(artist: RAArtist) -> Artist:
    slug = artist_key(artist.name)
    return Artist(
        name=artist.name,
        slug=slug,
        ra_url=RA_ARTIST_URL_TEMPLATE.format(slug=slug),
    )


def build_festival(event: RAEvent, venue_id: str | None) -> Festival:
    """Festival insert payload.  A single-day RA event starts and ends on its date."""
    event_date = event.event_date
    return Festival(
        name=event.title,
        slug=festival_key(event.title, event.ra_id),
        start_date=event_date,
        end_date=event_date,
        venue_id=venue_id,
        website_url=event_url(event),
        image_url=flyer_url(event),
        status=FestivalStatus.UPCOMING,
        metadata={"ra_id": event.ra_id, "attending": event.attending},
    )


def build_lineup(festival_id: str, artist_id: str, event: RAEvent) -> LineupEntry:
    return LineupEntry(
        festival_id=festival_id,
        artist_id=artist_id,
        performance_date=event.event_date,
        start_time=clock_time(event.start_time),
        end_time=clock_time(event.end_time),
    )
