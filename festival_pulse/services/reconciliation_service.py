"""Reconciles RA listings against the festival catalog store.

For each listing the engine upserts, in this fixed order:

    venue     (festival rows reference it)
    festival
    artists   (each one linked to the festival through a lineup row)

Every upsert is "look up by key, insert only when absent"; existing rows are
returned unchanged.  Re-running the same listings therefore writes nothing
new, and the store's unique constraints turn a repeated lineup link into a
no-op.

Failures are isolated at two levels.  A failing artist is recorded as
``"Artist <name>: <error>"`` and the remaining artists still run; a failing
listing is recorded as ``"Event <title>: <error>"`` and the remaining
listings still run.  Nothing here raises past :meth:`reconcile_listings`.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.models.ra_event import RAArtist, RAEvent, RAListing
from festival_pulse.models.sync import ListingOutcome, ReconcileTotals
from festival_pulse.services import entity_resolver
from festival_pulse.utils.logging import get_logger


class ReconciliationEngine:
    """Upserts venues, festivals and artists and links lineups.

    Parameters
    ----------
    store:
        The catalog store handle.  The engine is its only writer of
        catalog rows during a sync.
    """

    def __init__(self, store: IFestivalStore) -> None:
        self._store = store
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Per-entity upserts
    # ------------------------------------------------------------------

    async def upsert_venue(self, event: RAEvent) -> str | None:
        """Return the venue id for *event*, inserting the venue if new.

        Returns ``None`` when the listing has no venue.
        """
        payload = entity_resolver.build_venue(event)
        if payload is None:
            return None

        existing = await self._store.find_venue_by_name(payload.name)
        if existing is not None:
            return existing.id

        venue = await self._store.insert_venue(payload)
        self._logger.info("venue_created", venue_id=venue.id, name=venue.name, city=venue.city)
        return venue.id

    async def upsert_artist(self, artist: RAArtist) -> str:
        """Return the artist id for *artist*, inserting the artist if new."""
        payload = entity_resolver.build_artist(artist)

        existing = await self._store.find_artist_by_slug(payload.slug)
        if existing is not None:
            return existing.id

        created = await self._store.insert_artist(payload)
        self._logger.info("artist_created", artist_id=created.id, slug=created.slug)
        return created.id

    async def upsert_festival(self, event: RAEvent, venue_id: str | None) -> str:
        """Return the festival id for *event*, inserting the festival if new."""
        payload = entity_resolver.build_festival(event, venue_id)

        existing = await self._store.find_festival_by_slug(payload.slug)
        if existing is not None:
            return existing.id

        festival = await self._store.insert_festival(payload)
        self._logger.info(
            "festival_created",
            festival_id=festival.id,
            slug=festival.slug,
            venue_id=venue_id,
        )
        return festival.id

    async def link_artist(self, festival_id: str, artist_id: str, event: RAEvent) -> bool:
        """Add the artist to the festival lineup.

        Returns ``False`` when the pair was already linked.
        """
        entry = entity_resolver.build_lineup(festival_id, artist_id, event)
        return await self._store.link_artist(entry)

    # ------------------------------------------------------------------
    # Listing-level reconciliation
    # ------------------------------------------------------------------

    async def reconcile_listing(self, listing: RAListing) -> ListingOutcome:
        """Reconcile one listing.

        Venue or festival failures propagate to the caller; artist failures
        are collected on the returned outcome.
        """
        event = listing.event
        venue_id = await self.upsert_venue(event)
        festival_id = await self.upsert_festival(event, venue_id)

        artist_ids: list[str] = []
        errors: list[str] = []
        new_lineups = 0

        for artist in event.artists:
            try:
                artist_id = await self.upsert_artist(artist)
                artist_ids.append(artist_id)
                if await self.link_artist(festival_id, artist_id, event):
                    new_lineups += 1
            except Exception as exc:
                self._logger.warning(
                    "artist_reconcile_failed",
                    artist=artist.name,
                    festival_id=festival_id,
                    error=str(exc),
                )
                errors.append(f"Artist {artist.name}: {exc}")

        return ListingOutcome(
            festival_id=festival_id,
            venue_id=venue_id,
            artist_ids=artist_ids,
            new_lineups=new_lineups,
            errors=errors,
        )

    async def reconcile_listings(self, listings: Iterable[RAListing]) -> ReconcileTotals:
        """Reconcile listings one after another, never aborting on a failure."""
        festivals_found = 0
        artists_found = 0
        new_lineups = 0
        errors: list[str] = []

        for listing in listings:
            try:
                outcome = await self.reconcile_listing(listing)
            except Exception as exc:
                self._logger.warning(
                    "listing_reconcile_failed",
                    ra_id=listing.event.ra_id,
                    title=listing.event.title,
                    error=str(exc),
                )
                errors.append(f"Event {listing.event.title}: {exc}")
                continue

            festivals_found += 1
            artists_found += len(outcome.artist_ids)
            new_lineups += outcome.new_lineups
            errors.extend(outcome.errors)

        return ReconcileTotals(
            festivals_found=festivals_found,
            artists_found=artists_found,
            new_lineups=new_lineups,
            errors=errors,
        )
