"""Applies hand-curated catalogs: venue corrections and festivals without an RA id.

For every curated event the :class:`FuzzyDedupGuard` decides whether the
festival already exists:

    found, enrich=True   -> update dates, venue, website and status in place
    found, enrich=False  -> skip the entry
    not found            -> insert a new festival

Artists listed on created or enriched events are upserted by slug and linked
to the festival; repeat links are no-ops.  Each event is applied on its own,
so a failing entry is recorded and the rest of the catalog still runs.
"""

from __future__ import annotations

from typing import Any

import structlog

from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.models.catalog import Artist, Festival, LineupEntry, Venue
from festival_pulse.models.curated import (
    CuratedCatalog,
    CuratedEvent,
    CuratedIngestionResult,
    CuratedVenue,
)
from festival_pulse.services.dedup_guard import FuzzyDedupGuard
from festival_pulse.services.entity_resolver import artist_key
from festival_pulse.utils.errors import EntityResolutionError
from festival_pulse.utils.text_normalizer import collapse_whitespace, slugify

logger = structlog.get_logger(logger_name=__name__)


class CuratedIngestionService:
    """Writes curated venues, festivals and lineups through the store handle."""

    def __init__(self, store: IFestivalStore, guard: FuzzyDedupGuard) -> None:
        self._store = store
        self._guard = guard

    # ------------------------------------------------------------------
    # Venues
    # ------------------------------------------------------------------

    async def correct_venue(self, curated: CuratedVenue) -> tuple[Venue, bool]:
        """Upsert a venue by exact name, then apply any curated location fields.

        Returns the venue and whether an existing row was updated.
        """
        existing = await self._store.find_venue_by_name(curated.name)
        if existing is None:
            venue = await self._store.insert_venue(
                Venue(
                    name=curated.name,
                    city=curated.city,
                    country=curated.country,
                    address=curated.address,
                )
            )
            logger.info("curated_venue_created", venue_id=venue.id, name=venue.name)
            return venue, False

        changes = {
            field: value
            for field, value in (
                ("city", curated.city),
                ("country", curated.country),
                ("address", curated.address),
            )
            if value is not None and getattr(existing, field) != value
        }
        if not changes:
            return existing, False

        updated = await self._store.update_venue(existing.id, **changes)
        logger.info("curated_venue_corrected", venue_id=existing.id, fields=sorted(changes))
        return updated or existing, True

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    async def link_artists(self, festival_id: str, names: list[str]) -> tuple[int, list[str]]:
        """Upsert and link each artist.  Returns ``(new_links, errors)``."""
        linked = 0
        errors: list[str] = []
        for raw_name in names:
            name = collapse_whitespace(raw_name)
            try:
                slug = artist_key(name)
                artist = await self._store.find_artist_by_slug(slug)
                if artist is None:
                    artist = await self._store.insert_artist(Artist(name=name, slug=slug))
                    logger.info("curated_artist_created", artist_id=artist.id, slug=slug)
                if await self._store.link_artist(
                    LineupEntry(festival_id=festival_id, artist_id=artist.id)
                ):
                    linked += 1
            except Exception as exc:
                logger.warning("curated_artist_failed", artist=name, error=str(exc))
                errors.append(f"Artist {name}: {exc}")
        return linked, errors

    # ------------------------------------------------------------------
    # Festivals
    # ------------------------------------------------------------------

    async def _enrich(self, festival: Festival, event: CuratedEvent, venue_id: str | None) -> Festival:
        fields: dict[str, Any] = {"status": event.status}
        if event.start_date is not None:
            fields["start_date"] = event.start_date
        if event.end_date is not None:
            fields["end_date"] = event.end_date
        if event.website_url is not None:
            fields["website_url"] = event.website_url
        if venue_id is not None:
            fields["venue_id"] = venue_id
        updated = await self._store.update_festival(festival.id, **fields)
        return updated or festival

    async def _create(self, event: CuratedEvent, venue_id: str | None) -> Festival:
        slug = event.slug or slugify(event.name)
        if not slug:
            raise EntityResolutionError(f"Event name '{event.name}' produces an empty slug")
        return await self._store.insert_festival(
            Festival(
                name=event.name,
                slug=slug,
                start_date=event.start_date,
                end_date=event.end_date or event.start_date,
                venue_id=venue_id,
                website_url=event.website_url,
                status=event.status,
                metadata={"source": "curated"},
            )
        )

    async def ingest_event(self, event: CuratedEvent) -> tuple[str, Festival | None, int, list[str]]:
        """Apply one curated event.

        Returns ``(action, festival, new_links, artist_errors)`` where
        *action* is ``"created"``, ``"enriched"`` or ``"skipped"``.
        """
        existing = await self._guard.find_duplicate(event.name, event.slug)
        if existing is not None and not event.enrich:
            logger.info("curated_event_skipped", name=event.name, existing=existing.slug)
            return "skipped", existing, 0, []

        venue_id = None
        if event.venue is not None:
            venue, _ = await self.correct_venue(event.venue)
            venue_id = venue.id

        if existing is not None:
            festival = await self._enrich(existing, event, venue_id)
            action = "enriched"
        else:
            festival = await self._create(event, venue_id)
            action = "created"
        logger.info("curated_event_applied", name=event.name, slug=festival.slug, action=action)

        linked, errors = await self.link_artists(festival.id, event.artists)
        return action, festival, linked, errors

    async def apply(self, catalog: CuratedCatalog) -> CuratedIngestionResult:
        """Apply venue corrections first, then every curated event in order."""
        venues_updated = 0
        created: list[str] = []
        enriched: list[str] = []
        skipped: list[str] = []
        artists_linked = 0
        errors: list[str] = []

        for curated_venue in catalog.venues:
            try:
                _, updated = await self.correct_venue(curated_venue)
                venues_updated += int(updated)
            except Exception as exc:
                logger.warning("curated_venue_failed", name=curated_venue.name, error=str(exc))
                errors.append(f"Venue {curated_venue.name}: {exc}")

        for event in catalog.events:
            try:
                action, _, linked, artist_errors = await self.ingest_event(event)
            except Exception as exc:
                logger.warning("curated_event_failed", name=event.name, error=str(exc))
                errors.append(f"Event {event.name}: {exc}")
                continue

            if action == "created":
                created.append(event.name)
            elif action == "enriched":
                enriched.append(event.name)
            else:
                skipped.append(event.name)
            artists_linked += linked
            errors.extend(artist_errors)

        result = CuratedIngestionResult(
            venues_updated=venues_updated,
            created=created,
            enriched=enriched,
            skipped=skipped,
            artists_linked=artists_linked,
            errors=errors,
        )
        logger.info(
            "curated_catalog_applied",
            created=len(created),
            enriched=len(enriched),
            skipped=len(skipped),
            artists_linked=artists_linked,
            errors=len(errors),
        )
        return result
