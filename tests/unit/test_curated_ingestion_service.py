"""Unit tests for CuratedIngestionService."""

from __future__ import annotations

from datetime import date

import pytest

from festival_pulse.models.catalog import Festival, FestivalStatus, Venue
from festival_pulse.models.curated import CuratedCatalog, CuratedEvent, CuratedVenue
from festival_pulse.services.curated_ingestion_service import CuratedIngestionService
from festival_pulse.services.dedup_guard import FuzzyDedupGuard


def _service(store) -> CuratedIngestionService:
    return CuratedIngestionService(store, FuzzyDedupGuard(store))


async def _api_festival(store) -> Festival:
    """A festival as the RA sync would have written it."""
    return await store.insert_festival(
        Festival(
            name="Envision Festival",
            slug="envision-festival-123",
            start_date=date(2026, 2, 23),
            end_date=date(2026, 2, 23),
            metadata={"ra_id": "123", "attending": 250},
        )
    )


class TestCorrectVenue:
    @pytest.mark.asyncio
    async def test_creates_missing_venue(self, store) -> None:
        venue, updated = await _service(store).correct_venue(
            CuratedVenue(name="San Ramon", city="San Ramon", country="Costa Rica")
        )
        assert venue.id
        assert updated is False
        assert (await store.find_venue_by_name("San Ramon")).country == "Costa Rica"

    @pytest.mark.asyncio
    async def test_updates_changed_fields_only(self, store) -> None:
        await store.insert_venue(Venue(name="Rancho La Merced", city="Uvita", country="Costa Rica"))
        venue, updated = await _service(store).correct_venue(
            CuratedVenue(name="Rancho La Merced", city="Uvita, Puntarenas")
        )
        assert updated is True
        assert venue.city == "Uvita, Puntarenas"
        assert venue.country == "Costa Rica"

    @pytest.mark.asyncio
    async def test_no_change_is_not_an_update(self, store) -> None:
        await store.insert_venue(Venue(name="Rancho La Merced", city="Uvita"))
        _, updated = await _service(store).correct_venue(
            CuratedVenue(name="Rancho La Merced", city="Uvita")
        )
        assert updated is False


class TestIngestEvent:
    @pytest.mark.asyncio
    async def test_creates_new_festival(self, store) -> None:
        action, festival, linked, errors = await _service(store).ingest_event(
            CuratedEvent(
                name="Tardeo Sunset Party",
                slug="tardeo-sunset-party-2026",
                start_date=date(2026, 2, 15),
                venue=CuratedVenue(name="San Ramon", city="San Ramon"),
                artists=["Hernan Cattaneo"],
            )
        )
        assert action == "created"
        assert festival.slug == "tardeo-sunset-party-2026"
        assert festival.end_date == date(2026, 2, 15)
        assert festival.metadata == {"source": "curated"}
        assert festival.venue_id is not None
        assert linked == 1
        assert errors == []

    @pytest.mark.asyncio
    async def test_slug_defaults_to_name(self, store) -> None:
        _, festival, _, _ = await _service(store).ingest_event(CuratedEvent(name="Jungle Jam 2026"))
        assert festival.slug == "jungle-jam-2026"

    @pytest.mark.asyncio
    async def test_duplicate_without_enrich_is_skipped(self, store) -> None:
        existing = await _api_festival(store)
        action, festival, linked, _ = await _service(store).ingest_event(
            CuratedEvent(name="Envision Festival", end_date=date(2026, 3, 2))
        )
        assert action == "skipped"
        assert festival.id == existing.id
        assert linked == 0
        unchanged = await store.find_festival_by_slug("envision-festival-123")
        assert unchanged.end_date == date(2026, 2, 23)

    @pytest.mark.asyncio
    async def test_duplicate_with_enrich_updates_in_place(self, store) -> None:
        existing = await _api_festival(store)
        action, festival, linked, _ = await _service(store).ingest_event(
            CuratedEvent(
                name="Envision Festival",
                enrich=True,
                start_date=date(2026, 2, 23),
                end_date=date(2026, 3, 2),
                website_url="https://www.envisionfestival.com/",
                status=FestivalStatus.UPCOMING,
                artists=["CloZee"],
            )
        )
        assert action == "enriched"
        assert festival.id == existing.id
        assert festival.end_date == date(2026, 3, 2)
        assert festival.website_url == "https://www.envisionfestival.com/"
        # RA identity and metadata are untouched.
        assert festival.slug == "envision-festival-123"
        assert festival.metadata["ra_id"] == "123"
        assert linked == 1
        assert (await store.count_rows())["festivals"] == 1

    @pytest.mark.asyncio
    async def test_relinking_existing_artist_is_noop(self, store) -> None:
        service = _service(store)
        event = CuratedEvent(name="Jungle Jam", enrich=True, artists=["CloZee"])
        first = await service.ingest_event(event)
        second = await service.ingest_event(event)
        assert first[0] == "created"
        assert second[0] == "enriched"
        assert second[2] == 0
        assert (await store.count_rows())["festival_lineups"] == 1


class TestApply:
    @pytest.mark.asyncio
    async def test_apply_catalog(self, store) -> None:
        await _api_festival(store)
        await store.insert_venue(Venue(name="Rancho La Merced", city="Uvita"))
        catalog = CuratedCatalog(
            venues=[CuratedVenue(name="Rancho La Merced", city="Uvita, Puntarenas")],
            events=[
                CuratedEvent(name="Envision Festival", enrich=True, end_date=date(2026, 3, 2)),
                CuratedEvent(name="ENVISION FESTIVAL"),
                CuratedEvent(name="Tardeo Sunset Party", artists=["Hernan Cattaneo", "???"]),
            ],
        )

        result = await _service(store).apply(catalog)

        assert result.venues_updated == 1
        assert result.enriched == ["Envision Festival"]
        assert result.skipped == ["ENVISION FESTIVAL"]
        assert result.created == ["Tardeo Sunset Party"]
        assert result.artists_linked == 1
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Artist ???:")

    @pytest.mark.asyncio
    async def test_failing_event_does_not_stop_catalog(self, store, monkeypatch) -> None:
        service = _service(store)
        original = service.ingest_event

        async def flaky(event: CuratedEvent):
            if event.name == "Broken":
                raise RuntimeError("boom")
            return await original(event)

        monkeypatch.setattr(service, "ingest_event", flaky)
        result = await service.apply(
            CuratedCatalog(events=[CuratedEvent(name="Broken"), CuratedEvent(name="Fine Event")])
        )
        assert result.errors == ["Event Broken: boom"]
        assert result.created == ["Fine Event"]
