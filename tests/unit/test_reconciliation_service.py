"""Unit tests for ReconciliationEngine against a temporary SQLite store."""

from __future__ import annotations

import pytest

from festival_pulse.models.catalog import Artist
from festival_pulse.models.ra_event import RAArtist
from festival_pulse.providers.store.sqlite_festival_store import SQLiteFestivalStore
from festival_pulse.services.reconciliation_service import ReconciliationEngine
from festival_pulse.utils.errors import StoreError

FIVE_ARTISTS = ["Artist One", "Artist Two", "Artist Three", "Artist Four", "Artist Five"]


def _fail_insert_for(store: SQLiteFestivalStore, monkeypatch, slug: str) -> None:
    original = store.insert_artist

    async def flaky(artist: Artist) -> Artist:
        if artist.slug == slug:
            raise StoreError("disk I/O error", provider_name="sqlite_festival_store")
        return await original(artist)

    monkeypatch.setattr(store, "insert_artist", flaky)


class TestUpserts:
    @pytest.mark.asyncio
    async def test_upsert_venue_reuses_existing(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        event = make_listing().event
        first = await engine.upsert_venue(event)
        second = await engine.upsert_venue(event)
        assert first is not None
        assert first == second
        assert (await store.count_rows())["venues"] == 1

    @pytest.mark.asyncio
    async def test_upsert_venue_none_without_venue(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        assert await engine.upsert_venue(make_listing(venue={}).event) is None
        assert (await store.count_rows())["venues"] == 0

    @pytest.mark.asyncio
    async def test_existing_rows_are_not_modified(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        first_id = await engine.upsert_festival(make_listing(title="Envision Festival").event, None)
        # Same RA id, different payload: the stored row wins.
        changed = make_listing(title="Envision Festival", attending=9999).event
        second_id = await engine.upsert_festival(changed, None)

        assert first_id == second_id
        festival = await store.find_festival_by_slug("envision-festival-123")
        assert festival.metadata["attending"] == 250

    @pytest.mark.asyncio
    async def test_upsert_artist_by_slug(self, store) -> None:
        engine = ReconciliationEngine(store)
        first = await engine.upsert_artist(RAArtist(name="Christian Löffler"))
        second = await engine.upsert_artist(RAArtist(name="christian loffler"))
        assert first == second
        artist = await store.find_artist_by_slug("christian-loffler")
        assert artist.name == "Christian Löffler"


class TestReconcileListing:
    @pytest.mark.asyncio
    async def test_creates_all_rows(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        outcome = await engine.reconcile_listing(make_listing())

        assert outcome.venue_id is not None
        assert len(outcome.artist_ids) == 2
        assert outcome.new_lineups == 2
        assert outcome.errors == []
        assert len(await store.get_lineup(outcome.festival_id)) == 2

    @pytest.mark.asyncio
    async def test_second_pass_adds_nothing(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        listing = make_listing()
        first = await engine.reconcile_listing(listing)
        before = await store.count_rows()
        second = await engine.reconcile_listing(listing)

        assert second.festival_id == first.festival_id
        assert second.new_lineups == 0
        assert await store.count_rows() == before

    @pytest.mark.asyncio
    async def test_failing_artist_is_isolated(self, store, make_listing, monkeypatch) -> None:
        _fail_insert_for(store, monkeypatch, "artist-two")
        engine = ReconciliationEngine(store)

        outcome = await engine.reconcile_listing(make_listing(artists=FIVE_ARTISTS))

        assert len(outcome.artist_ids) == 4
        assert outcome.new_lineups == 4
        assert outcome.errors == ["Artist Artist Two: [sqlite_festival_store] disk I/O error"]
        for slug in ("artist-one", "artist-three", "artist-four", "artist-five"):
            assert await store.find_artist_by_slug(slug) is not None
        assert await store.find_artist_by_slug("artist-two") is None

    @pytest.mark.asyncio
    async def test_unsluggable_artist_recorded(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        outcome = await engine.reconcile_listing(make_listing(artists=["???", "CloZee"]))
        assert len(outcome.artist_ids) == 1
        assert len(outcome.errors) == 1
        assert outcome.errors[0].startswith("Artist ???:")


class TestReconcileListings:
    @pytest.mark.asyncio
    async def test_totals(self, store, make_listing) -> None:
        engine = ReconciliationEngine(store)
        totals = await engine.reconcile_listings(
            [
                make_listing("1", title="Envision Festival"),
                make_listing("2", title="Sunset Session", artists=["CloZee", "Nora En Pure"]),
            ]
        )
        assert totals.festivals_found == 2
        assert totals.artists_found == 4
        assert totals.new_lineups == 4
        assert totals.errors == []
        # CloZee is shared between both events.
        assert (await store.count_rows())["artists"] == 3

    @pytest.mark.asyncio
    async def test_failing_listing_is_isolated(self, store, make_listing, monkeypatch) -> None:
        original = store.find_festival_by_slug

        async def flaky(slug: str):
            if slug == "broken-event-2":
                raise StoreError("database is locked")
            return await original(slug)

        monkeypatch.setattr(store, "find_festival_by_slug", flaky)
        engine = ReconciliationEngine(store)

        totals = await engine.reconcile_listings(
            [
                make_listing("1", title="First Event"),
                make_listing("2", title="Broken Event"),
                make_listing("3", title="Third Event"),
            ]
        )

        assert totals.festivals_found == 2
        assert totals.errors == ["Event Broken Event: database is locked"]
        assert await store.find_festival_by_slug("third-event-3") is not None

    @pytest.mark.asyncio
    async def test_empty_input(self, store) -> None:
        totals = await ReconciliationEngine(store).reconcile_listings([])
        assert totals.festivals_found == 0
        assert totals.errors == []
