"""Unit tests for Festival Pulse pydantic models."""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from festival_pulse.models.catalog import Artist, Festival, FestivalStatus
from festival_pulse.models.curated import CuratedCatalog, CuratedEvent
from festival_pulse.models.ra_event import RAEvent, RAListing, parse_iso_date
from festival_pulse.models.sync import (
    MAX_LOGGED_ERRORS,
    RegionSyncResult,
    ScrapeLog,
    ScrapeStatus,
    SyncSummary,
)


# ======================================================================
# RA listing parsing
# ======================================================================


class TestRAEventFromGraphql:
    def test_full_payload(self, event_payload) -> None:
        event = RAEvent.from_graphql(event_payload())
        assert event.ra_id == "123"
        assert event.title == "Envision Festival"
        assert event.event_date == date(2026, 2, 23)
        assert event.image_filename == "flyer-123.jpg"
        assert event.attending == 250
        assert event.venue is not None
        assert event.venue.area_name == "Uvita"
        assert event.venue.country_name == "Costa Rica"
        assert [a.name for a in event.artists] == ["Bob Moses", "CloZee"]

    def test_missing_id_raises(self, event_payload) -> None:
        with pytest.raises(ValueError):
            RAEvent.from_graphql(event_payload(event_id=""))

    def test_missing_title_defaults(self, event_payload) -> None:
        event = RAEvent.from_graphql(event_payload(title=None))
        assert event.title == "Untitled Event"

    def test_nameless_artists_and_empty_venue_dropped(self, event_payload) -> None:
        payload = event_payload(venue={"id": "v", "name": ""})
        payload["artists"].append({"id": "x", "name": ""})
        event = RAEvent.from_graphql(payload)
        assert event.venue is None
        assert len(event.artists) == 2

    def test_null_collections(self, event_payload) -> None:
        payload = event_payload()
        payload.update({"images": None, "artists": None, "attending": None})
        event = RAEvent.from_graphql(payload)
        assert event.image_filename is None
        assert event.artists == []
        assert event.attending == 0

    def test_non_dict_nested_values_treated_as_absent(self, event_payload) -> None:
        payload = event_payload(venue="TBA")
        payload["artists"] = ["Bob Moses", None, {"id": "a1", "name": "CloZee"}]
        event = RAEvent.from_graphql(payload)
        assert event.venue is None
        assert [a.name for a in event.artists] == ["CloZee"]

    def test_non_dict_area_keeps_venue(self, event_payload) -> None:
        event = RAEvent.from_graphql(
            event_payload(venue={"id": "v1", "name": "Rancho La Merced", "area": "Uvita"})
        )
        assert event.venue is not None
        assert event.venue.name == "Rancho La Merced"
        assert event.venue.area_name is None
        assert event.venue.country_name is None

    def test_frozen(self, event_payload) -> None:
        event = RAEvent.from_graphql(event_payload())
        with pytest.raises(ValidationError):
            event.title = "Changed"


class TestRAListingFromGraphql:
    def test_parses_listing(self, listing_payload) -> None:
        listing = RAListing.from_graphql(listing_payload("55"))
        assert listing.ra_id == "l55"
        assert listing.event.ra_id == "55"

    def test_missing_event_raises(self) -> None:
        with pytest.raises(ValueError):
            RAListing.from_graphql({"id": "l1", "event": None})


class TestParseIsoDate:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("2026-02-23T00:00:00.000", date(2026, 2, 23)),
            ("2026-02-23T00:00:00.000Z", date(2026, 2, 23)),
            ("2026-02-23", date(2026, 2, 23)),
            ("not a date", None),
            (None, None),
        ],
    )
    def test_values(self, raw, expected) -> None:
        assert parse_iso_date(raw) == expected


# ======================================================================
# Catalog / sync models
# ======================================================================


class TestCatalogModels:
    def test_festival_defaults(self) -> None:
        festival = Festival(name="X", slug="x")
        assert festival.status == FestivalStatus.UPCOMING
        assert festival.metadata == {}

    def test_invalid_status_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Festival(name="X", slug="x", status="postponed")

    def test_artist_genres_default_empty(self) -> None:
        assert Artist(name="A", slug="a").genres == []


class TestScrapeLog:
    def test_error_cap_enforced(self) -> None:
        with pytest.raises(ValidationError):
            ScrapeLog(
                status=ScrapeStatus.PARTIAL,
                errors=[f"e{i}" for i in range(MAX_LOGGED_ERRORS + 1)],
            )

    def test_scraped_at_defaults_to_utc_now(self) -> None:
        log = ScrapeLog(status=ScrapeStatus.SUCCESS)
        assert log.scraped_at.tzinfo is not None


class TestSyncSummary:
    def test_totals(self) -> None:
        log = ScrapeLog(status=ScrapeStatus.SUCCESS)
        summary = SyncSummary(
            regions=[
                RegionSyncResult(region="A", area_id=1, festivals_found=2, artists_found=5, log=log),
                RegionSyncResult(
                    region="B", area_id=2, festivals_found=1, artists_found=1,
                    errors=["x", "y"], log=log,
                ),
            ]
        )
        assert summary.total_festivals == 3
        assert summary.total_artists == 6
        assert summary.total_errors == 2


# ======================================================================
# Curated catalog
# ======================================================================


class TestCuratedModels:
    def test_end_before_start_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CuratedEvent(name="X", start_date=date(2026, 3, 2), end_date=date(2026, 2, 23))

    def test_catalog_from_dict(self) -> None:
        catalog = CuratedCatalog.model_validate(
            {
                "venues": [{"name": "Rancho La Merced", "city": "Uvita"}],
                "events": [{"name": "Envision Festival", "enrich": True, "artists": ["CloZee"]}],
            }
        )
        assert catalog.venues[0].city == "Uvita"
        assert catalog.events[0].enrich is True
        assert catalog.events[0].status == FestivalStatus.UPCOMING
