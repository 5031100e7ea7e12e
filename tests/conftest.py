"""Shared pytest fixtures for the Festival Pulse test suite."""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from pathlib import Path
from typing import Any

import pytest
import pytest_asyncio
import structlog

from festival_pulse.interfaces.event_source import IEventSource
from festival_pulse.models.ra_event import RAListing
from festival_pulse.providers.store.sqlite_festival_store import SQLiteFestivalStore

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _structlog_uncached():
    """Plain console logging with no logger caching.

    Cached loggers keep a handle on whatever stdout was current on first use,
    which breaks once pytest swaps capture streams between tests.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# Raw RA payload builders
# ---------------------------------------------------------------------------


def _event_payload(
    event_id: str = "123",
    title: str = "Envision Festival",
    date: str = "2026-02-23T00:00:00.000",
    venue: dict[str, Any] | None = None,
    artists: list[str] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": event_id,
        "title": title,
        "date": date,
        "startTime": "2026-02-23T22:00:00.000",
        "endTime": "2026-02-24T06:00:00.000",
        "contentUrl": f"/events/{event_id}",
        "images": [{"id": "1", "filename": f"flyer-{event_id}.jpg"}],
        "attending": 250,
        "venue": venue
        if venue is not None
        else {
            "id": "v1",
            "name": "Rancho La Merced",
            "address": "Uvita",
            "area": {"id": "26", "name": "Uvita", "country": {"name": "Costa Rica"}},
        },
        "artists": [
            {"id": f"a{i}", "name": name}
            for i, name in enumerate(artists if artists is not None else ["Bob Moses", "CloZee"])
        ],
    }
    payload.update(extra)
    return payload


def _listing_payload(event_id: str = "123", **event_kwargs: Any) -> dict[str, Any]:
    return {
        "id": f"l{event_id}",
        "listingDate": "2026-02-23T00:00:00.000",
        "event": _event_payload(event_id=event_id, **event_kwargs),
    }


@pytest.fixture
def event_payload() -> Callable[..., dict[str, Any]]:
    """Factory for the ``event`` object of an ``eventListings`` element."""
    return _event_payload


@pytest.fixture
def listing_payload() -> Callable[..., dict[str, Any]]:
    """Factory for one raw ``eventListings.data[]`` element."""
    return _listing_payload


@pytest.fixture
def make_listing() -> Callable[..., RAListing]:
    """Factory for parsed :class:`RAListing` objects."""

    def _make(event_id: str = "123", **event_kwargs: Any) -> RAListing:
        return RAListing.from_graphql(_listing_payload(event_id=event_id, **event_kwargs))

    return _make


@pytest.fixture
def graphql_body() -> Callable[..., dict[str, Any]]:
    """Factory for a full GraphQL response body."""

    def _body(items: list[dict[str, Any]], total: int) -> dict[str, Any]:
        return {"data": {"eventListings": {"data": items, "totalResults": total}}}

    return _body


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def store(tmp_path: Path) -> SQLiteFestivalStore:
    """Create and initialize a store with a temp DB."""
    db = SQLiteFestivalStore(db_path=tmp_path / "festival_pulse_test.db")
    await db.initialize()
    return db


# ---------------------------------------------------------------------------
# Fake event source
# ---------------------------------------------------------------------------


class FakeEventSource(IEventSource):
    """In-memory event source keyed by area id.

    A value that is an exception instance is raised instead of returned.
    """

    def __init__(self, by_area: dict[int, list[RAListing] | Exception]) -> None:
        self._by_area = by_area
        self.calls: list[tuple[int, str, str, int]] = []

    async def iter_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = 20,
    ) -> AsyncIterator[RAListing]:
        for listing in await self.fetch_listings(area_id, date_from, date_lte, page_size):
            yield listing

    async def fetch_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = 20,
    ) -> list[RAListing]:
        self.calls.append((area_id, date_from, date_lte, page_size))
        result = self._by_area.get(area_id, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    def get_provider_name(self) -> str:
        return "fake"


@pytest.fixture
def fake_source_factory() -> Callable[[dict[int, Any]], FakeEventSource]:
    return FakeEventSource
