"""Resident Advisor (RA.co) listing client via their undocumented GraphQL API.

Issues one POST per page to ``https://ra.co/graphql`` with the
``GET_EVENT_LISTINGS`` operation, advancing the page number until RA returns
an empty page or the cumulative item count reaches the declared
``totalResults``.  A fixed courtesy delay separates consecutive pages.

Failure handling:
    - non-2xx response   -> logged, pagination stops, earlier pages are kept
    - GraphQL ``errors`` -> logged, pagination stops
    - network failure or unreadable body -> :class:`EventSourceError`

The ``httpx.AsyncClient`` is injected for connection pooling and
testability; results come back as typed pydantic models.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from typing import Any

import httpx

from festival_pulse.interfaces.event_source import IEventSource
from festival_pulse.models.ra_event import RAEventPage, RAListing
from festival_pulse.utils.errors import ConfigurationError, EventSourceError
from festival_pulse.utils.logging import get_logger

_GRAPHQL_URL = "https://ra.co/graphql"
_PAGE_DELAY = 1.5  # seconds between pages
_PAGE_SIZE = 20
_REQUEST_TIMEOUT = 30.0
_PROVIDER_NAME = "ra_graphql"

_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Referer": "https://ra.co/events",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
}

# ---------------------------------------------------------------------------
# RA area codes.  Keys are lowercase with underscores; see resolve_area_id().
# ---------------------------------------------------------------------------
RA_AREA_IDS: dict[str, int] = {
    # Central America
    "costa_rica": 26,
    # USA
    "chicago": 218,
    "detroit": 219,
    "new_york": 8,
    "los_angeles": 17,
    "miami": 28,
    # Europe
    "berlin": 34,
    "london": 13,
    "amsterdam": 29,
    "ibiza": 25,
    "barcelona": 44,
}

REGION_DISPLAY_NAMES: dict[str, str] = {
    "costa_rica": "Costa Rica",
    "chicago": "Chicago",
    "detroit": "Detroit",
    "new_york": "New York",
    "los_angeles": "Los Angeles",
    "miami": "Miami",
    "berlin": "Berlin",
    "london": "London",
    "amsterdam": "Amsterdam",
    "ibiza": "Ibiza",
    "barcelona": "Barcelona",
}

_EVENT_LISTINGS_QUERY = (
    "query GET_EVENT_LISTINGS("
    "$filters: FilterInputDtoInput, "
    "$pageSize: Int, "
    "$page: Int"
    ") {"
    "eventListings("
    "filters: $filters, "
    "pageSize: $pageSize, "
    "page: $page, "
    "sort: {attending: {priority: 1, order: DESCENDING}}"
    ") {"
    "data {"
    "id listingDate "
    "event {"
    "id title date startTime endTime contentUrl attending "
    "images {filename __typename} "
    "venue {id name address area {id name country {id name __typename} __typename} __typename} "
    "artists {id name __typename} "
    "__typename"
    "} __typename"
    "} "
    "totalResults __typename"
    "}"
    "}"
)


def region_key(region: str) -> str:
    """Normalize a region label: ``"Costa Rica"`` / ``"costa-rica"`` -> ``"costa_rica"``."""
    return region.strip().lower().replace(" ", "_").replace("-", "_")


def resolve_area_id(region: str) -> tuple[str, int]:
    """Map a region label or numeric code to ``(display_name, area_id)``.

    Raises
    ------
    ConfigurationError
        If *region* is neither a known region nor an integer code.
    """
    key = region_key(region)
    if key in RA_AREA_IDS:
        return REGION_DISPLAY_NAMES.get(key, region.strip().title()), RA_AREA_IDS[key]
    if key.isdigit():
        area_id = int(key)
        for known, known_id in RA_AREA_IDS.items():
            if known_id == area_id:
                return REGION_DISPLAY_NAMES.get(known, known), area_id
        return f"Area {area_id}", area_id
    raise ConfigurationError(
        f"Unknown region '{region}'. Known regions: {', '.join(sorted(RA_AREA_IDS))}",
        provider_name=_PROVIDER_NAME,
    )


class RAGraphQLProvider(IEventSource):
    """Fetches RA.co event listings for one region and date window.

    Parameters
    ----------
    http_client:
        Injected ``httpx.AsyncClient``.
    graphql_url:
        Endpoint to POST queries to.
    page_delay:
        Seconds to wait between consecutive page requests (default 1.5).
    request_timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        graphql_url: str = _GRAPHQL_URL,
        page_delay: float = _PAGE_DELAY,
        request_timeout: float = _REQUEST_TIMEOUT,
    ) -> None:
        self._http = http_client
        self._graphql_url = graphql_url
        self._page_delay = page_delay
        self._request_timeout = request_timeout
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _pause(self) -> None:
        """Courtesy delay between pages."""
        if self._page_delay > 0:
            await asyncio.sleep(self._page_delay)

    @staticmethod
    def build_variables(
        area_id: int,
        date_from: str,
        date_lte: str,
        page: int = 1,
        page_size: int = _PAGE_SIZE,
    ) -> dict[str, Any]:
        """Build the GraphQL variables for an event listings query.

        Dates are ``YYYY-MM-DD``; they are widened to the first and last
        millisecond of the day in UTC.
        """
        return {
            "filters": {
                "areas": {"eq": area_id},
                "listingDate": {
                    "gte": f"{date_from}T00:00:00.000Z",
                    "lte": f"{date_lte}T23:59:59.999Z",
                },
            },
            "pageSize": page_size,
            "page": page,
        }

    def _parse_page(self, body: Any, area_id: int, page: int) -> RAEventPage | None:
        if not isinstance(body, dict):
            raise EventSourceError(
                f"Unexpected response body for area {area_id} page {page}",
                provider_name=_PROVIDER_NAME,
            )

        if body.get("errors"):
            self._logger.warning(
                "ra_graphql_errors",
                area_id=area_id,
                page=page,
                errors=body["errors"][:3],
            )
            return None

        listings_raw = (body.get("data") or {}).get("eventListings")
        if not isinstance(listings_raw, dict):
            raise EventSourceError(
                f"Response for area {area_id} page {page} has no eventListings",
                provider_name=_PROVIDER_NAME,
            )

        raw_items = listings_raw.get("data") or []
        total = listings_raw.get("totalResults") or 0

        listings: list[RAListing] = []
        for item in raw_items:
            if not isinstance(item, dict):
                continue
            try:
                listings.append(RAListing.from_graphql(item))
            except (ValueError, TypeError, AttributeError):
                self._logger.warning(
                    "ra_listing_parse_failed",
                    area_id=area_id,
                    page=page,
                    listing_data=str(item)[:200],
                )

        return RAEventPage(
            listings=listings,
            raw_count=len(raw_items),
            total_results=total if isinstance(total, int) else 0,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_page(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page: int = 1,
        page_size: int = _PAGE_SIZE,
    ) -> RAEventPage | None:
        """Fetch one page of listings.

        Returns
        -------
        RAEventPage | None
            The parsed page, or ``None`` when RA answered with a non-success
            status or a GraphQL error payload.

        Raises
        ------
        EventSourceError
            On network failure or a body that is not the expected JSON shape.
        """
        payload = {
            "operationName": "GET_EVENT_LISTINGS",
            "variables": self.build_variables(area_id, date_from, date_lte, page, page_size),
            "query": _EVENT_LISTINGS_QUERY,
        }

        try:
            response = await self._http.post(
                self._graphql_url,
                json=payload,
                headers=_HEADERS,
                timeout=self._request_timeout,
            )
        except httpx.HTTPError as exc:
            raise EventSourceError(
                f"Request for area {area_id} page {page} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if not 200 <= response.status_code < 300:
            self._logger.warning(
                "ra_unexpected_status",
                area_id=area_id,
                page=page,
                status=response.status_code,
            )
            return None

        try:
            body = response.json()
        except ValueError as exc:
            raise EventSourceError(
                f"Unparseable response for area {area_id} page {page}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        return self._parse_page(body, area_id, page)

    async def iter_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = _PAGE_SIZE,
    ) -> AsyncIterator[RAListing]:
        """Yield every listing for an area within a date window, page by page."""
        fetched = 0
        page = 1

        while True:
            if page > 1:
                await self._pause()

            result = await self.fetch_page(
                area_id=area_id,
                date_from=date_from,
                date_lte=date_lte,
                page=page,
                page_size=page_size,
            )
            if result is None or result.raw_count == 0:
                break

            for listing in result.listings:
                yield listing

            fetched += result.raw_count
            self._logger.info(
                "ra_page_fetched",
                area_id=area_id,
                page=page,
                listings_on_page=result.raw_count,
                fetched=fetched,
                total_results=result.total_results,
            )

            if fetched >= result.total_results:
                break
            page += 1

    async def fetch_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = _PAGE_SIZE,
    ) -> list[RAListing]:
        """Fetch all listings for an area within a date window."""
        return [
            listing
            async for listing in self.iter_listings(area_id, date_from, date_lte, page_size)
        ]

    def get_provider_name(self) -> str:
        """Return ``'ra_graphql'``."""
        return _PROVIDER_NAME
