"""Abstract base class for event listing sources.

The sync orchestrator depends only on this contract, so tests can feed it
canned listings and another API could be added without touching the
reconciliation code.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator

from festival_pulse.models.ra_event import RAListing


# Concrete implementation: RAGraphQLProvider (festival_pulse/providers/event/)
class IEventSource(ABC):
    """Contract for paginated event listing sources.

    Each call is independent: no pagination state survives between calls.
    """

    @abstractmethod
    def iter_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = 20,
    ) -> AsyncIterator[RAListing]:
        """Lazily yield listings for a region and inclusive date window.

        Parameters
        ----------
        area_id:
            Numeric region code understood by the source.
        date_from:
            ISO date ``YYYY-MM-DD`` (inclusive).
        date_lte:
            ISO date ``YYYY-MM-DD`` (inclusive).
        page_size:
            Listings requested per page.
        """

    @abstractmethod
    async def fetch_listings(
        self,
        area_id: int,
        date_from: str,
        date_lte: str,
        page_size: int = 20,
    ) -> list[RAListing]:
        """Collect :meth:`iter_listings` into a list."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this source."""
