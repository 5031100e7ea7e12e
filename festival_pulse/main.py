"""Dependency wiring for the sync and curated-ingestion entry points.

Builds the store, event source, reconciliation engine and orchestrator from
:class:`Settings`.  The store handle is created once here and passed down;
no module keeps a global connection.
"""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from festival_pulse.config.settings import Settings
from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.providers.event.ra_graphql_provider import RAGraphQLProvider, resolve_area_id
from festival_pulse.providers.store.sqlite_festival_store import SQLiteFestivalStore
from festival_pulse.services.curated_ingestion_service import CuratedIngestionService
from festival_pulse.services.dedup_guard import FuzzyDedupGuard, build_policy
from festival_pulse.services.reconciliation_service import ReconciliationEngine
from festival_pulse.services.sync_service import SyncOrchestrator


async def build_store(settings: Settings, db_path: str | None = None) -> SQLiteFestivalStore:
    """Create the SQLite store and make sure its schema exists."""
    store = SQLiteFestivalStore(db_path or settings.db_path)
    await store.initialize()
    return store


def build_event_source(settings: Settings, http_client: httpx.AsyncClient) -> RAGraphQLProvider:
    return RAGraphQLProvider(
        http_client=http_client,
        graphql_url=settings.ra_graphql_url,
        page_delay=settings.ra_page_delay,
        request_timeout=settings.ra_request_timeout,
    )


def build_sync_orchestrator(
    settings: Settings,
    http_client: httpx.AsyncClient,
    store: IFestivalStore,
) -> SyncOrchestrator:
    """Wire the RA client, reconciliation engine and store into an orchestrator."""
    return SyncOrchestrator(
        event_source=build_event_source(settings, http_client),
        engine=ReconciliationEngine(store),
        store=store,
        page_size=settings.ra_page_size,
    )


def build_curated_service(settings: Settings, store: IFestivalStore) -> CuratedIngestionService:
    policy = build_policy(
        settings.dedup_policy,
        prefix_length=settings.dedup_prefix_length,
        threshold=settings.dedup_similarity_threshold,
    )
    return CuratedIngestionService(store, FuzzyDedupGuard(store, policy))


def resolve_regions(labels: Sequence[str]) -> list[tuple[str, int]]:
    """Map region labels to ``(display_name, area_id)`` pairs, keeping order.

    Raises :class:`~festival_pulse.utils.errors.ConfigurationError` on the
    first unknown label, before any network or store work starts.
    """
    resolved: list[tuple[str, int]] = []
    seen: set[int] = set()
    for label in labels:
        name, area_id = resolve_area_id(label)
        if area_id in seen:
            continue
        seen.add(area_id)
        resolved.append((name, area_id))
    return resolved
