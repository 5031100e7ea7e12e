"""Orchestrates an RA listing sync across regions.

Each region walks through four phases, strictly one region at a time:

    START -> FETCH -> PROCESS_LISTINGS -> FINALIZE

FETCH asks the event source for every listing in the date window.  If that
raises, the error is recorded as one ``"Region <name>: <error>"`` message and
the region finishes with zero counts instead of aborting the run.
PROCESS_LISTINGS hands the listings to the reconciliation engine.  FINALIZE
classifies the region (``success`` with no errors, ``partial`` otherwise) and
appends one scrape log row as its very last step, so a run killed midway
never leaves a log row behind.

Usage via CLI::

    python -m festival_pulse.cli.sync
    python -m festival_pulse.cli.sync run --region costa_rica --region berlin
"""

from __future__ import annotations

import calendar
import time
from collections.abc import Callable, Sequence
from datetime import date

import structlog

from festival_pulse.interfaces.event_source import IEventSource
from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.models.sync import (
    MAX_LOGGED_ERRORS,
    RegionSyncResult,
    ScrapeLog,
    ScrapeStatus,
    SyncPhase,
    SyncSummary,
)
from festival_pulse.services.reconciliation_service import ReconciliationEngine

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_PAGE_SIZE = 20


def add_months(day: date, months: int) -> date:
    """Shift *day* by *months*, clamping to the last day of the target month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def default_window(today: date | None = None, months: int = 3) -> tuple[str, str]:
    """Return ``(date_from, date_lte)`` ISO strings from *today* to *today* + *months*."""
    start = today or date.today()
    return start.isoformat(), add_months(start, months).isoformat()


class SyncOrchestrator:
    """Drives the event source and reconciliation engine across regions.

    Parameters
    ----------
    event_source:
        Listing source, typically :class:`RAGraphQLProvider`.
    engine:
        The :class:`ReconciliationEngine` writing catalog rows.
    store:
        Store handle used for the scrape log.  The orchestrator is its only
        writer of scrape log rows.
    page_size:
        Listings requested per page.
    clock:
        Monotonic clock in seconds, injectable for tests.
    """

    def __init__(
        self,
        event_source: IEventSource,
        engine: ReconciliationEngine,
        store: IFestivalStore,
        page_size: int = _DEFAULT_PAGE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._source = event_source
        self._engine = engine
        self._store = store
        self._page_size = page_size
        self._clock = clock
        self._logger = logger

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def sync_region(
        self,
        region: str,
        area_id: int,
        date_from: str,
        date_lte: str,
    ) -> RegionSyncResult:
        """Sync one region and persist its scrape log.

        Parameters
        ----------
        region:
            Display name stored on the log, e.g. ``"Costa Rica"``.
        area_id:
            RA numeric area code.
        date_from, date_lte:
            Inclusive ISO date window.
        """
        started = self._clock()
        log = self._logger.bind(region=region, area_id=area_id)
        log.info(
            "sync_phase",
            phase=SyncPhase.START.value,
            date_from=date_from,
            date_lte=date_lte,
        )

        festivals_found = 0
        artists_found = 0
        errors: list[str] = []

        try:
            log.info("sync_phase", phase=SyncPhase.FETCH.value)
            listings = await self._source.fetch_listings(
                area_id, date_from, date_lte, self._page_size
            )
            log.info("sync_listings_fetched", listings=len(listings))

            log.info("sync_phase", phase=SyncPhase.PROCESS_LISTINGS.value)
            totals = await self._engine.reconcile_listings(listings)
            festivals_found = totals.festivals_found
            artists_found = totals.artists_found
            errors.extend(totals.errors)
        except Exception as exc:
            log.error("sync_region_failed", error=str(exc))
            errors.append(f"Region {region}: {exc}")

        log.info("sync_phase", phase=SyncPhase.FINALIZE.value)
        duration_ms = int((self._clock() - started) * 1000)
        status = ScrapeStatus.SUCCESS if not errors else ScrapeStatus.PARTIAL

        scrape_log = await self._store.insert_scrape_log(
            ScrapeLog(
                region=region,
                status=status,
                festivals_found=festivals_found,
                artists_found=artists_found,
                errors=errors[:MAX_LOGGED_ERRORS],
                duration_ms=duration_ms,
            )
        )

        log.info(
            "sync_region_complete",
            status=status.value,
            festivals_found=festivals_found,
            artists_found=artists_found,
            errors=len(errors),
            duration_ms=duration_ms,
        )
        return RegionSyncResult(
            region=region,
            area_id=area_id,
            festivals_found=festivals_found,
            artists_found=artists_found,
            errors=errors,
            log=scrape_log,
        )

    async def run(
        self,
        regions: Sequence[tuple[str, int]],
        date_from: str,
        date_lte: str,
    ) -> SyncSummary:
        """Sync each ``(region, area_id)`` pair in order.

        Regions are processed sequentially so only one stream of requests
        hits RA at a time.
        """
        results: list[RegionSyncResult] = []
        for region, area_id in regions:
            results.append(await self.sync_region(region, area_id, date_from, date_lte))

        summary = SyncSummary(regions=results)
        self._logger.info(
            "sync_run_complete",
            regions=len(results),
            festivals_found=summary.total_festivals,
            artists_found=summary.total_artists,
            errors=summary.total_errors,
        )
        return summary
