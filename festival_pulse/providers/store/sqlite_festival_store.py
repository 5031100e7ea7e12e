"""SQLite-backed festival catalog store.

Persists venues, artists, festivals, lineups and scrape logs to a local
SQLite database at ``data/festival_pulse.db``.  Uses ``aiosqlite`` for async
I/O and opens one connection per operation, so a single store handle can be
shared by the sync orchestrator, the reconciliation engine and the curated
ingestion service.

The schema carries the uniqueness rules the sync depends on:

    artists.slug                       UNIQUE
    festivals.slug                     UNIQUE
    festival_lineups(festival_id, artist_id)  UNIQUE INDEX unique_lineup
"""

from __future__ import annotations

import json
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from festival_pulse.interfaces.festival_store import IFestivalStore
from festival_pulse.models.catalog import Artist, Festival, LineupEntry, Venue
from festival_pulse.models.sync import ScrapeLog
from festival_pulse.utils.errors import StoreError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/festival_pulse.db")
_PROVIDER_NAME = "sqlite_festival_store"
_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ', 'now')"

# ── DDL ───────────────────────────────────────────────────────────────

_CREATE_VENUES_TABLE = f"""\
CREATE TABLE IF NOT EXISTS venues (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    city        TEXT,
    country     TEXT,
    address     TEXT,
    latitude    TEXT,
    longitude   TEXT,
    image_url   TEXT,
    created_at  TEXT NOT NULL DEFAULT ({_NOW_SQL}),
    updated_at  TEXT NOT NULL DEFAULT ({_NOW_SQL})
);
"""

_CREATE_ARTISTS_TABLE = f"""\
CREATE TABLE IF NOT EXISTS artists (
    id             TEXT PRIMARY KEY,
    name           TEXT NOT NULL,
    slug           TEXT NOT NULL UNIQUE,
    bio            TEXT,
    genres         TEXT NOT NULL DEFAULT '[]',
    image_url      TEXT,
    ra_url         TEXT,
    youtube_url    TEXT,
    soundcloud_url TEXT,
    instagram_url  TEXT,
    spotify_url    TEXT,
    metadata       TEXT NOT NULL DEFAULT '{{}}',
    created_at     TEXT NOT NULL DEFAULT ({_NOW_SQL}),
    updated_at     TEXT NOT NULL DEFAULT ({_NOW_SQL})
);
"""

_CREATE_FESTIVALS_TABLE = f"""\
CREATE TABLE IF NOT EXISTS festivals (
    id           TEXT PRIMARY KEY,
    name         TEXT NOT NULL,
    slug         TEXT NOT NULL UNIQUE,
    description  TEXT,
    start_date   TEXT,
    end_date     TEXT,
    venue_id     TEXT REFERENCES venues(id),
    website_url  TEXT,
    ticket_url   TEXT,
    image_url    TEXT,
    status       TEXT NOT NULL DEFAULT 'upcoming'
                 CHECK (status IN ('upcoming', 'ongoing', 'past', 'cancelled')),
    metadata     TEXT NOT NULL DEFAULT '{{}}',
    created_at   TEXT NOT NULL DEFAULT ({_NOW_SQL}),
    updated_at   TEXT NOT NULL DEFAULT ({_NOW_SQL})
);
"""

_CREATE_LINEUPS_TABLE = f"""\
CREATE TABLE IF NOT EXISTS festival_lineups (
    id                TEXT PRIMARY KEY,
    festival_id       TEXT NOT NULL REFERENCES festivals(id) ON DELETE CASCADE,
    artist_id         TEXT NOT NULL REFERENCES artists(id) ON DELETE CASCADE,
    stage             TEXT,
    performance_date  TEXT,
    start_time        TEXT,
    end_time          TEXT,
    is_headliner      INTEGER NOT NULL DEFAULT 0,
    announced_at      TEXT DEFAULT ({_NOW_SQL}),
    created_at        TEXT NOT NULL DEFAULT ({_NOW_SQL})
);
"""

_CREATE_SCRAPE_LOGS_TABLE = """\
CREATE TABLE IF NOT EXISTS scrape_logs (
    id               TEXT PRIMARY KEY,
    region           TEXT,
    status           TEXT NOT NULL CHECK (status IN ('success', 'partial', 'error')),
    festivals_found  INTEGER NOT NULL DEFAULT 0,
    artists_found    INTEGER NOT NULL DEFAULT 0,
    errors           TEXT NOT NULL DEFAULT '[]',
    duration_ms      INTEGER NOT NULL DEFAULT 0,
    scraped_at       TEXT NOT NULL
);
"""

_CREATE_INDICES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS unique_lineup ON festival_lineups(festival_id, artist_id);",
    "CREATE INDEX IF NOT EXISTS idx_venues_name ON venues(name);",
    "CREATE INDEX IF NOT EXISTS idx_festivals_venue ON festivals(venue_id);",
    "CREATE INDEX IF NOT EXISTS idx_scrape_logs_scraped_at ON scrape_logs(scraped_at);",
]

_TABLES = ("venues", "artists", "festivals", "festival_lineups", "scrape_logs")

# ── DML ───────────────────────────────────────────────────────────────

_INSERT_LINEUP = """\
INSERT INTO festival_lineups
    (id, festival_id, artist_id, stage, performance_date, start_time, end_time, is_headliner)
VALUES (?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(festival_id, artist_id) DO NOTHING;
"""

_INSERT_SCRAPE_LOG = """\
INSERT INTO scrape_logs
    (id, region, status, festivals_found, artists_found, errors, duration_ms, scraped_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?);
"""

# Columns an update may touch.  Identity columns (id, slug, name for venues)
# are deliberately absent.
_VENUE_UPDATABLE = frozenset(
    {"city", "country", "address", "latitude", "longitude", "image_url"}
)
_FESTIVAL_UPDATABLE = frozenset(
    {
        "description", "start_date", "end_date", "venue_id", "website_url",
        "ticket_url", "image_url", "status", "metadata",
    }
)
_JSON_COLUMNS = frozenset({"genres", "metadata", "errors"})


def _new_id() -> str:
    return uuid.uuid4().hex


def _to_db(value: Any) -> Any:
    """Convert a model field value into something sqlite3 can bind."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if isinstance(value, bool):
        return int(value)
    return value


def _from_row(row: aiosqlite.Row) -> dict[str, Any]:
    data = dict(row)
    for column in _JSON_COLUMNS & data.keys():
        raw = data[column]
        data[column] = json.loads(raw) if raw else None
    return data


class SQLiteFestivalStore(IFestivalStore):
    """SQLite-backed catalog and scrape-log persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection with FK enforcement; wrap sqlite failures in StoreError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                await db.execute("PRAGMA foreign_keys = ON;")
                yield db
        except aiosqlite.Error as exc:
            raise StoreError(str(exc), provider_name=_PROVIDER_NAME) from exc

    async def initialize(self) -> None:
        """Create all catalog tables and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with self._connect() as db:
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.execute(_CREATE_VENUES_TABLE)
            await db.execute(_CREATE_ARTISTS_TABLE)
            await db.execute(_CREATE_FESTIVALS_TABLE)
            await db.execute(_CREATE_LINEUPS_TABLE)
            await db.execute(_CREATE_SCRAPE_LOGS_TABLE)
            for idx_sql in _CREATE_INDICES:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("festival_db_initialized", path=str(self._db_path))

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    # ── Generic helpers ────────────────────────────────────────────────

    async def _select_one(self, sql: str, params: tuple[Any, ...]) -> dict[str, Any] | None:
        async with self._connect() as db:
            cursor = await db.execute(sql, params)
            row = await cursor.fetchone()
        return _from_row(row) if row is not None else None

    async def _insert(self, table: str, values: dict[str, Any]) -> str:
        """Insert a row built from model fields and return its new id."""
        row_id = _new_id()
        columns = ["id", *values.keys()]
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders});"
        params = (row_id, *(_to_db(v) for v in values.values()))
        async with self._connect() as db:
            await db.execute(sql, params)
            await db.commit()
        return row_id

    async def _update(
        self,
        table: str,
        row_id: str,
        fields: dict[str, Any],
        allowed: frozenset[str],
    ) -> dict[str, Any] | None:
        unknown = set(fields) - allowed
        if unknown:
            raise ValueError(f"Cannot update {table} columns: {', '.join(sorted(unknown))}")

        if fields:
            assignments = ", ".join(f"{column} = ?" for column in fields)
            sql = f"UPDATE {table} SET {assignments}, updated_at = {_NOW_SQL} WHERE id = ?;"
            params = (*(_to_db(v) for v in fields.values()), row_id)
            async with self._connect() as db:
                await db.execute(sql, params)
                await db.commit()

        return await self._select_one(f"SELECT * FROM {table} WHERE id = ?;", (row_id,))

    # ── Venues ─────────────────────────────────────────────────────────

    async def find_venue_by_name(self, name: str) -> Venue | None:
        # "=" on TEXT is case-sensitive under SQLite's default BINARY collation.
        row = await self._select_one(
            "SELECT * FROM venues WHERE name = ? ORDER BY created_at LIMIT 1;", (name,)
        )
        return Venue(**row) if row else None

    async def insert_venue(self, venue: Venue) -> Venue:
        values = venue.model_dump(exclude={"id", "created_at", "updated_at"})
        venue_id = await self._insert("venues", values)
        row = await self._select_one("SELECT * FROM venues WHERE id = ?;", (venue_id,))
        logger.debug("venue_inserted", venue_id=venue_id, name=venue.name)
        return Venue(**row)

    async def update_venue(self, venue_id: str, **fields: Any) -> Venue | None:
        row = await self._update("venues", venue_id, fields, _VENUE_UPDATABLE)
        return Venue(**row) if row else None

    # ── Artists ────────────────────────────────────────────────────────

    async def find_artist_by_slug(self, slug: str) -> Artist | None:
        row = await self._select_one("SELECT * FROM artists WHERE slug = ?;", (slug,))
        return Artist(**row) if row else None

    async def insert_artist(self, artist: Artist) -> Artist:
        values = artist.model_dump(exclude={"id", "created_at", "updated_at"})
        artist_id = await self._insert("artists", values)
        row = await self._select_one("SELECT * FROM artists WHERE id = ?;", (artist_id,))
        logger.debug("artist_inserted", artist_id=artist_id, slug=artist.slug)
        return Artist(**row)

    # ── Festivals ──────────────────────────────────────────────────────

    async def find_festival_by_slug(self, slug: str) -> Festival | None:
        row = await self._select_one("SELECT * FROM festivals WHERE slug = ?;", (slug,))
        return Festival(**row) if row else None

    async def insert_festival(self, festival: Festival) -> Festival:
        values = festival.model_dump(exclude={"id", "created_at", "updated_at"})
        festival_id = await self._insert("festivals", values)
        row = await self._select_one("SELECT * FROM festivals WHERE id = ?;", (festival_id,))
        logger.debug("festival_inserted", festival_id=festival_id, slug=festival.slug)
        return Festival(**row)

    async def update_festival(self, festival_id: str, **fields: Any) -> Festival | None:
        row = await self._update("festivals", festival_id, fields, _FESTIVAL_UPDATABLE)
        return Festival(**row) if row else None

    async def list_festivals(self) -> list[Festival]:
        async with self._connect() as db:
            cursor = await db.execute("SELECT * FROM festivals ORDER BY created_at, rowid;")
            rows = await cursor.fetchall()
        return [Festival(**_from_row(row)) for row in rows]

    # ── Lineups ────────────────────────────────────────────────────────

    async def link_artist(self, entry: LineupEntry) -> bool:
        async with self._connect() as db:
            cursor = await db.execute(_INSERT_LINEUP, (
                _new_id(),
                entry.festival_id,
                entry.artist_id,
                entry.stage,
                _to_db(entry.performance_date),
                entry.start_time,
                entry.end_time,
                int(entry.is_headliner),
            ))
            inserted = cursor.rowcount == 1
            await db.commit()
        return inserted

    async def get_lineup(self, festival_id: str) -> list[LineupEntry]:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT * FROM festival_lineups WHERE festival_id = ? ORDER BY created_at, rowid;",
                (festival_id,),
            )
            rows = await cursor.fetchall()
        return [LineupEntry(**_from_row(row)) for row in rows]

    # ── Scrape logs ────────────────────────────────────────────────────

    async def insert_scrape_log(self, log: ScrapeLog) -> ScrapeLog:
        log_id = _new_id()
        async with self._connect() as db:
            await db.execute(_INSERT_SCRAPE_LOG, (
                log_id,
                log.region,
                log.status.value,
                log.festivals_found,
                log.artists_found,
                json.dumps(log.errors),
                log.duration_ms,
                _to_db(log.scraped_at),
            ))
            await db.commit()
        logger.info(
            "scrape_log_written",
            log_id=log_id,
            region=log.region,
            status=log.status.value,
        )
        return log.model_copy(update={"id": log_id})

    async def list_scrape_logs(self, limit: int = 20) -> list[ScrapeLog]:
        async with self._connect() as db:
            cursor = await db.execute(
                "SELECT * FROM scrape_logs ORDER BY scraped_at DESC, rowid DESC LIMIT ?;",
                (limit,),
            )
            rows = await cursor.fetchall()
        return [ScrapeLog(**_from_row(row)) for row in rows]

    # ── Stats ──────────────────────────────────────────────────────────

    async def count_rows(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        async with self._connect() as db:
            for table in _TABLES:
                cursor = await db.execute(f"SELECT COUNT(*) FROM {table};")
                row = await cursor.fetchone()
                counts[table] = row[0]
        return counts
