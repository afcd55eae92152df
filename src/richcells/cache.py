"""Two-tier table cache over a SQLite key/value store.

Store operations catch ``aiosqlite.Error`` (and the ``ValueError`` aiosqlite
raises on a closed connection) internally and degrade gracefully:
read failures return ``None`` (treated as cache miss by callers), write
failures are logged and ignored (the freshly built table is still returned).
Removal is the exception: ``remove`` propagates so that an explicit cache
clear can report whether it worked.

``CacheManager`` layers the primary/backup tiers on top. A payload that does
not parse as a ``Table`` is indistinguishable from a missing one, which makes
recomputation the single recovery path for corruption.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

import aiosqlite
import structlog
from pydantic import ValidationError

from richcells.models.cache import CacheEntry, CacheOutcome, CacheTier
from richcells.models.table import Table

if TYPE_CHECKING:
    from richcells.config import CacheSettings

log = structlog.get_logger()

_CREATE_ENTRY_TABLE = """
CREATE TABLE IF NOT EXISTS cache_entries (
    key         TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    written_at  TEXT NOT NULL,
    expires_at  TEXT NOT NULL
)
"""

_CREATE_ENTRY_INDEX = (
    "CREATE INDEX IF NOT EXISTS idx_entries_expires ON cache_entries(expires_at)"
)


class CacheStore(Protocol):
    """Key/value store with per-entry TTL.

    ``get`` returns ``None`` for missing or expired keys; ``put`` must not
    raise for storage failures.
    """

    async def get(self, key: str) -> str | None: ...

    async def put(self, key: str, payload: str, ttl_seconds: int) -> None: ...

    async def remove(self, key: str) -> None: ...


class SqliteCacheStore:
    """SQLite-backed key/value store with per-entry TTL, implementing CacheStore."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create tables and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_ENTRY_TABLE)
        await self._db.execute(_CREATE_ENTRY_INDEX)
        await self._db.commit()

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Read a live entry. Returns ``None`` when missing, expired, or on read failure."""
        try:
            cursor = await self._db.execute(
                "SELECT key, payload, written_at, expires_at FROM cache_entries WHERE key = ?",
                (key,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None

            expires_at = datetime.fromisoformat(row[3])
            if datetime.now(UTC) >= expires_at:
                return None

            return CacheEntry(
                key=row[0],
                payload=row[1],
                written_at=datetime.fromisoformat(row[2]),
                expires_at=expires_at,
            )
        except (aiosqlite.Error, ValueError):
            log.warning("cache_read_error", key=key, exc_info=True)
            return None

    async def get(self, key: str) -> str | None:
        entry = await self.get_entry(key)
        return entry.payload if entry is not None else None

    async def put(self, key: str, payload: str, ttl_seconds: int) -> None:
        """Write an entry. Non-fatal on failure."""
        try:
            now = datetime.now(UTC)
            expires_at = now + timedelta(seconds=ttl_seconds)
            await self._db.execute(
                "INSERT OR REPLACE INTO cache_entries (key, payload, written_at, expires_at) "
                "VALUES (?, ?, ?, ?)",
                (key, payload, now.isoformat(), expires_at.isoformat()),
            )
            await self._db.commit()
        except (aiosqlite.Error, ValueError):
            # ValueError: the connection is already closed.
            log.warning("cache_write_error", key=key, exc_info=True)

    async def remove(self, key: str) -> None:
        await self._db.execute("DELETE FROM cache_entries WHERE key = ?", (key,))
        await self._db.commit()

    async def cleanup_expired(self) -> None:
        """Delete every expired entry. Non-fatal on failure."""
        try:
            cursor = await self._db.execute(
                "DELETE FROM cache_entries WHERE expires_at <= ?",
                (datetime.now(UTC).isoformat(),),
            )
            deleted = cursor.rowcount
            await self._db.commit()
            log.info("cache_cleanup_complete", deleted=deleted)
        except (aiosqlite.Error, ValueError):
            log.warning("cache_cleanup_error", exc_info=True)


def parse_table(payload: str | None, *, key: str) -> Table | None:
    """Decode a cached payload, treating corruption as absence."""
    if payload is None:
        return None
    try:
        return Table.model_validate_json(payload)
    except ValidationError:
        log.warning("cache_payload_corrupt", key=key)
        return None


class CacheManager:
    """Primary/backup tiers over a single CacheStore.

    The primary tier expires quickly; the backup tier outlives it and is used
    to repopulate the primary without recomputing the table.
    """

    def __init__(self, store: CacheStore, settings: CacheSettings) -> None:
        self._store = store
        self._settings = settings

    @property
    def store(self) -> CacheStore:
        return self._store

    async def get_with_fallback(self, primary_key: str, backup_key: str) -> CacheOutcome:
        primary = parse_table(await self._store.get(primary_key), key=primary_key)
        if primary is not None:
            log.debug("cache_hit", tier=CacheTier.PRIMARY)
            return CacheOutcome(hit=True, table=primary, tier=CacheTier.PRIMARY)

        payload = await self._store.get(backup_key)
        backup = parse_table(payload, key=backup_key)
        if backup is not None:
            await self._put(primary_key, payload, self._settings.primary_ttl_seconds)
            log.info("cache_backup_restored", primary_key=primary_key, backup_key=backup_key)
            return CacheOutcome(hit=True, table=backup, tier=CacheTier.BACKUP)

        log.debug("cache_miss", primary_key=primary_key, backup_key=backup_key)
        return CacheOutcome.miss()

    async def get_table(self) -> CacheOutcome:
        return await self.get_with_fallback(self._settings.primary_key, self._settings.backup_key)

    async def put_table(self, table: Table) -> None:
        """Write ``table`` to both tiers. Best-effort, never raises for store failures."""
        payload = table.model_dump_json()
        await self._put(self._settings.primary_key, payload, self._settings.primary_ttl_seconds)
        await self._put(self._settings.backup_key, payload, self._settings.backup_ttl_seconds)

    async def _put(self, key: str, payload: str, ttl_seconds: int) -> None:
        # Writes are best-effort for any CacheStore.
        try:
            await self._store.put(key, payload, ttl_seconds)
        except Exception:
            log.warning("cache_write_error", key=key, exc_info=True)

    async def peek(self, tier: CacheTier) -> Table | None:
        """Read one tier without any repopulation."""
        key = self._settings.primary_key if tier is CacheTier.PRIMARY else self._settings.backup_key
        return parse_table(await self._store.get(key), key=key)

    async def clear(self) -> None:
        await self._store.remove(self._settings.primary_key)
        await self._store.remove(self._settings.backup_key)
