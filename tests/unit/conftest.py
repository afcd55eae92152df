"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

import aiosqlite
import pytest

from richcells.cache import CacheManager, SqliteCacheStore
from richcells.config import CacheSettings


@pytest.fixture()
async def store():
    """In-memory SQLite cache store for unit tests."""
    async with aiosqlite.connect(":memory:") as db:
        s = SqliteCacheStore(db)
        await s.init_db()
        yield s


@pytest.fixture()
def cache_settings() -> CacheSettings:
    return CacheSettings(db_path=":memory:", primary_ttl_seconds=60, backup_ttl_seconds=3600)


@pytest.fixture()
def manager(store: SqliteCacheStore, cache_settings: CacheSettings) -> CacheManager:
    return CacheManager(store, cache_settings)
