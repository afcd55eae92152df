"""Process-wide wiring: one cache store, one manager, one pipeline."""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from richcells.cache import CacheManager, SqliteCacheStore
from richcells.pipeline import DataPipeline

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from richcells.config import Settings
    from richcells.sources import DataSource

log = structlog.get_logger()


@dataclass
class AppState:
    settings: Settings
    store: SqliteCacheStore
    cache: CacheManager
    pipeline: DataPipeline


@asynccontextmanager
async def open_app_state(settings: Settings, source: DataSource) -> AsyncIterator[AppState]:
    """Connect the SQLite cache, create its schema, and wire the pipeline.

    ``db_path`` may be ``":memory:"``; otherwise missing parent directories
    are created.
    """
    db_path = settings.cache.db_path
    if db_path != ":memory:":
        path = Path(db_path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        db_path = str(path)

    async with aiosqlite.connect(db_path) as db:
        store = SqliteCacheStore(db)
        await store.init_db()
        await store.cleanup_expired()
        cache = CacheManager(store, settings.cache)
        log.info("app_state_ready", db_path=db_path)
        yield AppState(
            settings=settings,
            store=store,
            cache=cache,
            pipeline=DataPipeline(source, cache, settings),
        )
