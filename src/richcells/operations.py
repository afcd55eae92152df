"""Entry points called by the host page and its menu actions.

``clear_caches``, ``cache_stats`` and ``preload`` are wired to user-facing
controls: they never raise, and report failures through ``success=False``.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from richcells.models.cache import CacheTier
from richcells.models.operations import CacheStats, ClearResult, PreloadResult

if TYPE_CHECKING:
    from richcells.models.table import Table
    from richcells.state import AppState

log = structlog.get_logger()


async def get_table(state: AppState) -> Table:
    return await state.pipeline.get_table()


async def clear_caches(state: AppState) -> ClearResult:
    try:
        await state.cache.clear()
    except Exception as exc:
        log.error("cache_clear_failed", exc_info=True)
        return ClearResult(success=False, message=f"Failed to clear caches: {exc}")
    log.info("cache_cleared")
    return ClearResult(success=True, message="Primary and backup caches cleared.")


async def cache_stats(state: AppState) -> CacheStats:
    cache_cfg = state.settings.cache
    timestamp = datetime.now(UTC).isoformat()
    try:
        primary = await state.cache.peek(CacheTier.PRIMARY)
        backup = await state.cache.peek(CacheTier.BACKUP)
    except Exception as exc:
        log.error("cache_stats_failed", exc_info=True)
        return CacheStats(
            success=False,
            message=f"Failed to read cache stats: {exc}",
            timestamp=timestamp,
            primary_ttl_seconds=cache_cfg.primary_ttl_seconds,
            backup_ttl_seconds=cache_cfg.backup_ttl_seconds,
        )

    table = primary if primary is not None else backup
    return CacheStats(
        primary_present=primary is not None,
        backup_present=backup is not None,
        row_count=table.row_count if table is not None else 0,
        column_count=table.column_count if table is not None else 0,
        timestamp=timestamp,
        primary_ttl_seconds=cache_cfg.primary_ttl_seconds,
        backup_ttl_seconds=cache_cfg.backup_ttl_seconds,
    )


async def preload(state: AppState) -> PreloadResult:
    started = time.perf_counter()
    try:
        table = await state.pipeline.build_table()
    except Exception as exc:
        log.error("preload_failed", exc_info=True)
        return PreloadResult(
            success=False,
            message=f"Preload failed: {exc}",
            duration_ms=int((time.perf_counter() - started) * 1000),
        )

    duration_ms = int((time.perf_counter() - started) * 1000)
    if table.is_empty:
        return PreloadResult(
            success=False,
            message="Data source returned no rows; caches were not populated.",
            duration_ms=duration_ms,
        )
    log.info("preload_complete", rows=table.row_count, duration_ms=duration_ms)
    return PreloadResult(
        success=True,
        message=f"Cached {table.row_count} rows.",
        duration_ms=duration_ms,
    )
