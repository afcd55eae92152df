"""Build the output table: resolve columns, convert content cells, write through the cache.

Rows are converted in batches with a cooperative ``asyncio.sleep(0)`` between
batches so that long sheets do not monopolise the event loop. Concurrent
callers that all miss the cache each rebuild the table independently; there
is no single-flight coordination.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from typing import TYPE_CHECKING

import structlog

from richcells.columns import resolve_columns, with_computed_column
from richcells.linkify import linkify
from richcells.models.table import Table
from richcells.renderer import Converted, convert_styled

if TYPE_CHECKING:
    from collections.abc import Sequence

    from richcells.cache import CacheManager
    from richcells.config import Settings
    from richcells.models.styled import StyledText
    from richcells.sources import DataSource

log = structlog.get_logger()


def _cell_str(value: object) -> str:
    return "" if value is None else str(value)


def convert_cell(
    display: str, styled: StyledText | None, counts: Counter[str] | None = None
) -> str:
    """HTML for one content cell.

    Blank cells produce an empty string without rendering. Styled cells are
    rendered run by run; when there is no styled value, or rendering fails,
    the display string is linkified instead.
    """
    if counts is None:
        counts = Counter()
    if not display.strip():
        counts["blank"] += 1
        return ""
    if styled is not None:
        result = convert_styled(styled)
        if isinstance(result, Converted):
            counts["styled"] += 1
            return result.html
        counts["fallback"] += 1
    else:
        counts["plain"] += 1
    return linkify(display)


def pad_row(cells: Sequence[object], width: int) -> list[str]:
    row = [_cell_str(c) for c in cells[:width]]
    row.extend([""] * (width - len(row)))
    return row


class DataPipeline:
    def __init__(self, source: DataSource, cache: CacheManager, settings: Settings) -> None:
        self._source = source
        self._cache = cache
        self._settings = settings

    async def get_table(self) -> Table:
        """Cached table if either tier holds one, otherwise a freshly built table."""
        outcome = await self._cache.get_table()
        if outcome.hit and outcome.table is not None:
            return outcome.table
        return await self.build_table()

    async def build_table(self) -> Table:
        """Rebuild the table from the source and write it to both cache tiers.

        A source that fails, or has no header or no data rows, yields an empty
        table, which is returned but not cached.
        """
        try:
            values = await self._source.read_values()
        except Exception:
            log.error("source_read_failed", exc_info=True)
            return Table()

        if len(values) < 2 or not values[0]:
            log.warning("source_empty", rows=len(values))
            return Table()

        columns_cfg = self._settings.columns
        header = [_cell_str(c) for c in values[0]]
        columns = resolve_columns(header, columns_cfg.aliases, columns_cfg.fallback_index)
        out_header, computed_index = with_computed_column(header, columns_cfg.computed_column)
        content_index = columns["content"]
        log.debug(
            "columns_resolved",
            columns=columns,
            computed_index=computed_index,
            reused=computed_index < len(header),
        )

        styled: list[StyledText | None] = []
        if content_index is not None:
            try:
                styled = await self._source.read_styled(content_index)
            except Exception:
                # Plain display values still render through the linkifier.
                log.warning(
                    "source_styled_read_failed", column=content_index, exc_info=True
                )

        data_rows = values[1:]
        width = len(header)
        batch_size = self._settings.pipeline.batch_size
        counts: Counter[str] = Counter()
        rows: list[list[str]] = []

        for batch_start in range(0, len(data_rows), batch_size):
            if batch_start:
                await asyncio.sleep(0)
            batch = data_rows[batch_start : batch_start + batch_size]
            for offset, cells in enumerate(batch):
                index = batch_start + offset
                row = pad_row(cells, width)
                display = row[content_index] if content_index is not None else ""
                cell_styled = styled[index] if index < len(styled) else None
                html = convert_cell(display, cell_styled, counts)
                if computed_index < width:
                    row[computed_index] = html
                else:
                    row.append(html)
                rows.append(row)

        table = Table(header=out_header, rows=rows)
        await self._cache.put_table(table)
        log.info(
            "pipeline_complete",
            rows=table.row_count,
            columns=table.column_count,
            styled=counts["styled"],
            plain=counts["plain"],
            fallback=counts["fallback"],
            blank=counts["blank"],
        )
        return table
