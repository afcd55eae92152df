"""Header handling: logical column resolution and the computed HTML column."""

from __future__ import annotations

from typing import TYPE_CHECKING

from richcells.config import LOGICAL_FIELDS

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

ColumnMap = dict[str, int | None]


def _normalize(name: str) -> str:
    return name.strip().casefold()


def find_column(header: Sequence[str], names: Sequence[str]) -> int | None:
    """Index of the first header cell matching any of ``names``, tried in order."""
    normalized = [_normalize(h) for h in header]
    for name in names:
        wanted = _normalize(name)
        if wanted in normalized:
            return normalized.index(wanted)
    return None


def resolve_columns(
    header: Sequence[str],
    aliases: Mapping[str, Sequence[str]],
    fallback_index: Mapping[str, int],
) -> ColumnMap:
    """Map each logical field to a column index.

    Alias matches win; otherwise the field's positional fallback is used when
    it lies inside the header. Fields with neither map to ``None``.
    """
    width = len(header)
    resolved: ColumnMap = {}
    for field in LOGICAL_FIELDS:
        index = find_column(header, aliases.get(field, ()))
        if index is None:
            fallback = fallback_index.get(field)
            if fallback is not None and 0 <= fallback < width:
                index = fallback
        resolved[field] = index
    return resolved


def with_computed_column(header: Sequence[str], name: str) -> tuple[list[str], int]:
    """Return a new header containing ``name`` exactly once, and its index.

    An existing case-insensitive match is reused in place, so re-running the
    pipeline over its own output never adds a second computed column.
    """
    new_header = list(header)
    existing = find_column(new_header, [name])
    if existing is not None:
        return new_header, existing
    new_header.append(name)
    return new_header, len(new_header) - 1
