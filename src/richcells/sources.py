"""Data source interface and an in-memory implementation.

The pipeline only needs two reads from a source: the display values of the
whole sheet (header row first) and the styled values of one column.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from richcells.models.styled import StyledText


class DataSource(Protocol):
    """Any exception raised by a read marks the source as unavailable for that build.

    Implementations may raise ``DataSourceError`` to say so explicitly.
    """

    async def read_values(self) -> list[list[str]]:
        """All rows as display strings, the header row first."""
        ...

    async def read_styled(self, column: int) -> list[StyledText | None]:
        """Styled values of ``column`` for every data row (header excluded)."""
        ...


class InMemorySource:
    """DataSource over rows held in memory.

    ``styled`` maps ``(data_row_index, column)`` to a StyledText value.
    """

    def __init__(
        self,
        values: Sequence[Sequence[str]],
        styled: dict[tuple[int, int], StyledText] | None = None,
    ) -> None:
        self._values = [list(row) for row in values]
        self._styled = dict(styled or {})

    async def read_values(self) -> list[list[str]]:
        return [list(row) for row in self._values]

    async def read_styled(self, column: int) -> list[StyledText | None]:
        return [self._styled.get((i, column)) for i in range(max(len(self._values) - 1, 0))]
