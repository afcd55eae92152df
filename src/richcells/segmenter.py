"""Partition styled text into maximal runs of uniform link and style."""

from __future__ import annotations

from typing import TYPE_CHECKING

from richcells.errors import StyledTextError
from richcells.models.styled import Run, TextStyle

if TYPE_CHECKING:
    from richcells.models.styled import StyledText

_Attributes = tuple[str | None, bool, bool, bool, str | None]


def _attributes_at(styled: StyledText, index: int) -> _Attributes:
    """Read and normalize the (link, bold, italic, underline, color) tuple at ``index``."""
    style = styled.style_at(index)
    link = styled.link_at(index)
    if style is None:
        style = TextStyle()
    elif not isinstance(style, TextStyle):
        raise StyledTextError(f"style at index {index} is {type(style).__name__}, not TextStyle")
    if link is not None and not isinstance(link, str):
        raise StyledTextError(f"link at index {index} is {type(link).__name__}, not str")
    return (
        link or None,
        bool(style.bold),
        bool(style.italic),
        bool(style.underline),
        style.color or None,
    )


def segment(styled: StyledText) -> list[Run]:
    """Return the unique maximal run partition of ``styled``.

    Every index is read from the adapter exactly once, so the cost is linear
    in the adapter's per-index lookup cost.
    """
    n = len(styled.text)
    runs: list[Run] = []
    if n == 0:
        return runs

    i = 0
    current = _attributes_at(styled, 0)
    while i < n:
        j = i + 1
        following: _Attributes | None = None
        while j < n:
            following = _attributes_at(styled, j)
            if following != current:
                break
            j += 1
        link, bold, italic, underline, color = current
        runs.append(Run(i, j, link, bold, italic, underline, color))
        i = j
        if following is not None:
            current = following
    return runs
