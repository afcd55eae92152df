from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class TextStyle:
    """Font attributes for a single character."""

    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str | None = None


PLAIN = TextStyle()


@runtime_checkable
class StyledText(Protocol):
    """Per-character styled text supplied by a data source.

    Implementations must be immutable for the duration of a render.
    """

    @property
    def text(self) -> str: ...

    def style_at(self, index: int) -> TextStyle: ...

    def link_at(self, index: int) -> str | None: ...


@dataclass(frozen=True, slots=True)
class Run:
    """Maximal range ``[start, end)`` sharing one link and one style."""

    start: int
    end: int
    link: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    color: str | None = None

    @property
    def attributes(self) -> tuple[str | None, bool, bool, bool, str | None]:
        return (self.link, self.bold, self.italic, self.underline, self.color)


@dataclass(frozen=True, slots=True)
class StyledSpan:
    start: int
    end: int
    style: TextStyle = PLAIN
    link: str | None = None


@dataclass(frozen=True)
class SpannedText:
    """StyledText built from non-overlapping spans; uncovered characters are plain.

    Spans are looked up by index, so later spans win where two overlap.
    """

    text: str
    spans: tuple[StyledSpan, ...] = ()
    _by_index: dict[int, StyledSpan] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for span in self.spans:
            for i in range(max(span.start, 0), min(span.end, len(self.text))):
                self._by_index[i] = span

    def style_at(self, index: int) -> TextStyle:
        self._check(index)
        span = self._by_index.get(index)
        return span.style if span is not None else PLAIN

    def link_at(self, index: int) -> str | None:
        self._check(index)
        span = self._by_index.get(index)
        return span.link if span is not None else None

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.text):
            raise IndexError(f"index {index} out of range for text of length {len(self.text)}")
