"""Render run sequences into escaped, nested HTML.

Markup contract (consumed by the host page, keep stable):

* nesting is ``a > span(color) > strong > em > u > text``
* anchors always carry ``target="_blank" rel="noopener noreferrer"``
* body text escapes ``&``, ``<``, ``>``; attribute values escape ``&``, ``"``, ``<``
* newlines become ``<br>`` in a single pass over the concatenated output
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from richcells.errors import StyledTextError
from richcells.segmenter import segment

if TYPE_CHECKING:
    from collections.abc import Sequence

    from richcells.models.styled import Run, StyledText

log = structlog.get_logger()

ANCHOR_ATTRS = 'target="_blank" rel="noopener noreferrer"'

_UNSAFE_COLOR_CHARS = re.compile(r"[^#a-zA-Z0-9(),.\s]")


def escape_body(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attr(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;").replace("<", "&lt;")


def sanitize_color(color: str) -> str:
    """Strip everything that could break out of a ``style`` attribute."""
    return _UNSAFE_COLOR_CHARS.sub("", color).strip()


def anchor(href: str, body: str) -> str:
    """Wrap already-escaped ``body`` in a new-tab anchor. ``href`` must be attribute-safe."""
    return f'<a href="{href}" {ANCHOR_ATTRS}>{body}</a>'


def _render_run(run: Run, text: str) -> str:
    out = escape_body(text[run.start : run.end])
    if run.underline:
        out = f"<u>{out}</u>"
    if run.italic:
        out = f"<em>{out}</em>"
    if run.bold:
        out = f"<strong>{out}</strong>"
    if run.color:
        color = sanitize_color(run.color)
        if color:
            out = f'<span style="color:{color}">{out}</span>'
    if run.link:
        out = anchor(escape_attr(run.link), out)
    return out


def render(runs: Sequence[Run], text: str) -> str:
    n = len(text)
    parts: list[str] = []
    for run in runs:
        if not 0 <= run.start < run.end <= n:
            raise StyledTextError(f"run [{run.start}, {run.end}) outside text of length {n}")
        parts.append(_render_run(run, text))
    return "".join(parts).replace("\n", "<br>")


# ---------------------------------------------------------------------------
# Result values for the pipeline
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Converted:
    html: str


@dataclass(frozen=True, slots=True)
class ConversionFailed:
    reason: str


ConversionResult = Converted | ConversionFailed


def convert_styled(styled: StyledText) -> ConversionResult:
    """Segment and render one cell, reporting adapter failures as a value.

    Any exception raised by the adapter is confined to this cell; the caller
    decides the fallback.
    """
    try:
        text = styled.text
        return Converted(render(segment(styled), text))
    except Exception as exc:
        log.warning("cell_conversion_failed", error=str(exc), error_type=type(exc).__name__)
        return ConversionFailed(f"{type(exc).__name__}: {exc}")
