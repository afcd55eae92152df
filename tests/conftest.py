"""Shared fixtures: a small sheet with styled and plain content cells."""

from __future__ import annotations

import pytest

from richcells.models.styled import SpannedText, StyledSpan, TextStyle
from richcells.sources import InMemorySource

HEADER = ["Timestamp", "Title", "Post Content", "Tags", "Author", "Published", "Notes"]


@pytest.fixture()
def sheet_values() -> list[list[str]]:
    return [
        HEADER,
        ["2024-01-02", "Launch", "Read the docs", "news", "ana", "yes", ""],
        ["2024-01-03", "Contact", "Mail me@example.com", "misc", "ben", "no", ""],
        ["2024-01-04", "Empty", "   ", "misc", "cy", "no", "blank"],
        ["2024-01-05", "Short row", "Visit www.example.org"],
    ]


@pytest.fixture()
def styled_docs() -> SpannedText:
    return SpannedText(
        "Read the docs",
        (StyledSpan(9, 13, TextStyle(bold=True), link="https://docs.example.com"),),
    )


@pytest.fixture()
def source(sheet_values: list[list[str]], styled_docs: SpannedText) -> InMemorySource:
    # Content is column 2; only the first data row carries styling.
    return InMemorySource(sheet_values, {(0, 2): styled_docs})
