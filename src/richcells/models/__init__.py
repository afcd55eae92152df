from __future__ import annotations

from richcells.models.cache import CacheEntry, CacheOutcome, CacheTier
from richcells.models.operations import CacheStats, ClearResult, PreloadResult
from richcells.models.styled import PLAIN, Run, SpannedText, StyledSpan, StyledText, TextStyle
from richcells.models.table import Table

__all__ = [
    # styled text
    "TextStyle",
    "PLAIN",
    "StyledText",
    "StyledSpan",
    "SpannedText",
    "Run",
    # table
    "Table",
    # cache
    "CacheTier",
    "CacheEntry",
    "CacheOutcome",
    # operations
    "ClearResult",
    "PreloadResult",
    "CacheStats",
]
