from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel

from richcells.models.table import Table


class CacheTier(StrEnum):
    PRIMARY = "primary"
    BACKUP = "backup"


class CacheEntry(BaseModel):
    """A single stored payload and its lifetime."""

    key: str
    payload: str  # Serialized Table JSON
    written_at: datetime
    expires_at: datetime


class CacheOutcome(BaseModel):
    hit: bool
    table: Table | None = None
    tier: CacheTier | None = None  # Tier the hit was read from

    @classmethod
    def miss(cls) -> CacheOutcome:
        return cls(hit=False)
