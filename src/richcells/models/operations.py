from __future__ import annotations

from pydantic import BaseModel


class ClearResult(BaseModel):
    success: bool
    message: str


class PreloadResult(BaseModel):
    success: bool
    message: str
    duration_ms: int = 0


class CacheStats(BaseModel):
    success: bool = True
    message: str = ""
    primary_present: bool = False
    backup_present: bool = False
    row_count: int = 0
    column_count: int = 0
    timestamp: str  # ISO-8601, UTC
    primary_ttl_seconds: int
    backup_ttl_seconds: int
