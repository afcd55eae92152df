"""Integration test fixtures.

Provides a fully wired AppState with in-memory SQLite and the shared
in-memory sheet from tests/conftest.py (source).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from richcells.config import Settings
from richcells.state import AppState, open_app_state

if TYPE_CHECKING:
    from richcells.sources import InMemorySource


@pytest.fixture()
def settings() -> Settings:
    return Settings(cache={"db_path": ":memory:"})


@pytest.fixture()
async def app_state(settings: Settings, source: InMemorySource) -> AppState:
    async with open_app_state(settings, source) as state:
        yield state
