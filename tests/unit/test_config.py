"""Unit tests for configuration defaults and validation."""

from __future__ import annotations

import platformdirs
import pytest
from pydantic import ValidationError

from richcells.config import (
    _DEFAULT_DATA_DIR,
    _DEFAULT_DB_PATH,
    LOGICAL_FIELDS,
    CacheSettings,
    ColumnSettings,
    Settings,
)


class TestPlatformDefaults:
    """Verify config defaults use platformdirs instead of hardcoded Unix paths."""

    def test_default_data_dir_matches_platformdirs(self) -> None:
        expected = platformdirs.user_data_dir("richcells")
        assert expected == _DEFAULT_DATA_DIR

    def test_default_db_path_under_data_dir(self) -> None:
        assert _DEFAULT_DB_PATH.startswith(_DEFAULT_DATA_DIR)
        assert _DEFAULT_DB_PATH.endswith("cache.db")


class TestDefaults:
    def test_primary_ttl_shorter_than_backup(self) -> None:
        settings = CacheSettings()
        assert settings.primary_ttl_seconds < settings.backup_ttl_seconds

    def test_tiers_use_distinct_keys(self) -> None:
        settings = CacheSettings()
        assert settings.primary_key != settings.backup_key

    def test_every_logical_field_has_aliases_and_fallback(self) -> None:
        columns = ColumnSettings()
        assert set(columns.aliases) == set(LOGICAL_FIELDS)
        assert set(columns.fallback_index) == set(LOGICAL_FIELDS)

    def test_env_overrides_nested_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RICHCELLS__PIPELINE__BATCH_SIZE", "7")
        assert Settings().pipeline.batch_size == 7


class TestConfigValidation:
    def test_wrong_type_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(pipeline={"batch_size": "not-a-number"})  # type: ignore[arg-type]

    def test_zero_batch_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(pipeline={"batch_size": 0})  # type: ignore[arg-type]

    def test_unknown_top_level_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(completely_unknown_field="oops")  # type: ignore[call-arg]

    def test_data_dir_is_not_a_setting(self) -> None:
        """The database location is configured only through cache.db_path."""
        with pytest.raises(ValidationError):
            Settings(data_dir="/tmp/custom-richcells-data")  # type: ignore[call-arg]

    def test_unknown_nested_field_raises_validation_error(self) -> None:
        """A typo like 'primary_ttl' is caught rather than silently ignored."""
        with pytest.raises(ValidationError):
            CacheSettings(primary_ttl=5)  # type: ignore[call-arg]

    def test_unknown_logical_field_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ColumnSettings(aliases={"summary": ["Summary"]})

    def test_blank_computed_column_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ColumnSettings(computed_column="   ")
