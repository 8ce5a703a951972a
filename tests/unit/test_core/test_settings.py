"""Tests for environment driven settings and the cached loaders."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from pathindex.core.settings import (
    DatabaseSettings,
    LoggingSettings,
    PathIndexSettings,
    clear_settings_cache,
    get_db_settings,
    get_index_settings,
    get_logging_settings,
)


class TestPathIndexSettings:
    def test_defaults(self):
        settings = PathIndexSettings()

        assert settings.indexable_types == []
        assert settings.search_field == "post_parent__in"
        assert settings.meta_key == "materialized"
        assert settings.admin_bypass is True
        assert settings.max_depth == 256
        assert settings.uses_hierarchical_types

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("page,section", ["page", "section"]),
            (" page , ", ["page"]),
            ('["a", "b"]', ["a", "b"]),
            ("[]", []),
        ],
    )
    def test_indexable_types_from_env(self, monkeypatch, raw, expected):
        monkeypatch.setenv("PATHINDEX_INDEXABLE_TYPES", raw)

        assert PathIndexSettings().indexable_types == expected

    def test_empty_list_means_hierarchical_types(self):
        assert PathIndexSettings(indexable_types=[]).uses_hierarchical_types

    def test_scalar_values_from_env(self, monkeypatch):
        monkeypatch.setenv("PATHINDEX_ADMIN_BYPASS", "false")
        monkeypatch.setenv("PATHINDEX_META_KEY", "path")
        monkeypatch.setenv("PATHINDEX_MAX_DEPTH", "32")

        settings = PathIndexSettings()

        assert settings.admin_bypass is False
        assert settings.meta_key == "path"
        assert settings.max_depth == 32

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("PATHINDEX_SEARCH_FIELD=ancestor_in\n")

        assert PathIndexSettings().search_field == "ancestor_in"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            PathIndexSettings(meta_key="")
        with pytest.raises(ValidationError):
            PathIndexSettings(max_depth=0)

    def test_frozen(self):
        settings = PathIndexSettings()
        with pytest.raises(ValidationError):
            settings.meta_key = "other"


class TestOtherSettings:
    def test_database_dsn(self, monkeypatch):
        assert DatabaseSettings().is_sqlite

        monkeypatch.setenv("DB_DSN", "postgresql+psycopg://u:p@localhost/cms")
        assert not DatabaseSettings().is_sqlite

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = LoggingSettings()

        assert settings.level == "DEBUG"
        assert settings.level_int == logging.DEBUG

    def test_logging_kwargs(self):
        kwargs = LoggingSettings(json_logs=True).to_logging_kwargs()

        assert kwargs["log_level"] == "INFO"
        assert kwargs["json_logs"] is True
        assert kwargs["service_name"] == "pathindex"


def test_loaders_cache_until_cleared(monkeypatch):
    first = get_index_settings()
    assert get_index_settings() is first
    assert get_db_settings() is get_db_settings()
    assert get_logging_settings() is get_logging_settings()

    monkeypatch.setenv("PATHINDEX_META_KEY", "path")
    assert get_index_settings().meta_key == "materialized"

    clear_settings_cache()
    assert get_index_settings().meta_key == "path"
