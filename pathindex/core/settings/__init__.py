"""Pydantic Settings v2 configuration, split by concern.

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .database import DatabaseSettings
from .index import PathIndexSettings
from .loader import (
    clear_settings_cache,
    get_db_settings,
    get_index_settings,
    get_logging_settings,
)
from .logs import LoggingSettings, LogLevel

__all__ = [
    "DatabaseSettings",
    "LogLevel",
    "LoggingSettings",
    "PathIndexSettings",
    "clear_settings_cache",
    "get_db_settings",
    "get_index_settings",
    "get_logging_settings",
]
