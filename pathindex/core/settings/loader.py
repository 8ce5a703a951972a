"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the
process. Entry points (CLI, host integration) use these; the core services
receive settings through their constructors.

Testing:
    In tests, clear the cache to force reload:
    get_index_settings.cache_clear()

    Or construct settings directly:
    settings = PathIndexSettings(indexable_types=["page"])
"""

from __future__ import annotations

from functools import lru_cache

from .database import DatabaseSettings
from .index import PathIndexSettings
from .logs import LoggingSettings


@lru_cache(maxsize=1)
def get_index_settings() -> PathIndexSettings:
    """Get cached path index settings.

    Returns:
        Validated and frozen PathIndexSettings instance.
    """
    return PathIndexSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> DatabaseSettings:
    """Get cached database settings.

    Returns:
        Validated and frozen DatabaseSettings instance.
    """
    return DatabaseSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings.

    Returns:
        Validated and frozen LoggingSettings instance.
    """
    return LoggingSettings()


def clear_settings_cache() -> None:
    """Drop every cached settings instance."""
    get_index_settings.cache_clear()
    get_db_settings.cache_clear()
    get_logging_settings.cache_clear()


__all__ = [
    "clear_settings_cache",
    "get_db_settings",
    "get_index_settings",
    "get_logging_settings",
]
