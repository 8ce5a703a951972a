"""Async engine and session factories built from DatabaseSettings."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pathindex.core import models as _models  # noqa: F401  (registers tables)
from pathindex.core.database import Base
from pathindex.core.settings import DatabaseSettings, get_db_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn: Any, connection_record: Any) -> None:
    """SQLite ignores ON DELETE rules unless asked per connection."""
    _ = connection_record
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an async engine for the configured DSN."""
    db_settings = settings or get_db_settings()
    engine = create_async_engine(
        db_settings.dsn,
        echo=db_settings.echo,
        pool_pre_ping=db_settings.pool_pre_ping,
    )
    if db_settings.is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    logger.debug("Database engine created", extra={"dialect": engine.dialect.name})
    return engine


def create_session_factory(
    engine: AsyncEngine,
    settings: DatabaseSettings | None = None,
) -> async_sessionmaker[AsyncSession]:
    db_settings = settings or get_db_settings()
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=db_settings.expire_on_commit,
        autoflush=False,
    )


@asynccontextmanager
async def session_scope(
    factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession]:
    """Session that commits on success and rolls back on error.

    Example:
        async with session_scope(factory) as session:
            await PathIndex(session).on_node_saved(42)
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_database(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ensured", extra={"tables": sorted(Base.metadata.tables)})


async def close_database(engine: AsyncEngine) -> None:
    await engine.dispose()


__all__ = [
    "close_database",
    "create_engine",
    "create_session_factory",
    "init_database",
    "session_scope",
]
