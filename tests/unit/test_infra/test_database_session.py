"""Tests for engine creation, session scoping and schema setup."""

from __future__ import annotations

import pytest
from sqlalchemy import func, inspect, select, text

from pathindex.core.models import Node, NodeMeta
from pathindex.core.settings import DatabaseSettings
from pathindex.infra.database import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    session_scope,
)


@pytest.fixture
def db_settings(tmp_path) -> DatabaseSettings:
    return DatabaseSettings(dsn=f"sqlite+aiosqlite:///{tmp_path / 'session.db'}")


@pytest.fixture
async def file_engine(db_settings):
    engine = create_engine(db_settings)
    await init_database(engine)
    yield engine
    await close_database(engine)


@pytest.fixture
def factory(file_engine, db_settings):
    return create_session_factory(file_engine, db_settings)


async def _count_nodes(factory) -> int:
    async with factory() as session:
        return await session.scalar(select(func.count()).select_from(Node))


@pytest.mark.asyncio
async def test_init_database_creates_tables(file_engine):
    async with file_engine.connect() as conn:
        tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {"nodes", "node_meta", "node_types"} <= set(tables)


@pytest.mark.asyncio
async def test_session_scope_commits(factory):
    async with session_scope(factory) as session:
        session.add(Node(title="kept"))

    assert await _count_nodes(factory) == 1


@pytest.mark.asyncio
async def test_session_scope_rolls_back_on_error(factory):
    with pytest.raises(RuntimeError):
        async with session_scope(factory) as session:
            session.add(Node(title="dropped"))
            await session.flush()
            raise RuntimeError("save failed")

    assert await _count_nodes(factory) == 0


@pytest.mark.asyncio
async def test_sqlite_foreign_keys_are_enforced(factory):
    async with session_scope(factory) as session:
        assert (await session.execute(text("PRAGMA foreign_keys"))).scalar() == 1

        node = Node(title="with meta")
        session.add(node)
        await session.flush()
        session.add(NodeMeta(node_id=node.id, meta_key="materialized", meta_value=f"/{node.id}/"))
        await session.flush()

        await session.execute(text("DELETE FROM nodes"))
        remaining = await session.scalar(select(func.count()).select_from(NodeMeta))

    assert remaining == 0


def test_session_factory_settings(db_settings):
    engine = create_engine(db_settings)
    factory = create_session_factory(engine, db_settings)

    assert factory.kw["expire_on_commit"] is False
    assert factory.kw["autoflush"] is False
    assert engine.dialect.name == "sqlite"
