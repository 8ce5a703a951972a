"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: explicit PathIndexSettings, isolated from the env
    - Database Fixtures: in-memory aiosqlite engine and session
    - Tree Fixtures: node factory and a PathIndex bound to the session
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from pathindex.core.database import Base
from pathindex.core.models import Node, NodeType
from pathindex.core.services import PathIndex
from pathindex.core.settings import PathIndexSettings, clear_settings_cache
from pathindex.core.store import SQLAlchemyDocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable, Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep cached settings and stray .env files out of every test."""
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def index_settings() -> PathIndexSettings:
    """Default index settings: pages and posts are indexed."""
    return PathIndexSettings(indexable_types=["page", "post"])


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def async_engine():
    """Create async SQLite engine with all tables.

    Returns:
        SQLAlchemy async engine configured for in-memory SQLite.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def session(async_engine) -> AsyncGenerator[AsyncSession]:
    """Create async database session for testing."""
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def store(session: AsyncSession) -> SQLAlchemyDocumentStore:
    return SQLAlchemyDocumentStore(session)


# ============================================================================
# Tree Fixtures
# ============================================================================


@pytest.fixture
def make_node(session: AsyncSession) -> Callable[..., Awaitable[Node]]:
    """Factory inserting a node and flushing so its id is known.

    Example:
        root = await make_node()
        child = await make_node(parent=root, node_type="post")
        fixed = await make_node(id=12)
    """

    async def _make(
        parent: Node | int | None = None,
        node_type: str = "page",
        title: str = "",
        **kwargs,
    ) -> Node:
        parent_id = parent.id if isinstance(parent, Node) else parent
        node = Node(parent_id=parent_id, type=node_type, title=title, **kwargs)
        session.add(node)
        await session.flush()
        return node

    return _make


@pytest.fixture
async def hierarchical_types(session: AsyncSession) -> None:
    """Register 'section' as hierarchical and 'post' as flat."""
    session.add_all(
        [
            NodeType(name="section", hierarchical=True),
            NodeType(name="page", hierarchical=True),
            NodeType(name="post", hierarchical=False),
        ]
    )
    await session.flush()


@pytest.fixture
def index(session: AsyncSession, store: SQLAlchemyDocumentStore, index_settings: PathIndexSettings) -> PathIndex:
    return PathIndex(session, index_settings, store=store)


@pytest.fixture
def path_of(store: SQLAlchemyDocumentStore) -> Callable[[Node], Awaitable[str | None]]:
    """Read a node's stored path straight from the store."""

    async def _path(node: Node) -> str | None:
        return await store.get_attribute(node.id, "materialized")

    return _path
