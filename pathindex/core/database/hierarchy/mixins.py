"""Mixins for models whose materialized path lives in a key/value meta table.

The path is not a column on the model itself: it is one row of the model's
meta table (``__path_meta__``) under ``__path_key__``. Navigation methods
join that row in and use prefix matching (``LIKE '<path>%'``) and a slash
count for depth, so they work on SQLite and PostgreSQL alike.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import Select, and_, func, select

from pathindex.core.database.hierarchy.path import SEPARATOR, MaterializedPath

if TYPE_CHECKING:
    from typing import Self

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement


def path_depth(column: Any) -> ColumnElement[int]:
    """SQL expression for the depth of a stored path (``/1/2/`` -> 2)."""
    return (
        func.length(column) - func.length(func.replace(column, SEPARATOR, "")) - 1
    )


class HierarchicalMixin:
    """Tree navigation for models indexed by materialized path.

    The meta model must have ``node_id``, ``meta_key`` and ``meta_value``
    columns. The owning model needs an ``id`` primary key.

    Example:
        >>> class Node(Base, IntegerPKMixin, HierarchicalMixin):
        ...     __tablename__ = "nodes"
        ...     __path_meta__ = NodeMeta
        ...     __path_key__ = "materialized"
        >>>
        >>> node = await session.get(Node, 9)
        >>> path = await node.get_path(session)
        >>> ancestors = await node.get_ancestors(session)
        >>> subtree = await node.get_descendants(session, max_depth=2)
        >>> roots = await Node.get_roots(session)

    Note:
        Nodes without a stored path are invisible to these queries until
        they are saved or lazily materialized.
    """

    __allow_unmapped__ = True

    __path_meta__: ClassVar[Any]
    __path_key__: ClassVar[str] = "materialized"

    @classmethod
    def _with_path(cls, *entities: Any) -> Select[Any]:
        """SELECT joined to the path meta row."""
        meta = cls.__path_meta__
        return select(*(entities or (cls,))).select_from(cls).join(
            meta,
            and_(meta.node_id == cls.id, meta.meta_key == cls.__path_key__),  # type: ignore[attr-defined]
        )

    @classmethod
    def _path_column(cls) -> Any:
        return cls.__path_meta__.meta_value

    async def get_path(self, session: AsyncSession) -> MaterializedPath:
        """Stored path of this node; empty when none is stored.

        Example:
            >>> str(await node.get_path(session))
            '/1/4/9/'
        """
        meta = self.__path_meta__
        stmt = (
            select(meta.meta_value)
            .where(meta.node_id == self.id, meta.meta_key == self.__path_key__)  # type: ignore[attr-defined]
            .order_by(meta.id)
            .limit(1)
        )
        value = (await session.execute(stmt)).scalar_one_or_none()
        return MaterializedPath(value or "")

    async def get_parent(self, session: AsyncSession) -> Self | None:
        """Parent according to the stored path, None for roots."""
        path = await self.get_path(session)
        if path.parent is None:
            return None
        return await session.get(type(self), path.parent.node_id)

    async def get_children(self, session: AsyncSession) -> list[Self]:
        """Nodes exactly one level below this one, ordered by path."""
        path = await self.get_path(session)
        if not path:
            return []

        path_col = self._path_column()
        stmt = (
            self._with_path()
            .where(path_col.like(path.like_pattern()))
            .where(path_depth(path_col) == path.depth + 1)
            .order_by(path_col)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_ancestors(
        self,
        session: AsyncSession,
        *,
        include_self: bool = False,
    ) -> list[Self]:
        """Ancestors ordered from root to parent (optionally self).

        Answered from the path alone: one ``id IN (...)`` query, no walk.
        """
        path = await self.get_path(session)
        ids = path.ids if include_self else path.ancestor_ids
        return await type(self).get_by_ids(session, ids)

    async def get_descendants(
        self,
        session: AsyncSession,
        *,
        include_self: bool = False,
        max_depth: int | None = None,
    ) -> list[Self]:
        """All nodes below this one, ordered by path.

        Args:
            session: Async database session
            include_self: Include this node at the start of the list
            max_depth: Levels below this node to include (None for unlimited)
        """
        path = await self.get_path(session)
        if not path:
            return []
        return await type(self).get_descendants_of(
            session, path, include_root=include_self, max_depth=max_depth
        )

    async def get_subtree_count(self, session: AsyncSession, *, include_self: bool = False) -> int:
        """Number of descendants, counted in SQL."""
        path = await self.get_path(session)
        if not path:
            return 0

        path_col = self._path_column()
        stmt = self._with_path(func.count()).where(path_col.like(path.like_pattern()))
        if not include_self:
            stmt = stmt.where(path_col != str(path))
        result = await session.execute(stmt)
        return result.scalar() or 0

    @classmethod
    async def get_by_ids(cls, session: AsyncSession, ids: list[int]) -> list[Self]:
        """Load nodes by id, keeping the order of ``ids``. Missing ids are skipped."""
        if not ids:
            return []
        stmt = select(cls).where(cls.id.in_(ids))  # type: ignore[attr-defined]
        found = {node.id: node for node in (await session.execute(stmt)).scalars()}
        return [found[i] for i in ids if i in found]

    @classmethod
    async def get_roots(cls, session: AsyncSession) -> list[Self]:
        """Nodes whose stored path has depth 1."""
        path_col = cls._path_column()
        stmt = cls._with_path().where(path_depth(path_col) == 1).order_by(cls.id)  # type: ignore[attr-defined]
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def get_by_path(cls, session: AsyncSession, path: str | MaterializedPath) -> Self | None:
        """Node stored under exactly this path."""
        stmt = cls._with_path().where(cls._path_column() == str(path)).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @classmethod
    async def get_descendants_of(
        cls,
        session: AsyncSession,
        path: str | MaterializedPath,
        *,
        include_root: bool = False,
        max_depth: int | None = None,
    ) -> list[Self]:
        """All descendants of a path (class method version).

        Useful when you have a path string but not an instance.
        """
        root_path = MaterializedPath(path)
        if not root_path:
            return []

        path_col = cls._path_column()
        stmt = cls._with_path().where(path_col.like(root_path.like_pattern()))
        if not include_root:
            stmt = stmt.where(path_col != str(root_path))
        if max_depth is not None:
            stmt = stmt.where(path_depth(path_col) <= root_path.depth + max_depth)

        stmt = stmt.order_by(path_col)
        result = await session.execute(stmt)
        return list(result.scalars().all())


__all__ = [
    "HierarchicalMixin",
    "path_depth",
]
