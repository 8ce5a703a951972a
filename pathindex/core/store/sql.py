"""SQLAlchemy implementation of the document store.

Works on one ``AsyncSession`` and never commits: the caller owns the
transaction, so a save's bulk rewrite and self upsert land together when
the session commits.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy import String, func, insert, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from pathindex.core.exceptions import StoreError, StoreReadError, StoreWriteError
from pathindex.core.models import Node, NodeMeta, NodeType
from pathindex.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)

DEFAULT_MAX_DEPTH = 256


@contextmanager
def _translate_errors(
    error_cls: type[StoreError],
    operation: str,
    node_id: int | None = None,
) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as store errors."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception(
            "Document store operation failed",
            extra={"operation": operation, "node_id": node_id},
        )
        raise error_cls(operation, node_id=node_id, reason=str(exc)) from exc


class SQLAlchemyDocumentStore:
    """Document store over the ``nodes``, ``node_meta`` and ``node_types`` tables.

    Example:
        async with session_scope(factory) as session:
            store = SQLAlchemyDocumentStore(session)
            chain = await store.get_ancestors(42)
    """

    def __init__(self, session: AsyncSession, *, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.session = session
        self.max_depth = max_depth

    async def get_ancestors(self, node_id: int) -> list[int]:
        """Walk parent pointers with one recursive CTE.

        The walk is cut at ``max_depth`` levels. A chain that stops at a
        missing row keeps the ancestors resolved so far; if the direct
        parent is missing the node counts as a root. A cycle yields an
        empty chain.
        """
        chain = (
            select(
                Node.id.label("id"),
                Node.parent_id.label("parent_id"),
                literal(0).label("depth"),
            )
            .where(Node.id == node_id)
            .cte("chain", recursive=True)
        )
        parent = aliased(Node)
        chain = chain.union_all(
            select(parent.id, parent.parent_id, chain.c.depth + 1)
            .join(chain, parent.id == chain.c.parent_id)
            .where(chain.c.depth < self.max_depth)
        )
        stmt = select(chain.c.id, chain.c.parent_id).order_by(chain.c.depth)

        with _translate_errors(StoreReadError, "get_ancestors", node_id):
            rows = (await self.session.execute(stmt)).all()

        if not rows:
            return []

        ancestors: list[int] = []
        seen = {node_id}
        next_parent = rows[0].parent_id
        for row in rows[1:]:
            if row.id in seen:
                logger.warning(
                    "Cyclic parent chain, treating node as root",
                    extra={"node_id": node_id, "cycle_at": row.id},
                )
                return []
            seen.add(row.id)
            ancestors.append(row.id)
            next_parent = row.parent_id
            if next_parent is None:
                break

        if next_parent is not None:
            if len(rows) > self.max_depth:
                logger.warning(
                    "Ancestor chain truncated at max depth",
                    extra={"node_id": node_id, "max_depth": self.max_depth},
                )
            else:
                _lazy.debug(lambda: f"broken parent chain for {node_id}: missing {next_parent}")

        ancestors.reverse()
        return ancestors

    async def get_attribute(self, node_id: int, key: str) -> str | None:
        stmt = (
            select(NodeMeta.meta_value)
            .where(NodeMeta.node_id == node_id, NodeMeta.meta_key == key)
            .order_by(NodeMeta.id)
            .limit(1)
        )
        with _translate_errors(StoreReadError, "get_attribute", node_id):
            return (await self.session.execute(stmt)).scalar_one_or_none()

    async def set_attribute(
        self,
        node_id: int,
        key: str,
        value: str,
        *,
        unique_only: bool = True,
    ) -> None:
        """Update every existing row for the key, insert when there is none.

        The UPDATE and INSERT are two statements, so two sessions repairing
        the same node lazily can both see zero rows and both insert. Reads
        take the lowest row id, and both this method and
        :meth:`bulk_replace_prefix` rewrite every matching row, so duplicates
        stay in step rather than diverging.
        """
        with _translate_errors(StoreWriteError, "set_attribute", node_id):
            if unique_only:
                result = await self.session.execute(
                    update(NodeMeta)
                    .where(NodeMeta.node_id == node_id, NodeMeta.meta_key == key)
                    .values(meta_value=value)
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount:
                    _lazy.debug(lambda: f"updated {key}={value} on {node_id}")
                    return

            await self.session.execute(
                insert(NodeMeta).values(node_id=node_id, meta_key=key, meta_value=value)
            )
            _lazy.debug(lambda: f"inserted {key}={value} on {node_id}")

    async def bulk_replace_prefix(
        self,
        key: str,
        old_prefix: str,
        new_prefix: str,
        *,
        exclude_node_id: int | None = None,
    ) -> int:
        """Single ``UPDATE ... SET value = new || substr(value, len(old) + 1)``.

        Only the leading occurrence is replaced, so an id repeated deeper in
        a path is left alone.
        """
        stmt = (
            update(NodeMeta)
            .where(
                NodeMeta.meta_key == key,
                NodeMeta.meta_value.startswith(old_prefix, autoescape=True),
            )
            .values(
                meta_value=literal(new_prefix, String).concat(
                    func.substr(NodeMeta.meta_value, len(old_prefix) + 1)
                )
            )
            .execution_options(synchronize_session=False)
        )
        if exclude_node_id is not None:
            stmt = stmt.where(NodeMeta.node_id != exclude_node_id)

        with _translate_errors(StoreWriteError, "bulk_replace_prefix", exclude_node_id):
            result = await self.session.execute(stmt)

        count = result.rowcount or 0
        _lazy.debug(lambda: f"rewrote {count} {key} values {old_prefix} -> {new_prefix}")
        return count

    async def get_node_type(self, node_id: int) -> str | None:
        stmt = select(Node.type).where(Node.id == node_id)
        with _translate_errors(StoreReadError, "get_node_type", node_id):
            return (await self.session.execute(stmt)).scalar_one_or_none()

    async def list_hierarchical_types(self) -> set[str]:
        stmt = select(NodeType.name).where(NodeType.hierarchical.is_(True))
        with _translate_errors(StoreReadError, "list_hierarchical_types"):
            return set((await self.session.execute(stmt)).scalars().all())

    async def list_node_ids(self, types: Iterable[str] | None = None) -> list[int]:
        stmt = select(Node.id).order_by(Node.id)
        if types is not None:
            stmt = stmt.where(Node.type.in_(list(types)))
        with _translate_errors(StoreReadError, "list_node_ids"):
            return list((await self.session.execute(stmt)).scalars().all())


__all__ = ["DEFAULT_MAX_DEPTH", "SQLAlchemyDocumentStore"]
