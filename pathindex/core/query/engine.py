"""Compile and run ``NodeQuery`` objects against the node tables.

Each attribute condition becomes a correlated
``EXISTS (SELECT 1 FROM node_meta WHERE node_id = nodes.id AND ...)``
so a node with several meta rows is never returned twice.

Usage:
    engine = QueryEngine()
    stmt = engine.compile(query)          # inspect or extend
    nodes = await engine.execute(session, query)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, and_, or_, select

from pathindex.core.models import Node, NodeMeta
from pathindex.core.query.candidates import parse_candidate_ids
from pathindex.core.query.models import MetaCondition, MetaQuery, NodeQuery
from pathindex.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

_lazy = get_lazy_logger(__name__)


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, list):
        return [str(v) for v in value]
    return [str(value)]


class QueryEngine:
    """Turns the structured query into a SQLAlchemy ``select(Node)``."""

    def condition(self, cond: MetaCondition) -> ColumnElement[bool]:
        """EXISTS test for a single attribute condition."""
        rows = select(NodeMeta.id).where(
            NodeMeta.node_id == Node.id,
            NodeMeta.meta_key == cond.key,
        )
        value_col = NodeMeta.meta_value

        match cond.compare:
            case "EXISTS":
                return rows.exists()
            case "NOT EXISTS":
                return ~rows.exists()
            case "=":
                rows = rows.where(value_col == str(cond.value))
            case "!=":
                rows = rows.where(value_col != str(cond.value))
            case "LIKE":
                rows = rows.where(value_col.like(str(cond.value)))
            case "NOT LIKE":
                rows = rows.where(value_col.not_like(str(cond.value)))
            case "IN":
                rows = rows.where(value_col.in_(_as_list(cond.value)))

        return rows.exists()

    def group(self, meta_query: MetaQuery) -> ColumnElement[bool] | None:
        """Combine a group's clauses with its relation; None when empty."""
        parts = []
        for clause in meta_query.clauses:
            part = self.group(clause) if isinstance(clause, MetaQuery) else self.condition(clause)
            if part is not None:
                parts.append(part)

        if not parts:
            return None
        if meta_query.relation == "OR":
            return or_(*parts)
        return and_(*parts)

    def compile(self, query: NodeQuery) -> Select[tuple[Node]]:
        stmt = select(Node)

        parents = parse_candidate_ids(query.parent_in)
        if parents:
            stmt = stmt.where(Node.parent_id.in_(sorted(parents)))
        if query.node_types:
            stmt = stmt.where(Node.type.in_(query.node_types))
        if query.exclude:
            stmt = stmt.where(Node.id.not_in(query.exclude))
        if query.meta_query is not None:
            meta_filter = self.group(query.meta_query)
            if meta_filter is not None:
                stmt = stmt.where(meta_filter)

        stmt = stmt.order_by(Node.id)
        if query.limit is not None:
            stmt = stmt.limit(query.limit)
        if query.offset:
            stmt = stmt.offset(query.offset)
        return stmt

    async def execute(self, session: AsyncSession, query: NodeQuery) -> Sequence[Node]:
        stmt = self.compile(query)
        result = await session.execute(stmt)
        nodes = result.scalars().all()
        _lazy.debug(lambda: f"query returned {len(nodes)} nodes")
        return nodes


__all__ = ["QueryEngine"]
