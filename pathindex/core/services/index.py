"""Facade wiring the store, maintainer, translator and query engine together.

One ``PathIndex`` per session (request or unit of work). The host calls
``on_node_saved`` after committing a node write and routes read queries
through ``find`` (or calls ``rewrite_query`` itself before executing).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pathindex.core.models import Node
from pathindex.core.query import NodeQuery, QueryEngine, parse_candidate_ids
from pathindex.core.services.maintainer import PathMaintainer
from pathindex.core.services.translator import PathQueryTranslator
from pathindex.core.settings import PathIndexSettings
from pathindex.core.store import SQLAlchemyDocumentStore

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from pathindex.core.database.hierarchy import MaterializedPath
    from pathindex.core.services.maintainer import PathMismatch, RebuildReport, SaveResult
    from pathindex.core.store import DocumentStore


class PathIndex:
    """Materialized path index over one session.

    Example:
        async with session_scope(factory) as session:
            index = PathIndex(session)
            await index.on_node_saved(node.id)
            subtree = await index.descendants([node.id])
            chain = await index.ancestors(node.id)
    """

    def __init__(
        self,
        session: AsyncSession,
        settings: PathIndexSettings | None = None,
        *,
        store: DocumentStore | None = None,
        engine: QueryEngine | None = None,
    ) -> None:
        self.session = session
        self.settings = settings or PathIndexSettings()
        self.store = store or SQLAlchemyDocumentStore(session, max_depth=self.settings.max_depth)
        self.engine = engine or QueryEngine()
        self.maintainer = PathMaintainer(self.store, self.settings)
        self.translator = PathQueryTranslator(self.maintainer, self.settings)

    async def on_node_saved(self, node_id: int) -> SaveResult:
        return await self.maintainer.on_node_saved(node_id)

    async def rewrite_query(
        self,
        query: NodeQuery,
        request: Mapping[str, Any] | None = None,
    ) -> NodeQuery:
        return await self.translator.rewrite_query(query, request)

    async def path_of(self, node_id: int) -> MaterializedPath:
        """Stored path, materialized on demand."""
        return await self.maintainer.materialize(node_id)

    async def find(
        self,
        query: NodeQuery,
        request: Mapping[str, Any] | None = None,
    ) -> Sequence[Node]:
        """Rewrite then execute a query."""
        await self.rewrite_query(query, request)
        return await self.engine.execute(self.session, query)

    async def descendants(
        self,
        node_ids: Iterable[int] | int | str,
        *,
        include_self: bool = True,
        node_types: Iterable[str] | None = None,
    ) -> Sequence[Node]:
        """Nodes below any of ``node_ids`` (and the ids themselves by default)."""
        candidates = parse_candidate_ids(node_ids if isinstance(node_ids, int | str) else list(node_ids))
        if not candidates:
            return []

        query = NodeQuery(node_types=list(node_types or []))
        query.set(self.settings.search_field, sorted(candidates))
        if not include_self:
            # A candidate stays in when another candidate is its ancestor
            paths = {c: await self.path_of(c) for c in candidates}
            query.exclude = sorted(
                c
                for c, path in paths.items()
                if not any(other.is_ancestor_of(path) for other in paths.values())
            )

        # Explicit lookups are not subject to the administrative bypass
        await self.translator.rewrite_query(query, force=True)
        return await self.engine.execute(self.session, query)

    async def ancestors(self, node_id: int, *, include_self: bool = False) -> list[Node]:
        """Ancestors root first, read off the node's path."""
        path = await self.path_of(node_id)
        ids = path.ids if include_self else path.ancestor_ids
        return await Node.get_by_ids(self.session, ids)

    async def verify(self) -> list[PathMismatch]:
        return await self.maintainer.verify()

    async def rebuild(self) -> RebuildReport:
        return await self.maintainer.rebuild()


__all__ = ["PathIndex"]
