"""Keeps every indexed node's materialized path in step with its parents.

Call ``on_node_saved`` after a node create or update commits. A node whose
parent chain changed gets its new path, and every descendant's stored path
is rewritten by one prefix replacement in the store; children are never
visited one by one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from pathindex.core.database.hierarchy import PATH_PATTERN, MaterializedPath
from pathindex.infra.logging import get_lazy_logger, log_context

if TYPE_CHECKING:
    from pathindex.core.settings import PathIndexSettings
    from pathindex.core.store import DocumentStore

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


class SaveStatus(StrEnum):
    """Outcome of a maintenance pass."""

    SKIPPED = "skipped"  # type not indexable
    UNCHANGED = "unchanged"
    CREATED = "created"
    MOVED = "moved"


@dataclass(slots=True, frozen=True)
class SaveResult:
    """What ``on_node_saved`` did for one node."""

    node_id: int
    status: SaveStatus
    new_path: MaterializedPath | None = None
    old_path: str | None = None
    descendants_updated: int = 0

    @property
    def wrote(self) -> bool:
        return self.status in (SaveStatus.CREATED, SaveStatus.MOVED)


@dataclass(slots=True, frozen=True)
class PathMismatch:
    """A node whose stored path disagrees with its parent chain."""

    node_id: int
    stored: str | None
    expected: MaterializedPath


@dataclass(slots=True)
class RebuildReport:
    """Counters from a full backfill."""

    scanned: int = 0
    written: int = 0
    unchanged: int = 0
    mismatches: list[PathMismatch] = field(default_factory=list)


class PathMaintainer:
    """Writes materialized paths through a ``DocumentStore``.

    Example:
        maintainer = PathMaintainer(store, settings)
        result = await maintainer.on_node_saved(node.id)
        if result.status is SaveStatus.MOVED:
            print(result.descendants_updated)
    """

    def __init__(self, store: DocumentStore, settings: PathIndexSettings) -> None:
        self.store = store
        self.settings = settings
        self._indexable: frozenset[str] | None = None

    async def indexable_types(self) -> frozenset[str]:
        """Configured allow-list, or the store's hierarchical types when empty.

        Resolved once per maintainer.
        """
        if self._indexable is None:
            if self.settings.uses_hierarchical_types:
                types = await self.store.list_hierarchical_types()
                logger.info(
                    "Indexing hierarchical node types",
                    extra={"node_types": sorted(types)},
                )
            else:
                types = set(self.settings.indexable_types)
            self._indexable = frozenset(types)
        return self._indexable

    async def is_indexable(self, node_id: int) -> bool:
        node_type = await self.store.get_node_type(node_id)
        return node_type is not None and node_type in await self.indexable_types()

    async def compute_path(self, node_id: int) -> MaterializedPath:
        """Path from the current parent chain; broken chains make a root."""
        ancestors = await self.store.get_ancestors(node_id)
        return MaterializedPath.from_ancestors(ancestors, node_id)

    async def stored_path(self, node_id: int) -> str | None:
        """Raw stored value; None or empty means nothing is stored."""
        return await self.store.get_attribute(node_id, self.settings.meta_key)

    async def on_node_saved(self, node_id: int) -> SaveResult:
        """Recompute the node's path and propagate a move to its subtree.

        Raises:
            StoreReadError: Reading the chain or the old path failed; nothing
                was written.
            StoreWriteError: The bulk rewrite or the upsert failed.
        """
        with log_context(node_id=node_id, operation="on_node_saved"):
            if not await self.is_indexable(node_id):
                _lazy.debug(lambda: f"node {node_id} not indexable, skipping")
                return SaveResult(node_id, SaveStatus.SKIPPED)

            new_path = await self.compute_path(node_id)
            old_path = await self.stored_path(node_id) or None

            if old_path == str(new_path):
                _lazy.debug(lambda: f"path {new_path} unchanged")
                return SaveResult(node_id, SaveStatus.UNCHANGED, new_path, old_path)

            updated = 0
            if old_path is not None:
                updated = await self.store.bulk_replace_prefix(
                    self.settings.meta_key,
                    old_path,
                    str(new_path),
                    exclude_node_id=node_id,
                )

            await self.store.set_attribute(
                node_id, self.settings.meta_key, str(new_path), unique_only=True
            )

            if old_path is None:
                _lazy.debug(lambda: f"path {new_path} created")
                return SaveResult(node_id, SaveStatus.CREATED, new_path)

            logger.info(
                "Node moved",
                extra={
                    "old_path": old_path,
                    "new_path": str(new_path),
                    "descendants_updated": updated,
                },
            )
            return SaveResult(node_id, SaveStatus.MOVED, new_path, old_path, updated)

    async def materialize(self, node_id: int) -> MaterializedPath:
        """Return the stored path, computing and storing it when missing.

        Used by query rewriting: the stored value wins when present, even if
        a concurrent move made it stale.
        """
        stored = await self.stored_path(node_id)
        if stored and PATH_PATTERN.match(stored):
            return MaterializedPath(stored)
        if stored:
            logger.warning(
                "Replacing malformed stored path",
                extra={"node_id": node_id, "stored": stored},
            )

        path = await self.compute_path(node_id)
        if await self.store.get_node_type(node_id) is None:
            # Unknown node: the pattern matches nothing, nothing to store
            _lazy.debug(lambda: f"node {node_id} does not exist, not storing {path}")
            return path

        await self.store.set_attribute(
            node_id, self.settings.meta_key, str(path), unique_only=True
        )
        logger.info(
            "Materialized missing path",
            extra={"node_id": node_id, "path": str(path)},
        )
        return path

    async def _indexable_node_ids(self) -> list[int]:
        return await self.store.list_node_ids(await self.indexable_types())

    async def verify(self) -> list[PathMismatch]:
        """Nodes whose stored path differs from their parent chain."""
        mismatches = []
        for node_id in await self._indexable_node_ids():
            expected = await self.compute_path(node_id)
            stored = await self.stored_path(node_id)
            if stored != str(expected):
                mismatches.append(PathMismatch(node_id, stored, expected))
        return mismatches

    async def rebuild(self) -> RebuildReport:
        """Rewrite every indexable node's path from its parent chain.

        Each node is computed from parent pointers, so no prefix rewrite is
        needed and order does not matter.
        """
        report = RebuildReport()
        for node_id in await self._indexable_node_ids():
            report.scanned += 1
            expected = await self.compute_path(node_id)
            stored = await self.stored_path(node_id)
            if stored == str(expected):
                report.unchanged += 1
                continue

            report.mismatches.append(PathMismatch(node_id, stored, expected))
            await self.store.set_attribute(
                node_id, self.settings.meta_key, str(expected), unique_only=True
            )
            report.written += 1

        logger.info(
            "Rebuilt materialized paths",
            extra={
                "scanned": report.scanned,
                "written": report.written,
                "unchanged": report.unchanged,
            },
        )
        return report


__all__ = [
    "PathMaintainer",
    "PathMismatch",
    "RebuildReport",
    "SaveResult",
    "SaveStatus",
]
