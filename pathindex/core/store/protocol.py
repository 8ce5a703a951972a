"""Document store contract consumed by the path maintainer and translator.

Any backend that can answer these calls can host the index. The SQL
implementation lives in ``pathindex.core.store.sql``; tests substitute
``AsyncMock`` objects built from this protocol.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


@runtime_checkable
class DocumentStore(Protocol):
    """Read/write surface of the host's node and attribute storage.

    Reads raise ``StoreReadError`` and writes raise ``StoreWriteError`` on
    backend failure.
    """

    async def get_ancestors(self, node_id: int) -> list[int]:
        """Ancestor ids root first, excluding ``node_id``.

        Empty for a root, for an unknown node and for a node whose direct
        parent no longer exists.
        """
        ...

    async def get_attribute(self, node_id: int, key: str) -> str | None:
        """First stored value for ``key`` on the node, None when absent."""
        ...

    async def set_attribute(
        self,
        node_id: int,
        key: str,
        value: str,
        *,
        unique_only: bool = True,
    ) -> None:
        """Overwrite the value if present, else insert it.

        With ``unique_only=False`` a new value is always added.
        """
        ...

    async def bulk_replace_prefix(
        self,
        key: str,
        old_prefix: str,
        new_prefix: str,
        *,
        exclude_node_id: int | None = None,
    ) -> int:
        """Replace ``old_prefix`` with ``new_prefix`` on every ``key`` value
        starting with it, in one atomic statement. Returns rows updated."""
        ...

    async def get_node_type(self, node_id: int) -> str | None:
        """Type tag of the node, None for unknown nodes."""
        ...

    async def list_hierarchical_types(self) -> set[str]:
        """Type tags flagged as hierarchical."""
        ...

    async def list_node_ids(self, types: Iterable[str] | None = None) -> list[int]:
        """Ids of all nodes (optionally of the given types), ordered by id."""
        ...


__all__ = ["DocumentStore"]
