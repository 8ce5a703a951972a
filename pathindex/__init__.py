"""Materialized path index for hierarchical document collections.

Keeps a ``/root/.../parent/id/`` path attribute on every indexed node so
descendant and ancestor lookups become prefix matches.

Example:
    from pathindex import PathIndex

    async with session_scope(factory) as session:
        index = PathIndex(session)
        await index.on_node_saved(node.id)
        nodes = await index.descendants([1, 7])
"""

from pathindex.core.exceptions import PathIndexError, StoreReadError, StoreWriteError
from pathindex.core.services.index import PathIndex

__version__ = "0.1.0"

__all__ = [
    "PathIndex",
    "PathIndexError",
    "StoreReadError",
    "StoreWriteError",
    "__version__",
]
