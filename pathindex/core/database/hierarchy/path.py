"""Value object for slash-delimited materialized paths.

A materialized path lists a node's ancestor ids from the root down to the
node itself, each followed by a slash:

- ``/7/`` is the root node 7
- ``/7/12/40/`` is node 40, child of 12, grandchild of 7

The leading and trailing slash are part of the format. Because every id is
closed by a slash, a plain string prefix test is also a segment boundary
test: ``/1/2/`` is a prefix of ``/1/2/9/`` but not of ``/1/20/``. The same
holds for the SQL pattern ``LIKE '/1/2/%'``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from typing import Self

SEPARATOR = "/"

# One or more positive integer segments, each closed by a slash
PATH_PATTERN = re.compile(r"^/([1-9]\d*/)+$")

_DOUBLED_SEPARATORS = re.compile(r"/{2,}")


class MaterializedPath:
    """Python wrapper for stored materialized path strings.

    Example:
        >>> path = MaterializedPath("/1/4/9/")
        >>> path.depth
        3
        >>> path.parent
        MaterializedPath('/1/4/')
        >>> path.ancestor_ids
        [1, 4]
        >>> path.is_ancestor_of("/1/4/9/16/")
        True
        >>> path / 16
        MaterializedPath('/1/4/9/16/')

    Note:
        The empty path ``""`` stands for "no path stored" and is falsy.
    """

    __slots__ = ("_ids", "_path")
    _path: str
    _ids: list[int]

    def __init__(self, path: str | MaterializedPath) -> None:
        """Initialize from a stored string or another MaterializedPath.

        Raises:
            ValueError: If the string is not a well formed path
        """
        if isinstance(path, MaterializedPath):
            self._path = path._path
            self._ids = path._ids
            return

        self._path = str(path).strip()
        if self._path and not PATH_PATTERN.match(self._path):
            raise ValueError(
                f"Invalid materialized path: {self._path!r}. "
                "Expected '/<id>/.../<id>/' with positive integer ids."
            )
        self._ids = [int(s) for s in self._path.split(SEPARATOR) if s]

    @classmethod
    def from_ancestors(cls, ancestors: Iterable[int], node_id: int) -> Self:
        """Build a node's path from its root-first ancestor chain.

        Doubled separators are collapsed, so an empty chain gives ``/id/``.

        Example:
            >>> MaterializedPath.from_ancestors([1, 4], 9)
            MaterializedPath('/1/4/9/')
            >>> MaterializedPath.from_ancestors([], 9)
            MaterializedPath('/9/')
        """
        chain = SEPARATOR.join(str(a) for a in ancestors)
        raw = f"{SEPARATOR}{chain}{SEPARATOR}{node_id}{SEPARATOR}"
        return cls(_DOUBLED_SEPARATORS.sub(SEPARATOR, raw))

    @classmethod
    def from_ids(cls, *ids: int) -> Self:
        """Create a path from ids ordered root to leaf."""
        if not ids:
            return cls("")
        return cls.from_ancestors(ids[:-1], ids[-1])

    @property
    def depth(self) -> int:
        """Number of ids in the path (1 for a root)."""
        return len(self._ids)

    @property
    def ids(self) -> list[int]:
        """Copy of all ids, root first, including the node itself."""
        return list(self._ids)

    @property
    def node_id(self) -> int | None:
        """Id of the node this path belongs to."""
        return self._ids[-1] if self._ids else None

    @property
    def root_id(self) -> int | None:
        return self._ids[0] if self._ids else None

    @property
    def ancestor_ids(self) -> list[int]:
        """Ancestor ids root first, excluding the node itself."""
        return self._ids[:-1]

    @property
    def parent(self) -> MaterializedPath | None:
        """Path of the direct parent, None for roots and the empty path."""
        if self.depth <= 1:
            return None
        return type(self).from_ids(*self._ids[:-1])

    @property
    def ancestors(self) -> list[MaterializedPath]:
        """Ancestor paths ordered root to parent."""
        return [type(self).from_ids(*self._ids[:i]) for i in range(1, self.depth)]

    def child(self, node_id: int) -> MaterializedPath:
        """Path of a direct child with the given id."""
        return type(self).from_ancestors(self._ids, node_id)

    def is_ancestor_of(self, other: str | MaterializedPath) -> bool:
        """True if self is a proper ancestor of other.

        Example:
            >>> MaterializedPath("/1/2/").is_ancestor_of("/1/2/3/")
            True
            >>> MaterializedPath("/1/2/").is_ancestor_of("/1/20/")
            False
        """
        other_path = MaterializedPath(other)
        return bool(self) and self.depth < other_path.depth and other_path.startswith(self)

    def is_descendant_of(self, other: str | MaterializedPath) -> bool:
        """True if self is a proper descendant of other."""
        return MaterializedPath(other).is_ancestor_of(self)

    def contains(self, other: str | MaterializedPath) -> bool:
        """True if other is self or one of its descendants."""
        other_path = MaterializedPath(other)
        return bool(self) and other_path.startswith(self)

    def startswith(self, prefix: str | MaterializedPath) -> bool:
        """Raw prefix test on the stored strings.

        Segment safe because both sides end with a separator.
        """
        return self._path.startswith(str(prefix))

    def common_ancestor(self, other: str | MaterializedPath) -> MaterializedPath | None:
        """Deepest path shared by both, or None when the roots differ."""
        other_path = MaterializedPath(other)
        common: list[int] = []
        for a, b in zip(self._ids, other_path._ids, strict=False):
            if a != b:
                break
            common.append(a)
        return type(self).from_ids(*common) if common else None

    def replace_prefix(
        self,
        old: str | MaterializedPath,
        new: str | MaterializedPath,
    ) -> MaterializedPath:
        """Swap a leading ancestor path, as a move does to a subtree.

        Example:
            >>> MaterializedPath("/1/2/3/").replace_prefix("/1/2/", "/5/2/")
            MaterializedPath('/5/2/3/')

        Raises:
            ValueError: If ``old`` is not a prefix of this path
        """
        old_str = str(old)
        if not self.startswith(old_str):
            raise ValueError(f"{old_str!r} is not a prefix of {self._path!r}")
        return type(self)(str(new) + self._path[len(old_str) :])

    def like_pattern(self) -> str:
        """SQL LIKE pattern matching this node and all its descendants."""
        return f"{self._path}%"

    def __truediv__(self, node_id: int) -> MaterializedPath:
        return self.child(node_id)

    def __iter__(self) -> Iterator[int]:
        return iter(self._ids)

    def __len__(self) -> int:
        return self.depth

    def __str__(self) -> str:
        """Return string representation for database storage."""
        return self._path

    def __repr__(self) -> str:
        return f"MaterializedPath({self._path!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MaterializedPath):
            return self._path == other._path
        if isinstance(other, str):
            return self._path == other
        return False

    def __hash__(self) -> int:
        return hash(self._path)

    def __bool__(self) -> bool:
        return bool(self._path)


__all__ = [
    "PATH_PATTERN",
    "SEPARATOR",
    "MaterializedPath",
]
