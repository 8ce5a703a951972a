"""Materialized path support for hierarchical models.

- ``MaterializedPath``: parse, navigate and compare ``/1/4/9/`` paths in Python
- ``HierarchicalMixin``: tree navigation queries for models whose path lives
  in a key/value meta table
"""

from pathindex.core.database.hierarchy.mixins import HierarchicalMixin, path_depth
from pathindex.core.database.hierarchy.path import (
    PATH_PATTERN,
    SEPARATOR,
    MaterializedPath,
)

__all__ = [
    "PATH_PATTERN",
    "SEPARATOR",
    "HierarchicalMixin",
    "MaterializedPath",
    "path_depth",
]
