"""Database primitives: declarative base, mixins and a lookup repository."""

from pathindex.core.database.base import (
    NAMING_CONVENTION,
    Base,
    IntegerPKMixin,
    TimestampMixin,
)
from pathindex.core.database.hierarchy import HierarchicalMixin, MaterializedPath
from pathindex.core.database.repository import BaseRepository

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "BaseRepository",
    "HierarchicalMixin",
    "IntegerPKMixin",
    "MaterializedPath",
    "TimestampMixin",
]
