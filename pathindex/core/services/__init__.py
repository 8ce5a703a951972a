"""Path maintenance and query rewriting services."""

from pathindex.core.services.index import PathIndex
from pathindex.core.services.maintainer import (
    PathMaintainer,
    PathMismatch,
    RebuildReport,
    SaveResult,
    SaveStatus,
)
from pathindex.core.services.translator import PathQueryTranslator

__all__ = [
    "PathIndex",
    "PathMaintainer",
    "PathMismatch",
    "PathQueryTranslator",
    "RebuildReport",
    "SaveResult",
    "SaveStatus",
]
