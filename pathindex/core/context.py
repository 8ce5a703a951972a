"""Administrative context tracking.

The host marks requests that manage the hierarchy directly (admin screens,
maintenance jobs) so query rewriting can stand aside for them. Uses a
ContextVar, so the flag follows the current task across await boundaries.

Example:
    from pathindex.core.context import admin_context

    with admin_context():
        nodes = await index.find(query)  # unfiltered
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_admin_context: ContextVar[bool] = ContextVar("pathindex_admin_context", default=False)


def is_admin_context() -> bool:
    """Return True when the current task runs in an administrative context."""
    return _admin_context.get()


def set_admin_context(enabled: bool = True) -> None:
    """Mark (or unmark) the current task as administrative."""
    _admin_context.set(enabled)


@contextmanager
def admin_context(enabled: bool = True) -> Iterator[None]:
    """Scope the administrative flag to a block, restoring it afterwards."""
    token = _admin_context.set(enabled)
    try:
        yield
    finally:
        _admin_context.reset(token)


__all__ = [
    "admin_context",
    "is_admin_context",
    "set_admin_context",
]
