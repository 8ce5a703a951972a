"""Exceptions raised by the path index core.

Store failures are wrapped into two types so callers can tell a failed read
(nothing was written) from a failed write (the old path is still in effect).
Both carry the operation name and the node they were working on.
"""

from __future__ import annotations

from typing import Any


class PathIndexError(Exception):
    """Base exception for path index operations.

    Attributes:
        message: Human readable description
        details: Extra context (operation, node id, ...)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class StoreError(PathIndexError):
    """Document store operation failed."""

    def __init__(
        self,
        operation: str,
        *,
        node_id: int | None = None,
        reason: str | None = None,
    ):
        self.operation = operation
        self.node_id = node_id

        details: dict[str, Any] = {"operation": operation}
        if node_id is not None:
            details["node_id"] = node_id

        message = f"Document store {self._verb} failed during {operation}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, details=details)

    _verb = "operation"


class StoreReadError(StoreError):
    """Reading ancestors, node types or stored paths failed.

    No path is written when this is raised.
    """

    _verb = "read"


class StoreWriteError(StoreError):
    """Writing a node's own path or the bulk descendant rewrite failed.

    Not retried; the host may retry the whole save.
    """

    _verb = "write"


class NotFoundError(PathIndexError):
    """Entity not found in the database.

    Attributes:
        model_name: Name of the model class that wasn't found
        identifier: The key/value that was searched for
    """

    def __init__(self, model_name: str, identifier: dict[str, Any]):
        self.model_name = model_name
        self.identifier = identifier

        id_str = ", ".join(f"{k}={v!r}" for k, v in identifier.items())
        message = f"{model_name} not found with {id_str}"

        super().__init__(message, details={"model": model_name, **identifier})

    def __repr__(self) -> str:
        return f"NotFoundError(model={self.model_name!r}, identifier={self.identifier!r})"


__all__ = [
    "NotFoundError",
    "PathIndexError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
]
