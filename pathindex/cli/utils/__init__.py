"""CLI utilities for running async operations and formatting output."""

from pathindex.cli.utils.async_runner import coro
from pathindex.cli.utils.formatters import (
    emit_json,
    emit_table,
    error,
    info,
    success,
    warning,
)

__all__ = [
    "coro",
    "emit_json",
    "emit_table",
    "error",
    "info",
    "success",
    "warning",
]
