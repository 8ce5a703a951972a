"""Database engine and session management."""

from pathindex.infra.database.session import (
    close_database,
    create_engine,
    create_session_factory,
    init_database,
    session_scope,
)

__all__ = [
    "close_database",
    "create_engine",
    "create_session_factory",
    "init_database",
    "session_scope",
]
