"""Document store contract and its SQLAlchemy implementation."""

from pathindex.core.store.protocol import DocumentStore
from pathindex.core.store.sql import DEFAULT_MAX_DEPTH, SQLAlchemyDocumentStore

__all__ = ["DEFAULT_MAX_DEPTH", "DocumentStore", "SQLAlchemyDocumentStore"]
