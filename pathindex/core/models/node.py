"""ORM models for the hierarchical document collection.

``nodes`` holds the tree itself (parent pointers), ``node_meta`` is the
generic key/value attribute store the materialized path is written to, and
``node_types`` flags which type tags are hierarchical.
"""

from __future__ import annotations

from typing import ClassVar

from sqlalchemy import Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pathindex.core.database import (
    Base,
    HierarchicalMixin,
    IntegerPKMixin,
    TimestampMixin,
)

PATH_META_KEY = "materialized"


class NodeType(Base):
    """Type tag registry.

    ``hierarchical`` types are indexed when no explicit allow-list is
    configured.
    """

    __tablename__ = "node_types"

    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    hierarchical: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)


class NodeMeta(Base, IntegerPKMixin):
    """One key/value attribute of a node.

    Keys are not unique per node; single valued attributes such as the
    materialized path are kept single by upserting.
    """

    __tablename__ = "node_meta"
    __table_args__ = (
        Index("ix_node_meta_key_value", "meta_key", "meta_value"),
        Index("ix_node_meta_node_key", "node_id", "meta_key"),
    )

    node_id: Mapped[int] = mapped_column(
        ForeignKey("nodes.id", ondelete="CASCADE"),
        nullable=False,
    )
    meta_key: Mapped[str] = mapped_column(String(255), nullable=False)
    meta_value: Mapped[str | None] = mapped_column(Text, nullable=True)


class Node(Base, IntegerPKMixin, TimestampMixin, HierarchicalMixin):
    """A document with at most one parent."""

    __tablename__ = "nodes"
    __path_meta__: ClassVar[type[NodeMeta]] = NodeMeta
    __path_key__: ClassVar[str] = PATH_META_KEY

    parent_id: Mapped[int | None] = mapped_column(
        ForeignKey("nodes.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    type: Mapped[str] = mapped_column(String(64), default="page", nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    def __repr__(self) -> str:
        return f"<Node id={self.id!r} type={self.type!r} parent_id={self.parent_id!r}>"


__all__ = ["PATH_META_KEY", "Node", "NodeMeta", "NodeType"]
