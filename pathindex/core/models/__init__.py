"""ORM models."""

from pathindex.core.models.node import PATH_META_KEY, Node, NodeMeta, NodeType

__all__ = ["PATH_META_KEY", "Node", "NodeMeta", "NodeType"]
