"""Structured node queries and the engine that runs them."""

from pathindex.core.query.candidates import MAX_NODE_ID, parse_candidate_ids
from pathindex.core.query.engine import QueryEngine
from pathindex.core.query.models import MetaCondition, MetaQuery, NodeQuery

__all__ = [
    "MAX_NODE_ID",
    "MetaCondition",
    "MetaQuery",
    "NodeQuery",
    "QueryEngine",
    "parse_candidate_ids",
]
