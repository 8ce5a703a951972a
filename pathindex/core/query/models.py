"""Structured node query accepted by the query engine.

Mirrors the shape of a CMS query-var bag: a handful of typed parameters
(``post_parent__in``, ``meta_query`` ...) plus whatever else the caller
passed, kept as extra fields so rewriting hooks can read and clear any of
them by name.

Example:
    query = NodeQuery.model_validate(
        {
            "post_parent__in": "4,9",
            "meta_query": {
                "relation": "AND",
                "clauses": [{"key": "color", "value": "red"}],
            },
        }
    )
    query.get("post_parent__in")  # "4,9"
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Compare = Literal["=", "!=", "LIKE", "NOT LIKE", "IN", "EXISTS", "NOT EXISTS"]
Relation = Literal["AND", "OR"]


class MetaCondition(BaseModel):
    """One attribute test: ``meta_key == key AND meta_value <compare> value``.

    ``LIKE`` values are SQL LIKE patterns as written by the caller.
    ``EXISTS`` / ``NOT EXISTS`` ignore the value.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    value: str | int | list[str | int] | None = None
    compare: Compare = "="


class MetaQuery(BaseModel):
    """Group of conditions and nested groups joined by ``relation``."""

    relation: Relation = "AND"
    clauses: list[MetaCondition | MetaQuery] = Field(default_factory=list)

    def append(self, clause: MetaCondition | MetaQuery) -> None:
        self.clauses.append(clause)


class NodeQuery(BaseModel):
    """Query over nodes.

    Attributes:
        parent_in: Direct-parent filter (``post_parent__in``). Accepts an id,
            a list, or a delimited string of ids.
        meta_query: Attribute filter tree.
        node_types: Restrict to these type tags (empty = any).
        exclude: Node ids to leave out.
        limit: Max rows (None = unlimited).
        offset: Rows to skip.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        # Unknown query vars are kept, not dropped
        extra="allow",
    )

    parent_in: int | str | list[int | str] | None = Field(
        default=None,
        alias="post_parent__in",
    )
    meta_query: MetaQuery | None = None
    node_types: list[str] = Field(default_factory=list)
    exclude: list[int] = Field(default_factory=list)
    limit: int | None = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)

    @classmethod
    def _field_for(cls, name: str) -> str | None:
        for field_name, info in cls.model_fields.items():
            if name in (field_name, info.alias):
                return field_name
        return None

    def get(self, name: str, default: Any = None) -> Any:
        """Read a query var by field name or alias."""
        field_name = self._field_for(name)
        if field_name is not None:
            return getattr(self, field_name)
        return (self.model_extra or {}).get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Write a query var by field name or alias."""
        setattr(self, self._field_for(name) or name, value)


MetaQuery.model_rebuild()

__all__ = [
    "Compare",
    "MetaCondition",
    "MetaQuery",
    "NodeQuery",
    "Relation",
]
