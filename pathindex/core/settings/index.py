"""Path index behaviour settings."""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class PathIndexSettings(BaseSettings):
    """Configuration for the path maintainer and query translator.

    Environment variables use PATHINDEX_ prefix.
    Example: PATHINDEX_INDEXABLE_TYPES=page,post, PATHINDEX_ADMIN_BYPASS=false

    With no allow-list configured, every hierarchical type is indexed.

    Instances are passed explicitly into PathMaintainer, PathQueryTranslator
    and PathIndex; the cached loader is only a convenience for entrypoints.
    """

    indexable_types: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description=(
            "Node types that carry a materialized path. "
            "Empty list means every type the store flags as hierarchical."
        ),
    )

    search_field: str = Field(
        default="post_parent__in",
        min_length=1,
        description="Query parameter holding the candidate ancestor ids.",
    )

    meta_key: str = Field(
        default="materialized",
        min_length=1,
        max_length=255,
        description="Attribute key under which paths are stored.",
    )

    admin_bypass: bool = Field(
        default=True,
        description="Leave queries untouched while an administrative context is active.",
    )

    max_depth: int = Field(
        default=256,
        ge=1,
        le=10_000,
        description="Upper bound on ancestor chain length; guards against parent cycles.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PATHINDEX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("indexable_types", mode="before")
    @classmethod
    def _split_types(cls, v: Any) -> Any:
        """Accept a JSON array or a comma separated string as well as a list."""
        if isinstance(v, str):
            if v.lstrip().startswith("["):
                return json.loads(v)
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @property
    def uses_hierarchical_types(self) -> bool:
        """True when the allow-list must be resolved from the store."""
        return not self.indexable_types


__all__ = ["PathIndexSettings"]
