"""Rewrites "descendants of these ids" filters into path prefix conditions.

A query asking for ``post_parent__in=4,9`` normally only matches direct
children. The translator replaces that with one attribute-filter group:

    materialized LIKE '/1/4/%'  OR  materialized LIKE '/9/%'

which matches the candidates themselves and everything below them. Paths
missing for a candidate are computed and stored on the way.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pathindex.core.context import is_admin_context
from pathindex.core.query import MetaCondition, MetaQuery, parse_candidate_ids
from pathindex.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pathindex.core.query import NodeQuery
    from pathindex.core.services.maintainer import PathMaintainer
    from pathindex.core.settings import PathIndexSettings

logger = logging.getLogger(__name__)
_lazy = get_lazy_logger(__name__)


class PathQueryTranslator:
    """Turns a parent-in filter into an OR group of path prefix matches.

    Example:
        translator = PathQueryTranslator(maintainer, settings)
        query = NodeQuery(parent_in="4,9")
        await translator.rewrite_query(query)
        # query.parent_in is None, query.meta_query holds the OR group
    """

    def __init__(self, maintainer: PathMaintainer, settings: PathIndexSettings) -> None:
        self.maintainer = maintainer
        self.settings = settings

    def should_skip(self) -> bool:
        """True while an administrative context is active and bypass is on."""
        return self.settings.admin_bypass and is_admin_context()

    async def rewrite_query(
        self,
        query: NodeQuery,
        request: Mapping[str, Any] | None = None,
        *,
        force: bool = False,
    ) -> NodeQuery:
        """Rewrite ``query`` in place and return it.

        Args:
            query: Query about to be executed.
            request: Raw request parameters; a value under the search field
                name is merged into the candidates.
            force: Rewrite even in an administrative context.
        """
        if not force and self.should_skip():
            _lazy.debug("administrative context, query left untouched")
            return query

        field_name = self.settings.search_field
        request = request or {}
        value = query.get(field_name)
        if not value and field_name not in request:
            return query

        candidates = parse_candidate_ids(value, request.get(field_name))

        group = MetaQuery(relation="OR")
        for node_id in sorted(candidates):
            path = await self.maintainer.materialize(node_id)
            group.append(
                MetaCondition(
                    key=self.settings.meta_key,
                    value=path.like_pattern(),
                    compare="LIKE",
                )
            )

        if group.clauses:
            if query.meta_query is None:
                query.meta_query = MetaQuery(relation="AND", clauses=[group])
            else:
                query.meta_query.append(group)

        query.set(field_name, None)
        # The prefix group replaces the direct-parent filter, whatever the field
        query.parent_in = None

        _lazy.debug(lambda: f"rewrote {field_name}={value!r} into {len(group.clauses)} prefix conditions")
        return query


__all__ = ["PathQueryTranslator"]
