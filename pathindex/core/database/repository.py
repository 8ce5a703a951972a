"""Primary key lookups with a not-found error.

Path reads and writes go through the document store and the query engine;
this only loads whole rows for callers that need the ORM object.

Example:
    nodes = BaseRepository(Node)
    node = await nodes.get_or_raise(session, 42)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pathindex.core.exceptions import NotFoundError
from pathindex.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """Lookups for one model class."""

    __slots__ = ("_lazy", "_logger", "model")

    def __init__(self, model: type[T]) -> None:
        self.model = model
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    async def get(self, session: AsyncSession, id: Any) -> T | None:  # noqa: A002
        instance = await session.get(self.model, id)
        self._lazy.debug(
            lambda: f"{self.model.__name__}({id}) {'found' if instance else 'missing'}"
        )
        return instance

    async def get_or_raise(self, session: AsyncSession, id: Any) -> T:  # noqa: A002
        """Get entity by primary key or raise NotFoundError.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        instance = await self.get(session, id)
        if instance is None:
            self._logger.info(
                "Entity not found",
                extra={"entity": self.model.__name__, "id": str(id)},
            )
            raise NotFoundError(self.model.__name__, {"id": id})
        return instance


__all__ = ["BaseRepository"]
