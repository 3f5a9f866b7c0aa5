"""Application service base for entities kept as version chains."""

import dataclasses
import logging
from datetime import datetime
from typing import Any, Generic, TypeVar

from asof.application.interfaces import VersionedRepository
from asof.domain.exceptions import EntityNotFoundError
from asof.domain.temporal import INFINITY

logger = logging.getLogger(__name__)

E = TypeVar("E")


class VersionChainService(Generic[E]):
    """Chain-level use cases: current/history reads, supersede, obsolete, remove.

    A change never rewrites a row. :meth:`supersede` closes the current
    version and inserts its successor starting at the instant the
    predecessor ended.
    """

    entity_type = "Record"

    def __init__(self, repository: VersionedRepository[E]):
        self._repository = repository

    async def get_version(self, version_id: str) -> E:
        entity = await self._repository.get_by_id(version_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_type, version_id)
        return entity

    async def get_current(self, group_id: str) -> E:
        entity = await self._repository.get_current(group_id)
        if entity is None:
            raise EntityNotFoundError(self.entity_type, group_id)
        return entity

    async def get_history(self, group_id: str) -> list[E]:
        history = await self._repository.get_history(group_id)
        if not history:
            raise EntityNotFoundError(self.entity_type, group_id)
        return history

    async def list_as_of(self, as_of: Any = None, **filters: Any) -> list[E]:
        """Versions open at ``as_of``; current versions when it is omitted."""
        return await self._repository.list_as_of(
            INFINITY if as_of is None else as_of, **filters
        )

    async def supersede(self, group_id: str, changes: dict[str, Any]) -> E:
        """Replace the current version of ``group_id`` with one carrying ``changes``.

        Returns the current version untouched when nothing actually changes.
        Closing and inserting share the caller's transaction, so a rejected
        successor leaves the chain as it was once the session rolls back.
        """
        current = await self.get_current(group_id)
        changes = {k: v for k, v in changes.items() if getattr(current, k) != v}
        if not changes:
            return current

        closed = await self._repository.obsolete(current.id)
        if closed is None:
            raise EntityNotFoundError(self.entity_type, current.id)
        successor = dataclasses.replace(
            current,
            **changes,
            id=None,
            created_dt=closed.obsoleted_dt,
            obsoleted_dt=None,
            user_id=None,
            o_user_id=None,
        )
        logger.debug(
            "Superseding %s %s: %s", self.entity_type, group_id, ", ".join(sorted(changes))
        )
        return await self._repository.create(successor)

    async def obsolete(self, group_id: str, at: datetime | None = None) -> E:
        """Close the chain: its current version stops being visible after ``at``."""
        current = await self.get_current(group_id)
        closed = await self._repository.obsolete(current.id, at)
        if closed is None:
            raise EntityNotFoundError(self.entity_type, current.id)
        return closed

    async def delete_version(self, version_id: str) -> bool:
        exists = await self._repository.get_by_id(version_id)
        if exists is None:
            raise EntityNotFoundError(self.entity_type, version_id)
        return await self._repository.delete(version_id)
