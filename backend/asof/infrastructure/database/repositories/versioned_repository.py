"""SQLAlchemy base for repositories of versioned entities.

Writes go through the :class:`VersioningPipeline`; point-in-time reads go
through :func:`temporal_lookup`.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from asof.domain.temporal import INFINITY
from asof.infrastructure.versioning import AsOfScope, VersioningPipeline, temporal_lookup

E = TypeVar("E")
M = TypeVar("M")


class SQLAlchemyVersionedRepository(Generic[E, M]):
    """Shared read/write paths; subclasses provide ``model`` and the mappers."""

    model: type[M]

    def __init__(self, session: AsyncSession, pipeline: VersioningPipeline):
        self._session = session
        self._pipeline = pipeline
        self._registry = pipeline.registry

    def _to_entity(self, model: M) -> E:
        raise NotImplementedError

    def _to_model(self, entity: E) -> M:
        raise NotImplementedError

    async def get_by_id(self, version_id: str) -> E | None:
        result = await self._session.get(self.model, version_id)
        return self._to_entity(result) if result else None

    async def get_current(self, group_id: str) -> E | None:
        stmt = select(self.model).where(
            self.model.group_id == group_id,
            self.model.obsoleted_dt == INFINITY,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_history(self, group_id: str) -> list[E]:
        stmt = (
            select(self.model)
            .where(self.model.group_id == group_id)
            .order_by(self.model.created_dt)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    @temporal_lookup
    async def list_as_of(self, scope: AsOfScope, *, skip: int = 0, limit: int = 100) -> list[E]:
        stmt = select(self.model).order_by(self.model.created_dt).offset(skip).limit(limit)
        rows = await scope.scalars(stmt)
        return [self._to_entity(row) for row in rows.all()]

    async def create(self, entity: E) -> E:
        model = self._to_model(entity)
        await self._pipeline.save(self._session, model)
        return self._to_entity(model)

    async def obsolete(self, version_id: str, at: datetime | None = None) -> E | None:
        model = await self._session.get(self.model, version_id)
        if model is None:
            return None
        await self._pipeline.obsolete(self._session, model, at)
        return self._to_entity(model)

    async def delete(self, version_id: str) -> bool:
        model = await self._session.get(self.model, version_id)
        if model is None:
            return False
        await self._pipeline.destroy(self._session, model)
        return True

    def _version_fields(self, model: Any) -> dict[str, Any]:
        return {
            "id": model.id,
            "group_id": model.group_id,
            "created_dt": model.created_dt,
            "obsoleted_dt": model.obsoleted_dt,
            "user_id": model.user_id,
            "o_user_id": model.o_user_id,
        }
