"""Uniqueness scoped to versions sharing the same ``obsoleted_dt``.

Open versions all carry ``INFINITY`` and therefore compete with each other;
a closed version only collides with another closed at the very same instant.
The storage-level unique constraints are authoritative; the checks here are a
cooperative pre-check that turns the common case into a readable error.
"""

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from asof.domain.exceptions import UniquenessViolationError
from asof.domain.temporal import INFINITY, is_open


async def _count_others(session: AsyncSession, instance: Any, *criteria) -> int:
    model = type(instance)
    stmt = select(func.count()).select_from(model).where(*criteria)
    if instance.id is not None:
        stmt = stmt.where(model.id != instance.id)
    return await session.scalar(stmt) or 0


async def uniqueness_errors(
    session: AsyncSession,
    instance: Any,
    key: tuple[str, ...],
) -> list[UniquenessViolationError]:
    """Reject a version whose ``key`` values repeat among same-``obsoleted_dt`` rows."""
    if not key:
        return []
    model = type(instance)
    criteria = [getattr(model, attr) == getattr(instance, attr) for attr in key]
    criteria.append(model.obsoleted_dt == instance.obsoleted_dt)
    if await _count_others(session, instance, *criteria):
        return [UniquenessViolationError(key[0])]
    return []


async def open_group_errors(session: AsyncSession, instance: Any) -> list[UniquenessViolationError]:
    """Reject a second open version in the same version chain."""
    if not is_open(instance.obsoleted_dt):
        return []
    model = type(instance)
    if await _count_others(
        session,
        instance,
        model.group_id == instance.group_id,
        model.obsoleted_dt == INFINITY,
    ):
        return [UniquenessViolationError("group_id", "already has an open version")]
    return []


def conflicting_field(message: str, table: str, key: tuple[str, ...]) -> str:
    """Best guess at which unique constraint a driver error message refers to."""
    if f"uq_{table}_open_group" in message or f"{table}.group_id" in message:
        return "group_id"
    return key[0] if key else "group_id"
