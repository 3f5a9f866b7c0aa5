"""Point-in-time ("as of") queries over versioned models.

Usage:
    async def skus(scope: AsOfScope) -> list[str]:
        return list(await scope.scalars(select(ProductModel.sku)))

    result = await lookup(session, registry, ts, skus)

Every statement executed through the scope only sees versions open at
``ts``; the restriction also reaches joined and relationship-loaded
versioned models.
"""

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from sqlalchemy import and_
from sqlalchemy.engine import Result, ScalarResult
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import with_loader_criteria
from sqlalchemy.sql import ColumnElement, Executable

from asof.domain.temporal import require_timestamp
from asof.infrastructure.logging.colored_logger import VersioningLogger, VersionStage
from asof.infrastructure.versioning.registry import VersioningRegistry

T = TypeVar("T")

_log = VersioningLogger("asof.versioning")


def open_at(model: type, ts: Any) -> ColumnElement[bool]:
    """Rows of ``model`` visible at ``ts``: ``created_dt < ts <= obsoleted_dt``."""
    return and_(model.obsoleted_dt >= ts, model.created_dt < ts)


class AsOfScope:
    """A session view restricted to versions open at one instant."""

    def __init__(self, session: AsyncSession, ts: Any, models: list[type]):
        self.session = session
        self.ts = ts
        self._criteria = [
            with_loader_criteria(model, open_at(model, ts), include_aliases=True)
            for model in models
        ]

    def constrain(self, stmt: Executable) -> Executable:
        """Attach the as-of criteria to ``stmt`` without executing it."""
        return stmt.options(*self._criteria)

    async def execute(self, stmt: Executable) -> Result:
        return await self.session.execute(self.constrain(stmt))

    async def scalars(self, stmt: Executable) -> ScalarResult:
        result = await self.execute(stmt)
        return result.scalars()


async def lookup(
    session: AsyncSession,
    registry: VersioningRegistry,
    ts: Any,
    retrieve: Callable[..., Awaitable[T]],
    *args: Any,
    **kwargs: Any,
) -> T:
    """Run ``retrieve(scope, *args, **kwargs)`` against the state as of ``ts``.

    Raises InvalidTimestampError before touching storage when ``ts`` is None.
    """
    ts = require_timestamp(ts)
    scope = AsOfScope(session, ts, registry.models)
    _log.step_start(VersionStage.LOOKUP, getattr(retrieve, "__name__", "lookup"), ts=ts)
    return await retrieve(scope, *args, **kwargs)


def temporal_lookup(method: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """Turn a repository method ``(self, scope, ...)`` into ``(self, ts, ...)``.

    The repository must expose ``_session`` and ``_registry``.
    """

    @functools.wraps(method)
    async def wrapper(self, ts: Any, *args: Any, **kwargs: Any) -> T:
        return await lookup(
            self._session,
            self._registry,
            ts,
            functools.partial(method, self),
            *args,
            **kwargs,
        )

    return wrapper
