"""Shared fixtures: an in-memory database and a deterministic clock."""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from asof.infrastructure.database import Base, versioning_registry
from asof.infrastructure.identity import ContextVarIdentityProvider
from asof.infrastructure.versioning import VersioningPipeline


class TickingClock:
    """Returns a strictly increasing UTC instant on every call."""

    def __init__(
        self,
        start: datetime = datetime(2026, 1, 1, tzinfo=timezone.utc),
        step: timedelta = timedelta(minutes=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now

    def just_after(self) -> datetime:
        """An instant after the last tick and before the next one."""
        return self.now + self.step / 2


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def pipeline(clock) -> VersioningPipeline:
    return VersioningPipeline(
        versioning_registry,
        identity=ContextVarIdentityProvider(),
        clock=clock,
    )
