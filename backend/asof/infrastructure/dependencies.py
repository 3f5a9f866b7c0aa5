"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from asof.application.services import CategoryService, ProductService
from asof.infrastructure.database.base import versioning_registry
from asof.infrastructure.database.session import get_db_session
from asof.infrastructure.database.repositories import (
    SQLAlchemyCategoryRepository,
    SQLAlchemyProductRepository,
)
from asof.infrastructure.identity import ContextVarIdentityProvider
from asof.infrastructure.versioning import VersioningPipeline


def get_versioning_pipeline() -> VersioningPipeline:
    """Pipeline stamping writes with the actor bound to the current request."""
    return VersioningPipeline(versioning_registry, identity=ContextVarIdentityProvider())


async def get_category_service(
    session: AsyncSession = Depends(get_db_session),
    pipeline: VersioningPipeline = Depends(get_versioning_pipeline),
) -> AsyncGenerator[CategoryService, None]:
    """Provides a CategoryService instance with its repository wired up."""
    repository = SQLAlchemyCategoryRepository(session, pipeline)
    yield CategoryService(repository)


async def get_product_service(
    session: AsyncSession = Depends(get_db_session),
    pipeline: VersioningPipeline = Depends(get_versioning_pipeline),
) -> AsyncGenerator[ProductService, None]:
    """Provides a ProductService instance with its repository wired up."""
    repository = SQLAlchemyProductRepository(session, pipeline)
    yield ProductService(repository)
