"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from asof.application.schemas.versioning import RecordInvalidResponse
from asof.config import get_settings
from asof.domain.exceptions import (
    InvalidTimestampError,
    RecordInvalidError,
    ReferentialBlockError,
)
from asof.infrastructure.database import Base, engine
from asof.infrastructure.logging.log_config import setup_logging
from asof.presentation.api.middleware.actor_context import ActorContextMiddleware
from asof.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and create tables."""
    setup_logging()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready (%d tables)", len(Base.metadata.tables))

    yield

    await engine.dispose()


async def record_invalid_handler(request: Request, exc: RecordInvalidError) -> JSONResponse:
    """Refused writes → 422; removals blocked by open dependents → 409."""
    status_code = (
        status.HTTP_409_CONFLICT
        if exc.has(ReferentialBlockError)
        else status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    body = RecordInvalidResponse(
        detail=str(exc),
        entity_type=exc.entity_type,
        errors=exc.as_dicts(),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def invalid_timestamp_handler(request: Request, exc: InvalidTimestampError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ActorContextMiddleware, header_name=settings.actor_header)

    app.add_exception_handler(RecordInvalidError, record_invalid_handler)
    app.add_exception_handler(InvalidTimestampError, invalid_timestamp_handler)

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "asof.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
