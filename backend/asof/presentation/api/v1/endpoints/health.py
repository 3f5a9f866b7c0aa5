"""Health check endpoint — no database access, always available."""

from fastapi import APIRouter

from asof.config import get_settings
from asof.infrastructure.database import versioning_registry

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check() -> dict:
    """Returns the application health status and the versioned record types it serves."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "versioned_models": sorted(
            versioning_registry.spec_for(model).entity_name
            for model in versioning_registry.models
        ),
    }
