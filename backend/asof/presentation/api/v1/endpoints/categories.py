"""Category version-chain endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from asof.application.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
)
from asof.application.services import CategoryService
from asof.domain.exceptions import EntityNotFoundError
from asof.infrastructure.dependencies import get_category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    as_of: datetime | None = Query(None, description="Point in time; current versions when omitted"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    """Categories as they stood at ``as_of``."""
    categories = await service.list_as_of(as_of, skip=skip, limit=limit)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Create the first version of a category."""
    category = await service.create_category(data)
    return CategoryResponse.model_validate(category)


@router.get("/versions/{version_id}", response_model=CategoryResponse)
async def get_category_version(
    version_id: str,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    try:
        category = await service.get_version(version_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CategoryResponse.model_validate(category)


@router.delete("/versions/{version_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category_version(
    version_id: str,
    service: CategoryService = Depends(get_category_service),
) -> None:
    """Physically remove one version. Refused while open products point at it."""
    try:
        await service.delete_version(version_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{group_id}", response_model=CategoryResponse)
async def get_category(
    group_id: str,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Current version of a category."""
    try:
        category = await service.get_current(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CategoryResponse.model_validate(category)


@router.get("/{group_id}/history", response_model=list[CategoryResponse])
async def get_category_history(
    group_id: str,
    service: CategoryService = Depends(get_category_service),
) -> list[CategoryResponse]:
    try:
        history = await service.get_history(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [CategoryResponse.model_validate(c) for c in history]


@router.put("/{group_id}", response_model=CategoryResponse)
async def update_category(
    group_id: str,
    data: CategoryUpdate,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Supersede the current version with the submitted changes."""
    try:
        category = await service.update_category(group_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CategoryResponse.model_validate(category)


@router.post("/{group_id}/obsolete", response_model=CategoryResponse)
async def obsolete_category(
    group_id: str,
    service: CategoryService = Depends(get_category_service),
) -> CategoryResponse:
    """Close the category; it stays visible to earlier as-of reads."""
    try:
        category = await service.obsolete(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return CategoryResponse.model_validate(category)
