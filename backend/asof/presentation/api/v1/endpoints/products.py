"""Product version-chain endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from asof.application.schemas.product import (
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from asof.application.services import ProductService
from asof.domain.exceptions import EntityNotFoundError
from asof.infrastructure.dependencies import get_product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("", response_model=list[ProductResponse])
async def list_products(
    as_of: datetime | None = Query(None, description="Point in time; current versions when omitted"),
    category_id: str | None = Query(None, description="Filter by category version id"),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    """Products as they stood at ``as_of``."""
    products = await service.list_products(
        as_of=as_of,
        category_id=category_id,
        skip=skip,
        limit=limit,
    )
    return [ProductResponse.model_validate(p) for p in products]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Create the first version of a product."""
    product = await service.create_product(data)
    return ProductResponse.model_validate(product)


@router.get("/versions/{version_id}", response_model=ProductResponse)
async def get_product_version(
    version_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = await service.get_version(version_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProductResponse.model_validate(product)


@router.delete("/versions/{version_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product_version(
    version_id: str,
    service: ProductService = Depends(get_product_service),
) -> None:
    """Physically remove one version."""
    try:
        await service.delete_version(version_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{group_id}", response_model=ProductResponse)
async def get_product(
    group_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Current version of a product."""
    try:
        product = await service.get_current(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProductResponse.model_validate(product)


@router.get("/{group_id}/history", response_model=list[ProductResponse])
async def get_product_history(
    group_id: str,
    service: ProductService = Depends(get_product_service),
) -> list[ProductResponse]:
    """Every version of a product, oldest first."""
    try:
        history = await service.get_history(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return [ProductResponse.model_validate(p) for p in history]


@router.put("/{group_id}", response_model=ProductResponse)
async def update_product(
    group_id: str,
    data: ProductUpdate,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    """Supersede the current version with the submitted changes."""
    try:
        product = await service.update_product(group_id, data)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProductResponse.model_validate(product)


@router.post("/{group_id}/obsolete", response_model=ProductResponse)
async def obsolete_product(
    group_id: str,
    service: ProductService = Depends(get_product_service),
) -> ProductResponse:
    try:
        product = await service.obsolete(group_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ProductResponse.model_validate(product)
