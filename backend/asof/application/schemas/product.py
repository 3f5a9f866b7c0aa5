"""Pydantic DTOs (Data Transfer Objects) for the Product feature."""

from pydantic import BaseModel, Field

from asof.application.schemas.versioning import VersionResponse


class ProductCreate(BaseModel):
    """Schema for creating the first version of a product."""

    sku: str = Field(..., min_length=1, max_length=100, examples=["SKU-0001"])
    name: str = Field(..., min_length=1, max_length=200, examples=["Widget"])
    price_cents: int = Field(0, ge=0)
    category_id: str | None = Field(
        None, max_length=36, description="Id of an open category version",
    )


class ProductUpdate(BaseModel):
    """Schema for superseding a product — all fields optional."""

    sku: str | None = Field(None, min_length=1, max_length=100)
    name: str | None = Field(None, min_length=1, max_length=200)
    price_cents: int | None = Field(None, ge=0)
    category_id: str | None = Field(None, max_length=36)


class ProductResponse(VersionResponse):
    """Schema returned to the client."""

    sku: str
    name: str
    price_cents: int
    category_id: str | None
