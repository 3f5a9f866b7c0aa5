"""Pydantic DTOs (Data Transfer Objects) for the Category feature."""

from pydantic import BaseModel, Field

from asof.application.schemas.versioning import VersionResponse


class CategoryCreate(BaseModel):
    """Schema for creating the first version of a category."""

    code: str = Field(..., min_length=1, max_length=50, examples=["hedge-costs"])
    name: str = Field(..., min_length=1, max_length=200, examples=["Hedge costs"])
    description: str | None = None


class CategoryUpdate(BaseModel):
    """Schema for superseding a category — all fields optional."""

    code: str | None = Field(None, min_length=1, max_length=50)
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = None


class CategoryResponse(VersionResponse):
    """Schema returned to the client."""

    code: str
    name: str
    description: str | None
