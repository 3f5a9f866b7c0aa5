"""Pydantic fields shared by every versioned response."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from asof.domain.temporal import is_open


class VersionResponse(BaseModel):
    """Version-chain fields. ``obsoleted_dt`` is null while the version is open."""

    id: str
    group_id: str
    created_dt: datetime
    obsoleted_dt: datetime | None = Field(
        None, description="When this version was superseded; null while current",
    )
    user_id: str | None
    o_user_id: str | None
    is_current: bool

    model_config = {"from_attributes": True}

    @field_validator("obsoleted_dt", mode="before")
    @classmethod
    def _open_ended_as_null(cls, value: Any) -> Any:
        return None if is_open(value) else value


class ValidationErrorDetail(BaseModel):
    """One structured validation failure."""

    field: str
    kind: str
    message: str


class RecordInvalidResponse(BaseModel):
    """Body returned when a versioned write or removal is refused."""

    detail: str
    entity_type: str
    errors: list[ValidationErrorDetail]
