"""Version-chain columns and the capability marker for versioned ORM models."""

from typing import Any

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from asof.infrastructure.versioning.types import TemporalBound

# Columns owned by the versioning engine, never by business logic.
VERSION_COLUMNS = frozenset({
    "id",
    "group_id",
    "user_id",
    "created_dt",
    "obsoleted_dt",
    "o_user_id",
})


class VersionedMixin:
    """Adds the version-chain columns to a declarative model.

    Subclassing this mixin is what makes a model versioned; see
    :func:`is_versioned`.
    """

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    group_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_dt: Mapped[Any] = mapped_column(TemporalBound, nullable=False)
    obsoleted_dt: Mapped[Any] = mapped_column(TemporalBound, nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    o_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)


def is_versioned(model: Any) -> bool:
    """Does ``model`` (a class or an instance) carry the version-chain columns?"""
    cls = model if isinstance(model, type) else type(model)
    return issubclass(cls, VersionedMixin)


def entity_name(model: Any) -> str:
    """Human-readable entity name, e.g. ``ProductModel`` → ``Product``."""
    cls = model if isinstance(model, type) else type(model)
    return cls.__name__.removesuffix("Model")
