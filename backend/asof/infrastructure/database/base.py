"""SQLAlchemy ORM base and model registry."""

from sqlalchemy.orm import DeclarativeBase

from asof.infrastructure.versioning import VersioningRegistry


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


# Versioning declarations for every model defined on Base
versioning_registry = VersioningRegistry()
