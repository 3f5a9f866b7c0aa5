"""SQLAlchemy ORM model for versioned categories."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from asof.infrastructure.database.base import Base, versioning_registry
from asof.infrastructure.versioning import VersionedMixin


@versioning_registry.versioned("code", append_only=True)
class CategoryModel(VersionedMixin, Base):
    """ORM model — maps to the 'categories' table. One row per version."""

    __tablename__ = "categories"

    code: Mapped[str] = mapped_column(String(50), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<CategoryModel(id={self.id}, code='{self.code}', "
            f"obsoleted_dt={self.obsoleted_dt})>"
        )
