"""SQLAlchemy ORM model for versioned products."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from asof.infrastructure.database.base import Base, versioning_registry
from asof.infrastructure.database.models.category import CategoryModel
from asof.infrastructure.versioning import VersionedMixin


@versioning_registry.versioned("sku")
class ProductModel(VersionedMixin, Base):
    """ORM model — maps to the 'products' table. One row per version.

    ``category_id`` points at one specific category *version*. There is no
    database foreign key: closed products keep pointing at category versions
    that may since have been removed.
    """

    __tablename__ = "products"

    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    category: Mapped[CategoryModel | None] = relationship(
        CategoryModel,
        primaryjoin="foreign(ProductModel.category_id) == CategoryModel.id",
        lazy="raise",
    )

    def __repr__(self) -> str:
        return (
            f"<ProductModel(id={self.id}, sku='{self.sku}', "
            f"obsoleted_dt={self.obsoleted_dt})>"
        )


versioning_registry.belongs_to(ProductModel, "category")
