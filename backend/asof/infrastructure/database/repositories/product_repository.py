"""Concrete repository implementation for Product backed by SQLAlchemy."""

from sqlalchemy import select

from asof.application.interfaces import ProductRepository
from asof.domain.entities import Product
from asof.infrastructure.database.models import ProductModel
from asof.infrastructure.database.repositories.versioned_repository import (
    SQLAlchemyVersionedRepository,
)
from asof.infrastructure.versioning import AsOfScope, temporal_lookup


class SQLAlchemyProductRepository(
    SQLAlchemyVersionedRepository[Product, ProductModel], ProductRepository
):
    """Implements the ProductRepository port using SQLAlchemy async sessions."""

    model = ProductModel

    def _to_entity(self, model: ProductModel) -> Product:
        """Map ORM model → domain entity."""
        return Product(
            sku=model.sku,
            name=model.name,
            price_cents=model.price_cents,
            category_id=model.category_id,
            **self._version_fields(model),
        )

    def _to_model(self, entity: Product) -> ProductModel:
        """Map domain entity → ORM model (for creation)."""
        return ProductModel(
            id=entity.id,
            group_id=entity.group_id,
            created_dt=entity.created_dt,
            obsoleted_dt=entity.obsoleted_dt,
            user_id=entity.user_id,
            o_user_id=entity.o_user_id,
            sku=entity.sku,
            name=entity.name,
            price_cents=entity.price_cents,
            category_id=entity.category_id,
        )

    @temporal_lookup
    async def list_as_of(
        self,
        scope: AsOfScope,
        *,
        category_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Product]:
        stmt = select(ProductModel)
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        stmt = stmt.order_by(ProductModel.sku).offset(skip).limit(limit)
        rows = await scope.scalars(stmt)
        return [self._to_entity(row) for row in rows.all()]
