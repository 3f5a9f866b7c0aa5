"""Concrete repository implementation for Category backed by SQLAlchemy."""

from asof.application.interfaces import CategoryRepository
from asof.domain.entities import Category
from asof.infrastructure.database.models import CategoryModel
from asof.infrastructure.database.repositories.versioned_repository import (
    SQLAlchemyVersionedRepository,
)


class SQLAlchemyCategoryRepository(
    SQLAlchemyVersionedRepository[Category, CategoryModel], CategoryRepository
):
    """Implements the CategoryRepository port using SQLAlchemy async sessions."""

    model = CategoryModel

    def _to_entity(self, model: CategoryModel) -> Category:
        """Map ORM model → domain entity."""
        return Category(
            code=model.code,
            name=model.name,
            description=model.description,
            **self._version_fields(model),
        )

    def _to_model(self, entity: Category) -> CategoryModel:
        """Map domain entity → ORM model (for creation)."""
        return CategoryModel(
            id=entity.id,
            group_id=entity.group_id,
            created_dt=entity.created_dt,
            obsoleted_dt=entity.obsoleted_dt,
            user_id=entity.user_id,
            o_user_id=entity.o_user_id,
            code=entity.code,
            name=entity.name,
            description=entity.description,
        )
