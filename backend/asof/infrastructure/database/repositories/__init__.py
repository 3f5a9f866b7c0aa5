from .versioned_repository import SQLAlchemyVersionedRepository
from .category_repository import SQLAlchemyCategoryRepository
from .product_repository import SQLAlchemyProductRepository

__all__ = [
    "SQLAlchemyVersionedRepository",
    "SQLAlchemyCategoryRepository",
    "SQLAlchemyProductRepository",
]
