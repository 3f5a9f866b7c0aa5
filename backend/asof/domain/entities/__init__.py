from .versioned import VersionedEntity
from .category import Category
from .product import Product

__all__ = [
    "VersionedEntity",
    "Category",
    "Product",
]
