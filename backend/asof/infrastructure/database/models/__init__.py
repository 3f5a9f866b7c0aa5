from .category import CategoryModel
from .product import ProductModel

__all__ = [
    "CategoryModel",
    "ProductModel",
]
