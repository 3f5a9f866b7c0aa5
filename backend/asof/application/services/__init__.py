from .version_chain_service import VersionChainService
from .category_service import CategoryService
from .product_service import ProductService

__all__ = [
    "VersionChainService",
    "CategoryService",
    "ProductService",
]
