from .identity_provider import IdentityProvider
from .versioned_repository import VersionedRepository
from .category_repository import CategoryRepository
from .product_repository import ProductRepository

__all__ = [
    "IdentityProvider",
    "VersionedRepository",
    "CategoryRepository",
    "ProductRepository",
]
