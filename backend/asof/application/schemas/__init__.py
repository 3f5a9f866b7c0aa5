from .versioning import RecordInvalidResponse, ValidationErrorDetail, VersionResponse
from .category import CategoryCreate, CategoryResponse, CategoryUpdate
from .product import ProductCreate, ProductResponse, ProductUpdate

__all__ = [
    "RecordInvalidResponse",
    "ValidationErrorDetail",
    "VersionResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategoryUpdate",
    "ProductCreate",
    "ProductResponse",
    "ProductUpdate",
]
