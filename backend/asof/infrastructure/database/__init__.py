from .base import Base, versioning_registry
from .session import engine, async_session_factory, get_db_session
from .models import CategoryModel, ProductModel

__all__ = [
    "Base",
    "versioning_registry",
    "engine",
    "async_session_factory",
    "get_db_session",
    "CategoryModel",
    "ProductModel",
]
