"""Abstract repository interface (port) for Product persistence."""

from abc import abstractmethod
from typing import Any

from asof.application.interfaces.versioned_repository import VersionedRepository
from asof.domain.entities import Product


class ProductRepository(VersionedRepository[Product]):
    """Port for product persistence."""

    @abstractmethod
    async def list_as_of(
        self,
        ts: Any,
        *,
        category_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Product]:
        """Products open at ``ts``, optionally within one category version."""
        ...
