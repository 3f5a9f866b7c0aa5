"""Application service (use case) for Product operations."""

from typing import Any

from asof.application.interfaces import ProductRepository
from asof.application.schemas.product import ProductCreate, ProductUpdate
from asof.application.services.version_chain_service import VersionChainService
from asof.domain.entities import Product


class ProductService(VersionChainService[Product]):
    """Orchestrates product version chains. Depends on the repository port (DI)."""

    entity_type = "Product"

    def __init__(self, repository: ProductRepository):
        super().__init__(repository)

    async def list_products(
        self,
        *,
        as_of: Any = None,
        category_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[Product]:
        return await self.list_as_of(as_of, category_id=category_id, skip=skip, limit=limit)

    async def create_product(self, data: ProductCreate) -> Product:
        product = Product(
            sku=data.sku,
            name=data.name,
            price_cents=data.price_cents,
            category_id=data.category_id,
        )
        return await self._repository.create(product)

    async def update_product(self, group_id: str, data: ProductUpdate) -> Product:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return await self.supersede(group_id, changes)
