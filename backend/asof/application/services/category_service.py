"""Application service (use case) for Category operations."""

from asof.application.interfaces import CategoryRepository
from asof.application.schemas.category import CategoryCreate, CategoryUpdate
from asof.application.services.version_chain_service import VersionChainService
from asof.domain.entities import Category


class CategoryService(VersionChainService[Category]):
    """Orchestrates category version chains. Depends on the repository port (DI)."""

    entity_type = "Category"

    def __init__(self, repository: CategoryRepository):
        super().__init__(repository)

    async def create_category(self, data: CategoryCreate) -> Category:
        category = Category(
            code=data.code,
            name=data.name,
            description=data.description,
        )
        return await self._repository.create(category)

    async def update_category(self, group_id: str, data: CategoryUpdate) -> Category:
        changes = data.model_dump(exclude_unset=True)
        # code and name are required on every version
        for key in ("code", "name"):
            if changes.get(key) is None:
                changes.pop(key, None)
        return await self.supersede(group_id, changes)
