"""Abstract repository interface (port) for Category persistence."""

from asof.application.interfaces.versioned_repository import VersionedRepository
from asof.domain.entities import Category


class CategoryRepository(VersionedRepository[Category]):
    """Port for category persistence."""
