"""Abstract repository interface (port) shared by every versioned entity."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Generic, TypeVar

E = TypeVar("E")


class VersionedRepository(ABC, Generic[E]):
    """Port for version-chain persistence — implemented in the infrastructure layer.

    Rows are never updated in place except to close them; a change is a new
    version in the same group.
    """

    @abstractmethod
    async def get_by_id(self, version_id: str) -> E | None:
        """Retrieve a single version by its id."""
        ...

    @abstractmethod
    async def get_current(self, group_id: str) -> E | None:
        """Retrieve the open version of a group, if the group is still live."""
        ...

    @abstractmethod
    async def get_history(self, group_id: str) -> list[E]:
        """All versions of a group, oldest first."""
        ...

    @abstractmethod
    async def list_as_of(self, ts: Any, *, skip: int = 0, limit: int = 100) -> list[E]:
        """Versions open at ``ts``. Raises InvalidTimestampError for a None ``ts``."""
        ...

    @abstractmethod
    async def create(self, entity: E) -> E:
        """Persist a new version and return it with its chain fields stamped."""
        ...

    @abstractmethod
    async def obsolete(self, version_id: str, at: datetime | None = None) -> E | None:
        """Close an open version. Returns None when the version does not exist."""
        ...

    @abstractmethod
    async def delete(self, version_id: str) -> bool:
        """Physically remove a version. Returns True if deleted, False if not found."""
        ...
