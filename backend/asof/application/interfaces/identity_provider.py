"""Abstract interface (port) for resolving who is making a change."""

from abc import ABC, abstractmethod


class IdentityProvider(ABC):
    """Port for actor identity — implemented in the infrastructure layer."""

    @abstractmethod
    def current_actor_id(self) -> str | None:
        """Return the id of the actor behind the current request, if any.

        May raise IdentityResolutionError; callers treat that as "unknown".
        """
        ...
