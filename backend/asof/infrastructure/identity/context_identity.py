"""Request-scoped actor identity backed by a context variable."""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token

from asof.application.interfaces.identity_provider import IdentityProvider

# Holds the actor id for the lifetime of one request / task
current_actor_var: ContextVar[str | None] = ContextVar("current_actor", default=None)


class ContextVarIdentityProvider(IdentityProvider):
    """Reads the actor id set by the request middleware or :func:`acting_as`."""

    def current_actor_id(self) -> str | None:
        return current_actor_var.get()


def set_current_actor(actor_id: str | None) -> Token:
    return current_actor_var.set(actor_id)


def reset_current_actor(token: Token) -> None:
    current_actor_var.reset(token)


@contextmanager
def acting_as(actor_id: str | None) -> Iterator[None]:
    """Run a block of code on behalf of ``actor_id``.

    Usage:
        with acting_as("alice"):
            await repository.create(product)
    """
    token = set_current_actor(actor_id)
    try:
        yield
    finally:
        reset_current_actor(token)
