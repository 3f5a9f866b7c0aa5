from .context_identity import (
    ContextVarIdentityProvider,
    acting_as,
    current_actor_var,
    reset_current_actor,
    set_current_actor,
)

__all__ = [
    "ContextVarIdentityProvider",
    "acting_as",
    "current_actor_var",
    "reset_current_actor",
    "set_current_actor",
]
