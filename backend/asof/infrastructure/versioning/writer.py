"""Version writer — stamps the version-chain fields on a row about to be written.

The writer never splits a version chain on its own. Closing the current
version and inserting its successor is the caller's job; the writer only
makes sure whatever row is written carries consistent chain fields.
"""

import logging
from datetime import datetime
from typing import Any
from uuid import uuid4

from sqlalchemy import inspect as sa_inspect

from asof.application.interfaces.identity_provider import IdentityProvider
from asof.domain.exceptions import ImmutableFieldError, InvalidIntervalError
from asof.domain.temporal import INFINITY, as_utc, is_infinity, is_open, normalize_infinity

logger = logging.getLogger(__name__)


def has_changes(instance: Any) -> bool:
    """New rows always count as changed; persisted rows when a column was modified."""
    state = sa_inspect(instance)
    if state.transient or state.pending:
        return True
    return any(state.attrs[prop.key].history.has_changes() for prop in state.mapper.column_attrs)


def resolve_actor(identity: IdentityProvider | None) -> str | None:
    """Best-effort current actor id; resolution failures are swallowed."""
    if identity is None:
        return None
    try:
        return identity.current_actor_id()
    except Exception as exc:
        logger.debug("Could not resolve current actor, leaving it unset: %s", exc)
        return None


def stamp(instance: Any, *, changed: bool, actor_id: str | None, now: datetime) -> bool:
    """Fill in the chain fields of a changed row. Returns False when nothing changed.

    The actor lands in ``user_id`` when the row is created or rewritten as an
    open version, and in ``o_user_id`` when the write closes a stored row.
    Naive timestamps are read as UTC.
    """
    if not changed:
        return False

    state = sa_inspect(instance)
    is_new = state.transient or state.pending

    if instance.id is None:
        instance.id = str(uuid4())
    if instance.group_id is None:
        instance.group_id = instance.id
    if instance.created_dt is None:
        instance.created_dt = now
    else:
        instance.created_dt = as_utc(instance.created_dt)
    if instance.obsoleted_dt is None:
        instance.obsoleted_dt = INFINITY
    elif is_infinity(instance.obsoleted_dt) and instance.obsoleted_dt is not INFINITY:
        instance.obsoleted_dt = normalize_infinity(instance.obsoleted_dt)
    else:
        instance.obsoleted_dt = as_utc(instance.obsoleted_dt)

    if actor_id is not None:
        if is_new or is_open(instance.obsoleted_dt):
            instance.user_id = actor_id
        elif instance.o_user_id is None:
            instance.o_user_id = actor_id
    return True


def immutable_field_errors(instance: Any) -> list[ImmutableFieldError]:
    """Chain fields of a persisted row may only move forward, never be rewritten.

    ``obsoleted_dt`` may go from open to a concrete instant and ``o_user_id``
    may be filled in once; ``group_id`` never changes.
    """
    state = sa_inspect(instance)
    if state.transient or state.pending:
        return []

    errors: list[ImmutableFieldError] = []
    for key in ("group_id", "obsoleted_dt", "o_user_id"):
        history = state.attrs[key].history
        if not history.has_changes():
            continue
        original = history.deleted[0] if history.deleted else None
        if key == "obsoleted_dt" and is_open(original):
            continue
        if key == "o_user_id" and original is None:
            continue
        errors.append(ImmutableFieldError(key))
    return errors


def interval_errors(instance: Any) -> list[InvalidIntervalError]:
    """A closed version must have ``created_dt < obsoleted_dt``."""
    if is_open(instance.obsoleted_dt) or instance.created_dt is None:
        return []
    if not instance.created_dt < instance.obsoleted_dt:
        return [InvalidIntervalError()]
    return []
