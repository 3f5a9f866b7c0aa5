"""Referential guard for versioned models.

Two independent checks:

* a child version may only be written while the parent version it points at
  is still open (otherwise :class:`DanglingReferenceError`);
* an append-only parent version may only be removed once no open child
  version points at it (otherwise :class:`ReferentialBlockError`).

Parent → child links are collected in an :class:`AssociationRegistry` when a
``belongs_to`` relationship is declared.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import RelationshipDirection

from asof.domain.exceptions import (
    DanglingReferenceError,
    ReferentialBlockError,
    VersioningConfigurationError,
)
from asof.domain.temporal import INFINITY, is_open
from asof.infrastructure.versioning.mixin import entity_name, is_versioned


@dataclass(frozen=True)
class Reference:
    """A child's many-to-one link to a versioned parent."""

    name: str
    parent: type
    foreign_key: str
    parent_key: str


@dataclass(frozen=True)
class Dependent:
    """A child model whose ``foreign_key`` points at a parent's ``parent_key``."""

    model: type
    foreign_key: str
    parent_key: str


class AssociationRegistry:
    """Parent → dependents map, filled in as ``belongs_to`` links are declared.

    Relationships are resolved lazily so a child may be declared before
    its parent class exists.
    """

    def __init__(self) -> None:
        self._pending: list[tuple[type, str]] = []
        self._references: dict[type, list[Reference]] = defaultdict(list)
        self._dependents: dict[type, list[Dependent]] = defaultdict(list)

    def add(self, child: type, relationship_name: str) -> None:
        if (child, relationship_name) in self._pending or any(
            r.name == relationship_name for r in self._references.get(child, ())
        ):
            raise VersioningConfigurationError(
                f"{child.__name__}.{relationship_name} is already declared"
            )
        self._pending.append((child, relationship_name))

    def references_of(self, child: type) -> list[Reference]:
        self._resolve()
        return list(self._references.get(child, ()))

    def dependents_of(self, parent: type) -> list[Dependent]:
        self._resolve()
        return list(self._dependents.get(parent, ()))

    def _resolve(self) -> None:
        while self._pending:
            child, name = self._pending.pop(0)
            reference = _reflect(child, name)
            self._references[child].append(reference)
            self._dependents[reference.parent].append(
                Dependent(child, reference.foreign_key, reference.parent_key)
            )


def _reflect(child: type, name: str) -> Reference:
    mapper = sa_inspect(child)
    if name not in mapper.relationships:
        raise VersioningConfigurationError(f"{child.__name__} has no relationship '{name}'")

    rel = mapper.relationships[name]
    if rel.direction is not RelationshipDirection.MANYTOONE:
        raise VersioningConfigurationError(
            f"{child.__name__}.{name} must be a many-to-one relationship"
        )
    if len(rel.local_remote_pairs) != 1:
        raise VersioningConfigurationError(
            f"{child.__name__}.{name} must join on a single column"
        )

    parent = rel.mapper.class_
    if not is_versioned(parent):
        raise VersioningConfigurationError(f"{parent.__name__} is not a versioned model")

    (local, remote), = rel.local_remote_pairs
    return Reference(
        name=name,
        parent=parent,
        foreign_key=mapper.get_property_by_column(local).key,
        parent_key=rel.mapper.get_property_by_column(remote).key,
    )


async def dangling_reference_errors(
    session: AsyncSession,
    instance: Any,
    references: list[Reference],
) -> list[DanglingReferenceError]:
    """Reject open versions that point at an obsoleted parent version.

    Closed versions are history and are not re-checked.
    """
    if not is_open(instance.obsoleted_dt):
        return []

    state = sa_inspect(instance)
    errors: list[DanglingReferenceError] = []
    for ref in references:
        key = getattr(instance, ref.foreign_key)
        parent = instance.__dict__.get(ref.name)
        # a loaded parent goes stale once the foreign key is repointed
        if parent is not None and not state.attrs[ref.name].history.has_changes():
            if key is not None and getattr(parent, ref.parent_key) != key:
                parent = None
        if parent is None:
            if key is None:
                continue
            parent = await session.scalar(
                select(ref.parent).where(getattr(ref.parent, ref.parent_key) == key)
            )
        # a missing parent row is the storage layer's business
        if parent is None:
            continue
        if not is_open(parent.obsoleted_dt):
            errors.append(DanglingReferenceError(ref.name))
    return errors


async def referential_block_errors(
    session: AsyncSession,
    instance: Any,
    dependents: list[Dependent],
) -> list[ReferentialBlockError]:
    """One error per dependent model that still has open versions pointing here."""
    errors: list[ReferentialBlockError] = []
    for dep in dependents:
        stmt = (
            select(func.count())
            .select_from(dep.model)
            .where(
                dep.model.obsoleted_dt == INFINITY,
                getattr(dep.model, dep.foreign_key) == getattr(instance, dep.parent_key),
            )
        )
        count = await session.scalar(stmt)
        if count:
            errors.append(ReferentialBlockError(entity_name(instance), entity_name(dep.model)))
    return errors
