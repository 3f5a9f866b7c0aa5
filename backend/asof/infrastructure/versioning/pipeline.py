"""Write pipeline for versioned models.

Every write runs the same ordered stages::

    stamp → chain-field checks → uniqueness → references → persist

and every physical removal runs the referential guard first. Validation
failures are collected and raised together as a RecordInvalidError.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from asof.application.interfaces.identity_provider import IdentityProvider
from asof.domain.exceptions import (
    ImmutableFieldError,
    RecordInvalidError,
    UniquenessViolationError,
    VersionValidationError,
)
from asof.domain.temporal import as_utc, is_open, utc_now
from asof.infrastructure.logging.colored_logger import VersioningLogger, VersionStage
from asof.infrastructure.versioning.references import (
    dangling_reference_errors,
    referential_block_errors,
)
from asof.infrastructure.versioning.registry import VersioningRegistry
from asof.infrastructure.versioning.uniqueness import (
    conflicting_field,
    open_group_errors,
    uniqueness_errors,
)
from asof.infrastructure.versioning.writer import (
    has_changes,
    immutable_field_errors,
    interval_errors,
    resolve_actor,
    stamp,
)

M = TypeVar("M")


class VersioningPipeline:
    """Runs versioned writes and removals against an AsyncSession."""

    def __init__(
        self,
        registry: VersioningRegistry,
        identity: IdentityProvider | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.registry = registry
        self._identity = identity
        self._clock = clock
        self._log = VersioningLogger("asof.versioning")

    def now(self) -> datetime:
        return self._clock()

    async def save(self, session: AsyncSession, instance: M) -> M:
        """Stamp, validate and flush ``instance``. A row without changes is left alone."""
        spec = self.registry.spec_for(type(instance))

        if not has_changes(instance):
            self._log.detail("no changes, skipping", entity=spec.entity_name, id=instance.id)
            return instance

        with self._log.timed_step(VersionStage.STAMP, f"Stamping {spec.entity_name}"):
            stamp(
                instance,
                changed=True,
                actor_id=resolve_actor(self._identity),
                now=self.now(),
            )

        errors: list[VersionValidationError] = []
        errors += immutable_field_errors(instance)
        errors += interval_errors(instance)
        with session.no_autoflush:
            with self._log.timed_step(VersionStage.VALIDATE, f"Validating {spec.entity_name}"):
                errors += await uniqueness_errors(session, instance, spec.uniqueness)
                errors += await open_group_errors(session, instance)
                errors += await dangling_reference_errors(
                    session, instance, self.registry.associations.references_of(spec.model)
                )

        if errors:
            self._log.rejected(f"{spec.entity_name} {instance.id} not saved", errors)
            raise RecordInvalidError(spec.entity_name, errors)

        with self._log.timed_step(
            VersionStage.PERSIST,
            f"Saving {spec.entity_name}",
            id=instance.id,
            group_id=instance.group_id,
        ):
            session.add(instance)
            try:
                await session.flush()
            except IntegrityError as exc:
                message = str(exc.orig)
                if "unique" not in message.lower():
                    raise
                field = conflicting_field(message, spec.table_name, spec.uniqueness)
                raise RecordInvalidError(
                    spec.entity_name, [UniquenessViolationError(field)]
                ) from exc
        return instance

    async def obsolete(self, session: AsyncSession, instance: M, at: datetime | None = None) -> M:
        """Close the open version ``instance`` at ``at`` (default: now)."""
        spec = self.registry.spec_for(type(instance))
        if not is_open(instance.obsoleted_dt):
            raise RecordInvalidError(
                spec.entity_name,
                [ImmutableFieldError("obsoleted_dt", "version is already obsoleted")],
            )

        at = as_utc(at or self.now())
        self._log.step_start(VersionStage.CLOSE, f"Closing {spec.entity_name}", id=instance.id, at=at)
        instance.obsoleted_dt = at
        return await self.save(session, instance)

    async def destroy(self, session: AsyncSession, instance: Any) -> None:
        """Physically remove ``instance``.

        Append-only models are refused while open dependents point at them.
        """
        spec = self.registry.spec_for(type(instance))

        with self._log.timed_step(VersionStage.DESTROY, f"Removing {spec.entity_name}", id=instance.id):
            if spec.append_only:
                with session.no_autoflush:
                    errors = await referential_block_errors(
                        session,
                        instance,
                        self.registry.associations.dependents_of(spec.model),
                    )
                if errors:
                    self._log.rejected(f"{spec.entity_name} {instance.id} not removed", errors)
                    raise RecordInvalidError(spec.entity_name, list(errors))

            await session.delete(instance)
            await session.flush()
