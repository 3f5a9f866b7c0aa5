"""Domain-specific exceptions — framework-independent."""

from typing import Any


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class InvalidTimestampError(ValueError):
    """Raised when a point-in-time lookup is called without a timestamp."""

    def __init__(self, message: str = "time cannot be None"):
        super().__init__(message)


class VersioningConfigurationError(Exception):
    """Raised at declaration time when a versioned model is misconfigured."""


class IdentityResolutionError(Exception):
    """Raised by an identity provider that cannot resolve the current actor.

    Never escapes the version writer: the actor id is simply left unset.
    """


# ── Validation errors ────────────────────────────────────────────────


class VersionValidationError(Exception):
    """A single validation failure attached to one field of a record."""

    kind = "invalid"

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field} {message}")

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "kind": self.kind, "message": self.message}


class UniquenessViolationError(VersionValidationError):
    """Another open version already holds the same business key."""

    kind = "uniqueness_violation"

    def __init__(self, field: str, message: str = "record must be unique"):
        super().__init__(field, message)


class DanglingReferenceError(VersionValidationError):
    """The record references a parent version that has been obsoleted."""

    kind = "dangling_reference"

    def __init__(self, field: str, message: str = "Obsoleted association value!"):
        super().__init__(field, message)


class ReferentialBlockError(VersionValidationError):
    """Removal refused because open dependent records still point at the row."""

    kind = "referential_block"

    def __init__(self, entity_type: str, dependent: str):
        self.entity_type = entity_type
        self.dependent = dependent
        super().__init__(
            "base",
            f"{entity_type} can't be deleted because {dependent} records exist",
        )


class ImmutableFieldError(VersionValidationError):
    """A write tried to rewrite a field that is append-only once persisted."""

    kind = "immutable_field"

    def __init__(self, field: str, message: str = "is read-only once set"):
        super().__init__(field, message)


class InvalidIntervalError(VersionValidationError):
    """The record's validity interval is empty or inverted."""

    kind = "invalid_interval"

    def __init__(self, field: str = "obsoleted_dt", message: str = "must be after created_dt"):
        super().__init__(field, message)


class RecordInvalidError(Exception):
    """Raised when a write or removal is blocked by one or more validation errors."""

    def __init__(self, entity_type: str, errors: list[VersionValidationError]):
        self.entity_type = entity_type
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{entity_type} is invalid: {summary}")

    def errors_for(self, field: str) -> list[VersionValidationError]:
        """Return the errors attached to ``field``."""
        return [e for e in self.errors if e.field == field]

    def has(self, error_type: type[VersionValidationError]) -> bool:
        return any(isinstance(e, error_type) for e in self.errors)

    def as_dicts(self) -> list[dict[str, Any]]:
        return [e.as_dict() for e in self.errors]
