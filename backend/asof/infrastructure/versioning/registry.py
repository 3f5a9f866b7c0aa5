"""Declaration interface for versioned models.

A :class:`VersioningRegistry` is built once at model-definition time and
handed to the write pipeline and the point-in-time query builder::

    versioning = VersioningRegistry()

    @versioning.versioned("sku")
    class ProductModel(VersionedMixin, Base):
        ...

    versioning.belongs_to(ProductModel, "category")
"""

from dataclasses import dataclass, field

from sqlalchemy import UniqueConstraint

from asof.domain.exceptions import VersioningConfigurationError
from asof.infrastructure.versioning.mixin import VERSION_COLUMNS, entity_name, is_versioned
from asof.infrastructure.versioning.references import AssociationRegistry


@dataclass
class VersioningSpec:
    """Everything declared about one versioned model."""

    model: type
    append_only: bool = False
    business_key: tuple[str, ...] = ()
    scope: tuple[str, ...] = ()
    references: list[str] = field(default_factory=list)

    @property
    def entity_name(self) -> str:
        return entity_name(self.model)

    @property
    def table_name(self) -> str:
        return self.model.__table__.name

    @property
    def uniqueness(self) -> tuple[str, ...]:
        """Business key plus scope, as declared — useful for introspection."""
        return self.business_key + self.scope

    @property
    def constraint_columns(self) -> tuple[str, ...]:
        """Columns of the enforced unique constraint."""
        if not self.uniqueness:
            return ()
        return self.uniqueness + ("obsoleted_dt",)


class VersioningRegistry:
    """Holds the :class:`VersioningSpec` of every declared model."""

    def __init__(self) -> None:
        self._specs: dict[type, VersioningSpec] = {}
        self.associations = AssociationRegistry()

    def __contains__(self, model: type) -> bool:
        return model in self._specs

    @property
    def models(self) -> list[type]:
        return list(self._specs)

    def spec_for(self, model: type) -> VersioningSpec:
        try:
            return self._specs[model]
        except KeyError:
            raise VersioningConfigurationError(
                f"{model.__name__} is not registered as a versioned model"
            ) from None

    # ── Declarations ───────────────────────────────────────────────

    def register(self, model: type, *, append_only: bool = False) -> VersioningSpec:
        """Declare ``model`` versioned; at most one open version per group."""
        if not is_versioned(model):
            raise VersioningConfigurationError(
                f"{model.__name__} must inherit from VersionedMixin"
            )
        if model in self._specs:
            raise VersioningConfigurationError(f"{model.__name__} is already registered")

        spec = VersioningSpec(model=model, append_only=append_only)
        model.__table__.append_constraint(
            UniqueConstraint(
                model.__table__.c.group_id,
                model.__table__.c.obsoleted_dt,
                name=f"uq_{spec.table_name}_open_group",
            )
        )
        self._specs[model] = spec
        return spec

    def validates_uniqueness_of(
        self,
        model: type,
        *attr_names: str,
        scope: tuple[str, ...] | list[str] = (),
    ) -> VersioningSpec:
        """Make ``attr_names`` (+ ``scope``) unique among versions sharing ``obsoleted_dt``.

        May only be called once per model.
        """
        spec = self.spec_for(model)
        if spec.business_key:
            raise VersioningConfigurationError(
                f"uniqueness of {model.__name__} is already declared as {spec.uniqueness}"
            )
        if not attr_names:
            raise VersioningConfigurationError("at least one attribute is required")

        columns = model.__mapper__.columns
        for attr in (*attr_names, *scope):
            if attr not in columns:
                raise VersioningConfigurationError(f"{model.__name__} has no column '{attr}'")
            if attr in VERSION_COLUMNS:
                raise VersioningConfigurationError(
                    f"'{attr}' is a version column and cannot be part of a business key"
                )

        spec.business_key = tuple(attr_names)
        spec.scope = tuple(scope)
        model.__table__.append_constraint(
            UniqueConstraint(
                *(columns[attr] for attr in spec.constraint_columns),
                name=f"uq_{spec.table_name}_open_version",
            )
        )
        return spec

    def belongs_to(self, child: type, relationship_name: str) -> None:
        """Validate ``child.relationship_name`` against obsoleted parents and
        register ``child`` as a dependent of the parent model."""
        spec = self.spec_for(child)
        self.associations.add(child, relationship_name)
        spec.references.append(relationship_name)

    def versioned(
        self,
        *attr_names: str,
        scope: tuple[str, ...] | list[str] = (),
        append_only: bool = False,
    ):
        """Class decorator combining :meth:`register` and :meth:`validates_uniqueness_of`."""

        def decorator(model: type) -> type:
            self.register(model, append_only=append_only)
            if attr_names:
                self.validates_uniqueness_of(model, *attr_names, scope=scope)
            return model

        return decorator
