from .mixin import VERSION_COLUMNS, VersionedMixin, entity_name, is_versioned
from .references import AssociationRegistry, Dependent, Reference
from .registry import VersioningRegistry, VersioningSpec
from .query import AsOfScope, lookup, open_at, temporal_lookup
from .pipeline import VersioningPipeline

__all__ = [
    "VERSION_COLUMNS",
    "VersionedMixin",
    "entity_name",
    "is_versioned",
    "AssociationRegistry",
    "Dependent",
    "Reference",
    "VersioningRegistry",
    "VersioningSpec",
    "AsOfScope",
    "lookup",
    "open_at",
    "temporal_lookup",
    "VersioningPipeline",
]
