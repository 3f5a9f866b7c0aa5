"""Domain entity — a versioned product category."""

from dataclasses import dataclass
from datetime import datetime

from asof.domain.entities.versioned import VersionedEntity
from asof.domain.temporal import OpenEnded


@dataclass
class Category(VersionedEntity):
    """One version of a category.

    Categories are append-only: a version cannot be removed while open
    products still reference it.
    """

    code: str
    name: str
    description: str | None = None
    id: str | None = None
    group_id: str | None = None
    created_dt: datetime | None = None
    obsoleted_dt: datetime | OpenEnded | None = None
    user_id: str | None = None
    o_user_id: str | None = None
