"""Domain entity — a versioned catalogue product."""

from dataclasses import dataclass
from datetime import datetime

from asof.domain.entities.versioned import VersionedEntity
from asof.domain.temporal import OpenEnded


@dataclass
class Product(VersionedEntity):
    """One version of a product; ``sku`` is unique among open versions."""

    sku: str
    name: str
    price_cents: int = 0
    category_id: str | None = None
    id: str | None = None
    group_id: str | None = None
    created_dt: datetime | None = None
    obsoleted_dt: datetime | OpenEnded | None = None
    user_id: str | None = None
    o_user_id: str | None = None
