"""Column types encoding validity-interval bounds for the database."""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator

from asof.domain.temporal import INFINITY, is_infinity

# asyncpg reads and writes PostgreSQL 'infinity' timestamps as datetime.max;
# SQLite stores it as the greatest ISO string, so range filters still work.
STORED_INFINITY = datetime.max


class TemporalBound(TypeDecorator):
    """Naive-UTC ``DateTime`` that round-trips the :data:`INFINITY` marker.

    Python side: timezone-aware UTC datetimes or ``INFINITY``.
    Database side: naive UTC datetimes, ``datetime.max`` for infinity.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> datetime | None:
        if value is None:
            return None
        if is_infinity(value):
            return STORED_INFINITY
        if not isinstance(value, datetime):
            raise TypeError(f"TemporalBound expects a datetime, got {type(value).__name__}")
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        return value

    def process_result_value(self, value: datetime | None, dialect) -> Any:
        if value is None:
            return None
        if value.replace(tzinfo=None) == STORED_INFINITY:
            return INFINITY
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
