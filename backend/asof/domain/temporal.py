"""Validity-interval semantics shared by every versioned record.

A version is visible at instant ``t`` when ``created_dt < t <= obsoleted_dt``.
Open versions carry the :data:`INFINITY` marker as their ``obsoleted_dt``.

The functions here work on any ordered key (datetimes in storage, plain
integers in tests); nothing in this module knows about SQL.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from asof.domain.exceptions import InvalidTimestampError

# Spellings of positive infinity accepted from callers and legacy data.
_INFINITY_SPELLINGS = frozenset({"infinity", "Infinity"})


class OpenEnded:
    """Tagged value for the open upper bound of an interval.

    Greater than every concrete value and equal to every accepted spelling
    of infinity. There is exactly one instance, :data:`INFINITY`.

    Its hash matches ``math.inf`` only. String spellings hash as strings, so
    pass them through :func:`normalize_infinity` before using them as set
    members or dict keys.
    """

    _instance: "OpenEnded | None" = None

    def __new__(cls) -> "OpenEnded":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __reduce__(self):
        return (OpenEnded, ())

    def __repr__(self) -> str:
        return "INFINITY"

    def __str__(self) -> str:
        return "infinity"

    def __eq__(self, other: object) -> bool:
        return is_infinity(other)

    def __ne__(self, other: object) -> bool:
        return not is_infinity(other)

    def __hash__(self) -> int:
        return hash(math.inf)

    def __lt__(self, other: object) -> bool:
        return False

    def __le__(self, other: object) -> bool:
        return is_infinity(other)

    def __gt__(self, other: object) -> bool:
        return not is_infinity(other)

    def __ge__(self, other: object) -> bool:
        return True


INFINITY = OpenEnded()

INFINITIES = (INFINITY, math.inf, "infinity", "Infinity")


def is_infinity(value: Any) -> bool:
    """True iff ``value`` encodes positive infinity in any accepted form."""
    if isinstance(value, OpenEnded):
        return True
    if isinstance(value, float):
        return math.isinf(value) and value > 0
    if isinstance(value, str):
        return value in _INFINITY_SPELLINGS
    return False


def normalize_infinity(value: Any) -> Any:
    """Map every infinity spelling to :data:`INFINITY`; pass anything else through."""
    return INFINITY if is_infinity(value) else value


def is_open(obsoleted_dt: Any) -> bool:
    """An unset or open-ended ``obsoleted_dt`` means the version is current."""
    return obsoleted_dt is None or is_infinity(obsoleted_dt)


def require_timestamp(ts: Any) -> Any:
    """Return ``ts`` normalized, or raise if a point-in-time was not supplied."""
    if ts is None:
        raise InvalidTimestampError()
    return normalize_infinity(ts)


def contains(created_dt: Any, obsoleted_dt: Any, t: Any) -> bool:
    """Is a version spanning ``(created_dt, obsoleted_dt]`` visible at ``t``?"""
    t = require_timestamp(t)
    return normalize_infinity(obsoleted_dt) >= t and normalize_infinity(created_dt) < t


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Any) -> Any:
    """Read a naive datetime as UTC; aware datetimes and other values pass through."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Interval:
    """Validity interval of one version."""

    created_dt: Any
    obsoleted_dt: Any = INFINITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "obsoleted_dt", normalize_infinity(self.obsoleted_dt))

    @property
    def is_open(self) -> bool:
        return is_infinity(self.obsoleted_dt)

    @property
    def is_empty(self) -> bool:
        return not self.created_dt < self.obsoleted_dt

    def contains(self, t: Any) -> bool:
        return contains(self.created_dt, self.obsoleted_dt, t)

    def overlaps(self, other: "Interval") -> bool:
        """Do the two intervals share at least one visible instant?"""
        return self.created_dt < other.obsoleted_dt and other.created_dt < self.obsoleted_dt
