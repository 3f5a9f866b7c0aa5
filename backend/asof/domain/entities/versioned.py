"""Behaviour shared by every domain entity that lives in a version chain."""

from asof.domain.temporal import Interval, is_open


class VersionedEntity:
    """Mixin for dataclasses carrying the six version-chain fields.

    Subclasses declare ``id``, ``group_id``, ``created_dt``, ``obsoleted_dt``,
    ``user_id`` and ``o_user_id`` as dataclass fields.
    """

    @property
    def is_current(self) -> bool:
        return is_open(self.obsoleted_dt)

    @property
    def interval(self) -> Interval:
        return Interval(self.created_dt, self.obsoleted_dt)
