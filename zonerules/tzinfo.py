"""An implementation of `datetime.tzinfo` backed by zone rules.

This allows zone rules to be used directly with python datetime objects.
Ambiguous and skipped local times follow PEP 495: a datetime with `fold=0`
uses the offset before the transition and `fold=1` the offset after it.
"""

from __future__ import annotations

import datetime

from .instant import Instant
from .local_datetime import LocalDateTime
from .offset import ZoneOffset
from .rules import Gap, Overlap, Single, ZoneRules

__all__ = ["RulesTzInfo"]

_ZERO = datetime.timedelta(0)


class RulesTzInfo(datetime.tzinfo):
    """A tzinfo that resolves offsets from `ZoneRules`."""

    def __init__(self, rules: ZoneRules, key: str | None = None) -> None:
        """Initialize RulesTzInfo."""
        self._rules = rules
        self._key = key

    @property
    def rules(self) -> ZoneRules:
        """Return the zone rules."""
        return self._rules

    @property
    def key(self) -> str | None:
        """Return the zone id, if known."""
        return self._key

    def _offset(self, dt: datetime.datetime) -> ZoneOffset:
        match self._rules.offset_info(LocalDateTime.from_datetime(dt)):
            case Single(offset):
                return offset
            case Gap(transition) | Overlap(transition):
                if dt.fold:
                    return transition.offset_after
                return transition.offset_before
        raise AssertionError("Unreachable offset info")

    def utcoffset(self, dt: datetime.datetime | None) -> datetime.timedelta:
        """Return offset of local time from UTC, as a timedelta object."""
        if dt is None:
            return _ZERO
        return self._offset(dt).as_timedelta()

    def dst(self, dt: datetime.datetime | None) -> datetime.timedelta | None:
        """Return the daylight saving time (DST) adjustment, if applicable."""
        if dt is None:
            return None
        local = LocalDateTime.from_datetime(dt)
        offset = self._offset(dt)
        standard = self._rules.standard_offset_at(
            Instant(local.to_epoch_second(offset), local.nano)
        )
        return offset.as_timedelta() - standard.as_timedelta()

    def tzname(self, dt: datetime.datetime | None) -> str | None:
        """Return the zone id, or the offset id when the zone id is not known."""
        if dt is None:
            return self._key
        if self._key:
            return self._key
        return self._offset(dt).id

    def fromutc(self, dt: datetime.datetime) -> datetime.datetime:
        """Convert a UTC time, with this tzinfo attached, to local time."""
        if dt.tzinfo is not self:
            raise ValueError("fromutc: dt.tzinfo is not self")
        instant = Instant.from_datetime(dt.replace(tzinfo=datetime.timezone.utc))
        offset = self._rules.offset_at(instant)
        local = dt + offset.as_timedelta()
        transition = self._rules.transition_at(LocalDateTime.from_datetime(local))
        if (
            transition is not None
            and transition.is_overlap()
            and offset == transition.offset_after
        ):
            return local.replace(fold=1)
        return local

    def __str__(self) -> str:
        """Return the string representation of the timezone."""
        if self._key:
            return self._key
        return repr(self._rules)

    def __repr__(self) -> str:
        """Return the string representation of the timezone."""
        if self._key:
            return f"RulesTzInfo({self._key})"
        return f"RulesTzInfo({self._rules!r})"
