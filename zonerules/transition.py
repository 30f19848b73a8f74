"""A transition between two offsets caused by a discontinuity in local time.

A transition is normally the result of a daylight saving cutover. The
discontinuity is normally a gap in spring and an overlap in autumn.

Gaps occur where there are local date-times that simply do not exist, for
example when the offset changes from +03:00 to +04:00. This might be
described as 'the clocks will move forward one hour tonight at 1am'.

Overlaps occur where there are local date-times that exist twice, for
example when the offset changes from +04:00 to +03:00. This might be
described as 'the clocks will move back one hour tonight at 2am'.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import Any

from .instant import Instant
from .local_datetime import LocalDateTime
from .offset import ZoneOffset

__all__ = ["ZoneOffsetTransition"]


@dataclass(frozen=True)
class ZoneOffsetTransition:
    """A discontinuity between two offsets at a specific instant.

    Transitions are ordered by their instant only and the offsets are
    ignored, making the ordering inconsistent with equality.
    """

    epoch_second: int
    """The first epoch second when the after offset applies."""

    date_time_before: LocalDateTime
    """The local transition date-time as expressed with the before offset."""

    offset_before: ZoneOffset
    """The offset in effect before the transition."""

    offset_after: ZoneOffset
    """The offset in effect at and after the transition."""

    @classmethod
    def from_local(
        cls,
        date_time_before: LocalDateTime,
        offset_before: ZoneOffset,
        offset_after: ZoneOffset,
    ) -> ZoneOffsetTransition:
        """Create a transition from the local date-time seen with the before offset."""
        if date_time_before.nano != 0:
            raise AssertionError(
                f"Transition date-time must be a whole second: {date_time_before}"
            )
        return cls(
            date_time_before.to_epoch_second(offset_before),
            date_time_before,
            offset_before,
            offset_after,
        )

    @classmethod
    def from_epoch_second(
        cls, epoch_second: int, offset_before: ZoneOffset, offset_after: ZoneOffset
    ) -> ZoneOffsetTransition:
        """Create a transition at an epoch second."""
        return cls(
            epoch_second,
            LocalDateTime.of_epoch_second(epoch_second, 0, offset_before),
            offset_before,
            offset_after,
        )

    @classmethod
    def of(
        cls,
        date_time_before: LocalDateTime,
        offset_before: ZoneOffset,
        offset_after: ZoneOffset,
    ) -> ZoneOffsetTransition:
        """Create a validated transition between two different offsets.

        Raises ValueError if the offsets are equal or the date-time has a
        fractional second.
        """
        if offset_before == offset_after:
            raise ValueError("Offsets must not be equal")
        if date_time_before.nano != 0:
            raise ValueError("Nano-of-second must be zero")
        return cls.from_local(date_time_before, offset_before, offset_after)

    @property
    def instant(self) -> Instant:
        """Return the first instant that the after offset applies."""
        return Instant(self.epoch_second)

    @property
    def date_time_after(self) -> LocalDateTime:
        """Return the local transition date-time as expressed with the after offset.

        This is the first date-time after the discontinuity, and represents
        the same instant as the before date-time with the before offset.
        """
        return self.date_time_before.plus_seconds(self.duration_seconds)

    @property
    def duration_seconds(self) -> int:
        """Return the length of the discontinuity, negative for an overlap."""
        return self.offset_after.total_seconds - self.offset_before.total_seconds

    @property
    def duration(self) -> datetime.timedelta:
        """Return the length of the discontinuity, negative for an overlap."""
        return datetime.timedelta(seconds=self.duration_seconds)

    def is_gap(self) -> bool:
        """Return True if local date-times are skipped by this transition."""
        return self.offset_after.total_seconds > self.offset_before.total_seconds

    def is_overlap(self) -> bool:
        """Return True if local date-times are repeated by this transition."""
        return self.offset_after.total_seconds < self.offset_before.total_seconds

    def is_valid_offset(self, offset: ZoneOffset) -> bool:
        """Return True if the offset is valid at some point during the transition.

        A gap is never valid, while an overlap accepts either offset.
        """
        if self.is_gap():
            return False
        return offset in (self.offset_before, self.offset_after)

    def valid_offsets(self) -> list[ZoneOffset]:
        """Return the offsets valid during the transition, earlier instant first."""
        if self.is_gap():
            return []
        return [self.offset_before, self.offset_after]

    def __lt__(self, other: Any) -> bool:
        if not isinstance(other, ZoneOffsetTransition):
            return NotImplemented
        return self.epoch_second < other.epoch_second

    def __gt__(self, other: Any) -> bool:
        if not isinstance(other, ZoneOffsetTransition):
            return NotImplemented
        return self.epoch_second > other.epoch_second

    def __le__(self, other: Any) -> bool:
        if not isinstance(other, ZoneOffsetTransition):
            return NotImplemented
        return self.epoch_second <= other.epoch_second

    def __ge__(self, other: Any) -> bool:
        if not isinstance(other, ZoneOffsetTransition):
            return NotImplemented
        return self.epoch_second >= other.epoch_second

    def __repr__(self) -> str:
        kind = "Gap" if self.is_gap() else "Overlap"
        return (
            f"Transition[{kind} at {self.date_time_before}{self.offset_before} "
            f"to {self.offset_after}]"
        )
