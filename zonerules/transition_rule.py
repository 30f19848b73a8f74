"""A rule expressing how to create a transition in any year.

Zone data usually ends with a small set of recurring rules that describe
daylight saving changes for all future years, for example:

  - the 16th March
  - the Sunday on or after the 16th March
  - the Sunday on or before the 16th March
  - the last Sunday in February

These rules are expressed with a month, a day-of-month indicator and an
optional day-of-week. A negative day-of-month indicator counts back from
the end of the month, so -1 is the last day of the month. When a
day-of-week is present the date is moved forward (positive indicator) or
backward (negative indicator) to the first matching day.
"""

from __future__ import annotations

import datetime
import enum
import logging
from dataclasses import dataclass
from typing import Optional

from .calendar import (
    SECONDS_PER_DAY,
    DayOfWeek,
    Month,
    day_of_week,
    is_leap,
    to_epoch_day,
)
from .local_datetime import LocalDateTime
from .offset import ZoneOffset
from .transition import ZoneOffsetTransition

__all__ = [
    "TimeDefinition",
    "ZoneOffsetTransitionRule",
]

_LOGGER = logging.getLogger(__name__)

_MIDNIGHT = datetime.time()
_END_OF_DAY = datetime.timedelta(days=1)
_MAX_TIME = datetime.timedelta(hours=168)


class TimeDefinition(str, enum.Enum):
    """How the time of a transition rule is to be interpreted."""

    UTC = "UTC"
    """The time is relative to UTC."""

    WALL = "WALL"
    """The time is the wall clock time in effect before the transition."""

    STANDARD = "STANDARD"
    """The time is relative to the standard offset in effect."""

    def create_date_time(
        self,
        date_time: LocalDateTime,
        standard_offset: ZoneOffset,
        wall_offset: ZoneOffset,
    ) -> LocalDateTime:
        """Convert a date-time in this definition to wall clock time."""
        if self == TimeDefinition.UTC:
            return date_time.plus_seconds(wall_offset.total_seconds)
        if self == TimeDefinition.STANDARD:
            return date_time.plus_seconds(
                wall_offset.total_seconds - standard_offset.total_seconds
            )
        return date_time


@dataclass(frozen=True)
class ZoneOffsetTransitionRule:
    """A recurring rule that creates one transition each year."""

    month: Month
    """The month of the transition."""

    day_of_month_indicator: int
    """The day of month, or counting back from the end of the month when negative."""

    day_of_week: Optional[DayOfWeek]
    """The day of week the transition must fall on, if any."""

    time: datetime.timedelta
    """Time since local midnight of the resolved date, 24 hours for end of day."""

    time_definition: TimeDefinition
    """How the time is interpreted when creating the transition."""

    standard_offset: ZoneOffset
    """The standard offset in force at the transition."""

    offset_before: ZoneOffset
    """The offset before the transition."""

    offset_after: ZoneOffset
    """The offset after the transition."""

    def __post_init__(self) -> None:
        """Validate the day of month indicator and time."""
        if not -28 <= self.day_of_month_indicator <= 31 or not self.day_of_month_indicator:
            raise ValueError(
                "Day of month indicator must be between -28 and 31 inclusive excluding zero: "
                f"{self.day_of_month_indicator}"
            )
        if self.time.microseconds:
            raise ValueError(f"Time must be a whole number of seconds: {self.time}")
        if not -_MAX_TIME < self.time < _MAX_TIME:
            raise ValueError(f"Time must be within 167 hours of midnight: {self.time}")

    @classmethod
    def of(
        cls,
        month: Month | int,
        day_of_month_indicator: int,
        day_of_week: Optional[DayOfWeek | int],
        time: datetime.time,
        time_end_of_day: bool,
        time_definition: TimeDefinition,
        standard_offset: ZoneOffset,
        offset_before: ZoneOffset,
        offset_after: ZoneOffset,
    ) -> ZoneOffsetTransitionRule:
        """Create a rule from a time of day and an end of day flag."""
        if time_end_of_day and time != _MIDNIGHT:
            raise ValueError("Time must be midnight when end of day flag is true")
        if time.microsecond:
            raise ValueError("Time's nano-of-second must be zero")
        offset = datetime.timedelta(
            hours=time.hour, minutes=time.minute, seconds=time.second
        )
        if time_end_of_day:
            offset = _END_OF_DAY
        return cls(
            Month(month),
            day_of_month_indicator,
            DayOfWeek(day_of_week) if day_of_week is not None else None,
            offset,
            time_definition,
            standard_offset,
            offset_before,
            offset_after,
        )

    @property
    def time_end_of_day(self) -> bool:
        """Return True if the transition occurs at midnight at the end of the day."""
        return self.time == _END_OF_DAY

    @property
    def local_time(self) -> datetime.time | None:
        """Return the time of day, or None if the time falls on another day."""
        if not datetime.timedelta(0) <= self.time < _END_OF_DAY:
            return None
        return (datetime.datetime.min + self.time).time()

    def create_transition(self, year: int) -> ZoneOffsetTransition:
        """Create the transition for the specified year."""
        if self.day_of_month_indicator < 0:
            month_length = Month(self.month).length(is_leap(year))
            day = month_length + 1 + self.day_of_month_indicator
            epoch_day = to_epoch_day(year, self.month, day)
            if self.day_of_week is not None:
                # previous or same
                epoch_day -= (day_of_week(epoch_day) - self.day_of_week) % 7
        else:
            # A day beyond the end of the month rolls into the following month
            epoch_day = to_epoch_day(year, self.month, self.day_of_month_indicator)
            if self.day_of_week is not None:
                # next or same
                epoch_day += (self.day_of_week - day_of_week(epoch_day)) % 7
        local_second = epoch_day * SECONDS_PER_DAY + int(self.time.total_seconds())
        date_time = LocalDateTime.of_epoch_second(local_second, 0, ZoneOffset.UTC)
        transition = self.time_definition.create_date_time(
            date_time, self.standard_offset, self.offset_before
        )
        _LOGGER.debug("Created transition for %s in %d: %s", self, year, transition)
        return ZoneOffsetTransition.from_local(
            transition, self.offset_before, self.offset_after
        )

    def _describe_time(self) -> str:
        if self.time_end_of_day:
            return "24:00"
        if (local_time := self.local_time) is not None:
            return local_time.strftime("%H:%M:%S" if local_time.second else "%H:%M")
        total = int(self.time.total_seconds())
        sign = "-" if total < 0 else ""
        hours, remainder = divmod(abs(total), 3600)
        return f"{sign}{hours:02}:{remainder // 60:02}"

    def __repr__(self) -> str:
        kind = "Gap" if self.offset_after > self.offset_before else "Overlap"
        parts = [
            f"TransitionRule[{kind} {self.offset_before} to {self.offset_after}, "
        ]
        month = Month(self.month).name
        if self.day_of_week is not None:
            dow = DayOfWeek(self.day_of_week).name
            if self.day_of_month_indicator == -1:
                parts.append(f"{dow} on or before last day of {month}")
            elif self.day_of_month_indicator < 0:
                parts.append(
                    f"{dow} on or before last day minus "
                    f"{-self.day_of_month_indicator - 1} of {month}"
                )
            else:
                parts.append(f"{dow} on or after {month} {self.day_of_month_indicator}")
        else:
            parts.append(f"{month} {self.day_of_month_indicator}")
        parts.append(
            f" at {self._describe_time()} {self.time_definition.value}, "
            f"standard offset {self.standard_offset}]"
        )
        return "".join(parts)
