"""A date-time without a time-zone in the ISO calendar."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

from .calendar import (
    MAX_YEAR,
    MIN_YEAR,
    NANOS_PER_SECOND,
    SECONDS_PER_DAY,
    SECONDS_PER_HOUR,
    SECONDS_PER_MINUTE,
    DayOfWeek,
    Month,
    day_of_week,
    from_epoch_day,
    is_leap,
    to_epoch_day,
)
from .offset import ZoneOffset

__all__ = ["LocalDateTime"]


@dataclass(frozen=True, order=True)
class LocalDateTime:
    """A wall clock date and time such as 2007-12-03T10:15:30.

    Fields are declared from most to least significant so that the
    generated ordering is chronological.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    nano: int = 0

    def __post_init__(self) -> None:
        """Validate each of the date and time fields."""
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f"Year not in valid range: {self.year}")
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month not in valid range: {self.month}")
        if not 1 <= self.day <= Month(self.month).length(is_leap(self.year)):
            raise ValueError(
                f"Invalid date {self.year}-{self.month:02}-{self.day:02}"
            )
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour not in valid range: {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Minute not in valid range: {self.minute}")
        if not 0 <= self.second <= 59:
            raise ValueError(f"Second not in valid range: {self.second}")
        if not 0 <= self.nano < NANOS_PER_SECOND:
            raise ValueError(f"Nano of second not in valid range: {self.nano}")

    @classmethod
    def of_epoch_second(
        cls, epoch_second: int, nano: int, offset: ZoneOffset
    ) -> LocalDateTime:
        """Create the local date-time of an epoch second as seen with an offset."""
        local_second = epoch_second + offset.total_seconds
        epoch_day, second_of_day = divmod(local_second, SECONDS_PER_DAY)
        return cls._of_epoch_day(epoch_day, second_of_day, nano)

    @classmethod
    def _of_epoch_day(
        cls, epoch_day: int, second_of_day: int, nano: int
    ) -> LocalDateTime:
        year, month, day = from_epoch_day(epoch_day)
        hour, remainder = divmod(second_of_day, SECONDS_PER_HOUR)
        minute, second = divmod(remainder, SECONDS_PER_MINUTE)
        return cls(year, month, day, hour, minute, second, nano)

    @classmethod
    def from_datetime(cls, value: datetime.datetime) -> LocalDateTime:
        """Create from the wall clock fields of a datetime, ignoring any tzinfo."""
        return cls(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond * 1000,
        )

    def to_datetime(self) -> datetime.datetime:
        """Return a naive datetime truncated to microsecond precision."""
        return datetime.datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.nano // 1000,
        )

    def to_epoch_day(self) -> int:
        """Return the number of days since 1970-01-01."""
        return to_epoch_day(self.year, self.month, self.day)

    @property
    def second_of_day(self) -> int:
        """Return the time as seconds since midnight."""
        return (
            self.hour * SECONDS_PER_HOUR + self.minute * SECONDS_PER_MINUTE + self.second
        )

    @property
    def day_of_week(self) -> DayOfWeek:
        """Return the day of the week of the date."""
        return day_of_week(self.to_epoch_day())

    def to_epoch_second(self, offset: ZoneOffset) -> int:
        """Return the epoch second of this date-time interpreted with the offset."""
        return (
            self.to_epoch_day() * SECONDS_PER_DAY
            + self.second_of_day
            - offset.total_seconds
        )

    def plus_seconds(self, seconds: int) -> LocalDateTime:
        """Return a copy with the number of seconds added, which may be negative."""
        if seconds == 0:
            return self
        epoch_day, second_of_day = divmod(
            self.to_epoch_day() * SECONDS_PER_DAY + self.second_of_day + seconds,
            SECONDS_PER_DAY,
        )
        return self._of_epoch_day(epoch_day, second_of_day, self.nano)

    def plus_days(self, days: int) -> LocalDateTime:
        """Return a copy with the number of days added, which may be negative."""
        if days == 0:
            return self
        return self._of_epoch_day(
            self.to_epoch_day() + days, self.second_of_day, self.nano
        )

    def is_before(self, other: LocalDateTime) -> bool:
        """Return True if this date-time is strictly before the other."""
        return self < other

    def is_after(self, other: LocalDateTime) -> bool:
        """Return True if this date-time is strictly after the other."""
        return self > other

    def __str__(self) -> str:
        result = (
            f"{self.year:04}-{self.month:02}-{self.day:02}"
            f"T{self.hour:02}:{self.minute:02}"
        )
        if self.second or self.nano:
            result += f":{self.second:02}"
        if self.nano:
            result += f".{self.nano:09}".rstrip("0")
        return result
