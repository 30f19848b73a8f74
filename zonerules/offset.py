"""Library for fixed offsets from UTC."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import ClassVar

from .calendar import SECONDS_PER_HOUR, SECONDS_PER_MINUTE

__all__ = ["ZoneOffset"]

MAX_SECONDS = 18 * SECONDS_PER_HOUR


@dataclass(frozen=True, order=True)
class ZoneOffset:
    """A signed amount of time added to UTC to get local time.

    Offsets are ordered by their total seconds, so a more westerly offset
    sorts first. The valid range is -18:00 to +18:00.
    """

    total_seconds: int
    """The offset from UTC in seconds."""

    UTC: ClassVar[ZoneOffset]

    def __post_init__(self) -> None:
        """Verify the offset is within range."""
        if not -MAX_SECONDS <= self.total_seconds <= MAX_SECONDS:
            raise ValueError(
                f"Zone offset not in valid range: -18:00 to +18:00: {self.total_seconds}"
            )

    @classmethod
    def of_total_seconds(cls, total_seconds: int) -> ZoneOffset:
        """Create an offset from a number of seconds."""
        if total_seconds == 0:
            return cls.UTC
        return cls(total_seconds)

    @classmethod
    def of_hours(cls, hours: int) -> ZoneOffset:
        """Create an offset from a number of hours."""
        return cls.of_hours_minutes_seconds(hours, 0, 0)

    @classmethod
    def of_hours_minutes_seconds(
        cls, hours: int, minutes: int = 0, seconds: int = 0
    ) -> ZoneOffset:
        """Create an offset from hours, minutes and seconds which must share a sign."""
        if not -18 <= hours <= 18:
            raise ValueError(f"Zone offset hours not in valid range: {hours}")
        if not -59 <= minutes <= 59 or not -59 <= seconds <= 59:
            raise ValueError(
                f"Zone offset minutes and seconds not in valid range: {minutes}, {seconds}"
            )
        values = (hours, minutes, seconds)
        if any(value > 0 for value in values) and any(value < 0 for value in values):
            raise ValueError(
                f"Zone offset hours, minutes and seconds must have the same sign: {values}"
            )
        return cls.of_total_seconds(
            hours * SECONDS_PER_HOUR + minutes * SECONDS_PER_MINUTE + seconds
        )

    @classmethod
    def from_timedelta(cls, value: datetime.timedelta) -> ZoneOffset:
        """Create an offset from a whole number of seconds in a timedelta."""
        if value.microseconds:
            raise ValueError(f"Zone offset must be a whole number of seconds: {value}")
        return cls.of_total_seconds(value.days * 86400 + value.seconds)

    @property
    def id(self) -> str:
        """Return the normalized offset id such as `Z`, `+01:00` or `-04:56:02`."""
        if self.total_seconds == 0:
            return "Z"
        sign = "-" if self.total_seconds < 0 else "+"
        remainder = abs(self.total_seconds)
        hours, remainder = divmod(remainder, SECONDS_PER_HOUR)
        minutes, seconds = divmod(remainder, SECONDS_PER_MINUTE)
        result = f"{sign}{hours:02}:{minutes:02}"
        if seconds:
            result += f":{seconds:02}"
        return result

    def as_timedelta(self) -> datetime.timedelta:
        """Return the offset as a timedelta."""
        return datetime.timedelta(seconds=self.total_seconds)

    def as_timezone(self) -> datetime.timezone:
        """Return a fixed offset `datetime.timezone` for this offset."""
        if self.total_seconds == 0:
            return datetime.timezone.utc
        return datetime.timezone(self.as_timedelta())

    def __str__(self) -> str:
        return self.id

    def __repr__(self) -> str:
        return f"ZoneOffset({self.id})"


ZoneOffset.UTC = ZoneOffset(0)
