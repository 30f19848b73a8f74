"""An instantaneous point on the time-line."""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from typing import ClassVar

from .calendar import (
    MAX_YEAR,
    MIN_YEAR,
    NANOS_PER_SECOND,
    SECONDS_PER_DAY,
    to_epoch_day,
)

__all__ = ["Instant", "MIN_SECOND", "MAX_SECOND"]

MIN_SECOND = to_epoch_day(MIN_YEAR, 1, 1) * SECONDS_PER_DAY
"""The first epoch second of the supported year range."""

MAX_SECOND = to_epoch_day(MAX_YEAR, 12, 31) * SECONDS_PER_DAY + SECONDS_PER_DAY - 1
"""The last epoch second of the supported year range."""

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)


@dataclass(frozen=True, order=True)
class Instant:
    """A point on the time-line as seconds and nanoseconds from 1970-01-01T00:00Z."""

    epoch_second: int
    """The number of seconds from the epoch."""

    nano: int = 0
    """The nanosecond within the second, always positive."""

    EPOCH: ClassVar[Instant]

    def __post_init__(self) -> None:
        """Validate the instant is within range."""
        if not MIN_SECOND <= self.epoch_second <= MAX_SECOND:
            raise ValueError(f"Instant exceeds minimum or maximum: {self.epoch_second}")
        if not 0 <= self.nano < NANOS_PER_SECOND:
            raise ValueError(f"Nano of second not in valid range: {self.nano}")

    @classmethod
    def of_epoch_second(cls, epoch_second: int, nano_adjustment: int = 0) -> Instant:
        """Create an instant, normalizing a nanosecond adjustment of any size."""
        seconds, nano = divmod(nano_adjustment, NANOS_PER_SECOND)
        return cls(epoch_second + seconds, nano)

    @classmethod
    def from_datetime(cls, value: datetime.datetime) -> Instant:
        """Create an instant from a timezone aware datetime."""
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError(f"Expected a timezone aware datetime: {value}")
        delta = value - _EPOCH
        return cls(
            delta.days * SECONDS_PER_DAY + delta.seconds, delta.microseconds * 1000
        )

    def to_datetime(self) -> datetime.datetime:
        """Return a UTC datetime truncated to microsecond precision."""
        return _EPOCH + datetime.timedelta(
            seconds=self.epoch_second, microseconds=self.nano // 1000
        )


Instant.EPOCH = Instant(0)
