"""Helpers for the proleptic ISO-8601 calendar.

Dates are converted to and from an epoch-day count, the number of days
since 1970-01-01, so that arithmetic works across the entire supported
year range rather than the narrower range of `datetime.date`.
"""

from __future__ import annotations

import enum

__all__ = [
    "DayOfWeek",
    "Month",
    "MIN_YEAR",
    "MAX_YEAR",
    "SECONDS_PER_DAY",
    "is_leap",
    "to_epoch_day",
    "from_epoch_day",
    "day_of_week",
]

MIN_YEAR = -999_999_999
MAX_YEAR = 999_999_999

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 60 * 60
SECONDS_PER_DAY = 24 * SECONDS_PER_HOUR
NANOS_PER_SECOND = 1_000_000_000

# Days from 0000-03-01 to 1970-01-01 in the shifted (March based) calendar
_DAYS_0000_TO_1970 = 719468
_DAYS_PER_CYCLE = 146097


class DayOfWeek(enum.IntEnum):
    """A day of the week, numbered from Monday (1) to Sunday (7)."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


class Month(enum.IntEnum):
    """A month of the year, numbered from January (1) to December (12)."""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def length(self, leap_year: bool) -> int:
        """Return the number of days in this month."""
        if self == Month.FEBRUARY:
            return 29 if leap_year else 28
        if self in (Month.APRIL, Month.JUNE, Month.SEPTEMBER, Month.NOVEMBER):
            return 30
        return 31


def is_leap(year: int) -> bool:
    """Return True if the year is a leap year in the ISO calendar."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def to_epoch_day(year: int, month: int, day: int) -> int:
    """Return the number of days since 1970-01-01 for the date.

    The day is not validated against the month length, so a day past the
    end of the month rolls into the following month.
    """
    # Shift the year to start in March so the leap day is last
    if month <= 2:
        year -= 1
    era = year // 400
    year_of_era = year - era * 400
    day_of_year = (153 * (month + (-3 if month > 2 else 9)) + 2) // 5 + day - 1
    day_of_era = (
        year_of_era * 365 + year_of_era // 4 - year_of_era // 100 + day_of_year
    )
    return era * _DAYS_PER_CYCLE + day_of_era - _DAYS_0000_TO_1970


def from_epoch_day(epoch_day: int) -> tuple[int, int, int]:
    """Return the (year, month, day) for a number of days since 1970-01-01."""
    shifted = epoch_day + _DAYS_0000_TO_1970
    era = shifted // _DAYS_PER_CYCLE
    day_of_era = shifted - era * _DAYS_PER_CYCLE
    year_of_era = (
        day_of_era
        - day_of_era // 1460
        + day_of_era // 36524
        - day_of_era // (_DAYS_PER_CYCLE - 1)
    ) // 365
    day_of_year = day_of_era - (
        365 * year_of_era + year_of_era // 4 - year_of_era // 100
    )
    shifted_month = (5 * day_of_year + 2) // 153
    day = day_of_year - (153 * shifted_month + 2) // 5 + 1
    month = shifted_month + 3 if shifted_month < 10 else shifted_month - 9
    year = year_of_era + era * 400
    if month <= 2:
        year += 1
    return (year, month, day)


def day_of_week(epoch_day: int) -> DayOfWeek:
    """Return the day of the week for a number of days since 1970-01-01."""
    # 1970-01-01 was a Thursday
    return DayOfWeek((epoch_day + 3) % 7 + 1)
