"""Library for parsing POSIX TZ rules into recurring transition rules.

The footer of a TZif file holds a TZ string describing all transitions after
the last one in the file. TZ supports these two formats

No DST: std offset
  - std: Name of the timezone
  - offset: Time added to local time to get UTC
  Example: EST+5

DST: std offset dst [offset],start[/time],end[/time]
  - dst: Name of the Daylight savings time timezone
  - offset: Defaults to 1 hour ahead of STD offset if not specified
  - start & end: Time period when DST is in effect. The start/end have
    the following formats:
      Jn: A julian day between 1 and 365 (Feb 29th never counted)
      Mm.w.d:
          m: Month between 1 and 12
          d: Between 0 (Sunday) and 6 (Saturday)
          w: Between 1 and 5. Week 1 is first week d occurs, 5 is the last
      The time field is in hh:mm:ss. The hour can be 167 to -167.

The zero based julian day form `n` can't be expressed as a recurring rule
and is rejected.
"""

from __future__ import annotations

import datetime
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from ..calendar import DayOfWeek, Month
from ..offset import ZoneOffset
from ..transition_rule import TimeDefinition, ZoneOffsetTransitionRule

__all__ = [
    "Rule",
    "RuleDate",
    "RuleDay",
    "RuleOccurrence",
    "parse_tz_rule",
]

_LOGGER = logging.getLogger(__name__)

_ZERO = datetime.timedelta(seconds=0)
_DEFAULT_TIME_DELTA = datetime.timedelta(hours=2)

# Year used to put the start and end rules in chronological order
_REFERENCE_YEAR = 2001

# Cumulative days before each month in a year without a leap day
_DAYS_BEFORE_MONTH = [0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334, 365]


def _parse_time(values: dict[str, Any]) -> datetime.timedelta | None:
    """Convert an offset from [+/-]hh[:mm[:ss]] to a timedelta.

    The dict expects fields of hour, minutes, seconds from a regex match.
    """
    if (hour := values["hour"]) is None:
        return None
    sign = 1
    if hour.startswith("+"):
        hour = hour[1:]
    elif hour.startswith("-"):
        sign = -1
        hour = hour[1:]
    minutes = values.get("minutes") or "0"
    seconds = values.get("seconds") or "0"
    return datetime.timedelta(
        seconds=sign * (int(hour) * 60 * 60 + int(minutes) * 60 + int(seconds))
    )


@dataclass
class RuleDay:
    """A date referenced in a timezone rule for a julian day."""

    day_of_year: int
    """A day of the year between 1 and 365, leap days never counted."""

    time: datetime.timedelta
    """Offset of time in current local time when the rule goes into effect, default of 02:00:00."""

    def as_transition_rule(
        self,
        standard_offset: ZoneOffset,
        offset_before: ZoneOffset,
        offset_after: ZoneOffset,
    ) -> ZoneOffsetTransitionRule:
        """Return a transition rule on a fixed month and day."""
        if not 1 <= self.day_of_year <= 365:
            raise ValueError(f"Julian day must be between 1 and 365: {self.day_of_year}")
        # Since February 29th is never counted the month and day never vary
        month = next(
            month
            for month in Month
            if self.day_of_year <= _DAYS_BEFORE_MONTH[month]
        )
        day = self.day_of_year - _DAYS_BEFORE_MONTH[month - 1]
        return ZoneOffsetTransitionRule(
            month,
            day,
            None,
            self.time,
            TimeDefinition.WALL,
            standard_offset,
            offset_before,
            offset_after,
        )


@dataclass
class RuleDate:
    """A date referenced in a timezone rule."""

    month: int
    """A month between 1 and 12."""

    day_of_week: int
    """A day of the week between 0 (Sunday) and 6 (Saturday)."""

    week_of_month: int
    """A week number of the month (1 to 5) based on the first occurrence of day_of_week."""

    time: datetime.timedelta
    """Offset of time in current local time when the rule goes into effect, default of 02:00:00."""

    def as_transition_rule(
        self,
        standard_offset: ZoneOffset,
        offset_before: ZoneOffset,
        offset_after: ZoneOffset,
    ) -> ZoneOffsetTransitionRule:
        """Return a transition rule for the nth or last weekday of the month."""
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12: {self.month}")
        if not 1 <= self.week_of_month <= 5:
            raise ValueError(f"Week must be between 1 and 5: {self.week_of_month}")
        if not 0 <= self.day_of_week <= 6:
            raise ValueError(f"Day of week must be between 0 and 6: {self.day_of_week}")
        day_of_month_indicator = -1
        if self.week_of_month != 5:
            day_of_month_indicator = 1 + 7 * (self.week_of_month - 1)
        return ZoneOffsetTransitionRule(
            Month(self.month),
            day_of_month_indicator,
            DayOfWeek(self.day_of_week or 7),
            self.time,
            TimeDefinition.WALL,
            standard_offset,
            offset_before,
            offset_after,
        )


@dataclass
class RuleOccurrence:
    """A TimeZone rule occurrence."""

    name: str
    """The name of the timezone occurrence e.g. EST."""

    offset: datetime.timedelta
    """UTC offset for this timezone occurrence (not time added to local time)."""

    def __post_init__(self) -> None:
        """Convert the offset from time added to local time to get UTC to a UTC offset."""
        self.offset = _ZERO - self.offset


@dataclass
class Rule:
    """A rule for evaluating future timezone transitions."""

    std: RuleOccurrence
    """An occurrence of a timezone transition for standard time."""

    dst: Optional[RuleOccurrence] = None
    """An occurrence of a timezone transition for daylight saving time."""

    dst_start: Union[RuleDate, RuleDay, None] = None
    """Describes when dst goes into effect."""

    dst_end: Union[RuleDate, RuleDay, None] = None
    """Describes when dst ends (std starts)."""

    def __post_init__(self) -> None:
        """Infer the default DST offset if not specified."""
        if self.dst and not self.dst.offset:
            # If the dst offset is omitted, it defaults to one hour ahead of standard time.
            self.dst.offset = self.std.offset + datetime.timedelta(hours=1)

    @property
    def standard_offset(self) -> ZoneOffset:
        """Return the standard offset of the rule."""
        return ZoneOffset.from_timedelta(self.std.offset)

    def transition_rules(self) -> list[ZoneOffsetTransitionRule]:
        """Return the recurring rules in the order they occur within a year.

        A rule without daylight saving time has no transitions.
        """
        if not self.dst or self.dst_start is None or self.dst_end is None:
            return []
        std = self.standard_offset
        dst = ZoneOffset.from_timedelta(self.dst.offset)
        rules = [
            self.dst_start.as_transition_rule(std, std, dst),
            self.dst_end.as_transition_rule(std, dst, std),
        ]
        return sorted(
            rules, key=lambda rule: rule.create_transition(_REFERENCE_YEAR)
        )


# Regexp for parsing the TZ string
_OFFSET_RE_PATTERN: re.Pattern[str] = re.compile(
    r"(?P<name>(\<[+\-]?\d+\>|[a-zA-Z]+))"  # name
    r"((?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"  # offset
)
_START_END_RE_PATTERN = re.compile(
    # days in either julian (J prefix) or month.week.day (M prefix) format
    r",(J(?P<day_of_year>\d+)|M(?P<month>\d{1,2})\.(?P<week_of_month>\d)\.(?P<day_of_week>\d))"
    # time
    r"(\/(?P<hour>[+-]?\d+)(?::(?P<minutes>\d{1,2})(?::(?P<seconds>\d{1,2}))?)?)?"
)


def _rule_occurrence_from_match(match: re.Match[str]) -> RuleOccurrence:
    """Create a rule occurrence from a regex match."""
    return RuleOccurrence(
        name=match.group("name"), offset=_parse_time(match.groupdict()) or _ZERO
    )


def _rule_date_from_match(match: re.Match[str]) -> Union[RuleDay, RuleDate]:
    """Create a rule date from a regex match."""
    time = _parse_time(match.groupdict())
    if time is None:
        time = _DEFAULT_TIME_DELTA
    if match["day_of_year"] is not None:
        return RuleDay(day_of_year=int(match.group("day_of_year")), time=time)
    return RuleDate(
        month=int(match.group("month")),
        week_of_month=int(match.group("week_of_month")),
        day_of_week=int(match.group("day_of_week")),
        time=time,
    )


def parse_tz_rule(tz_str: str) -> Rule:
    """Parse the TZ string into a Rule object."""
    buffer = tz_str
    if (std_match := _OFFSET_RE_PATTERN.match(buffer)) is None:
        raise ValueError(f"Unable to parse TZ string: {tz_str}")
    buffer = buffer[std_match.end() :]
    if (dst_match := _OFFSET_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[dst_match.end() :]
    if (std_start := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_start.end() :]
    if (std_end := _START_END_RE_PATTERN.match(buffer)) is not None:
        buffer = buffer[std_end.end() :]
    if (std_start is None) != (std_end is None):
        raise ValueError(
            f"Unable to parse TZ string, should have both or neither start and end dates: {tz_str}"
        )
    if buffer:
        raise ValueError(
            f"Unable to parse TZ string, unexpected trailing data: {tz_str}"
        )
    _LOGGER.debug("Parsed TZ string: %s", tz_str)
    return Rule(
        std=_rule_occurrence_from_match(std_match),
        dst=_rule_occurrence_from_match(dst_match) if dst_match else None,
        dst_start=_rule_date_from_match(std_start) if std_start else None,
        dst_end=_rule_date_from_match(std_end) if std_end else None,
    )
