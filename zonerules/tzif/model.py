"""Data model for decoded TZif data."""

from collections import namedtuple
from dataclasses import dataclass, field
from typing import Optional

from .tz_rule import Rule


@dataclass
class LocalTimeType:
    """A local time type record referenced by transitions."""

    utoff: int
    """Number of seconds added to UTC to determine local time."""

    dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""

    designation: str
    """A designation string such as EST."""


@dataclass
class TzifTransition:
    """An individual transition in the data block."""

    transition_time: int
    """A transition time at which the rules for computing local time may change."""

    utoff: int
    """Number of seconds added to UTC to determine local time."""

    dst: bool
    """Determines if local time is Daylight Savings Time (else Standard time)."""

    isstdcnt: bool
    """Determines if the transition time is standard time (else, wall clock time)."""

    isutccnt: bool
    """Determines if the transition time is UTC time, else is a local time."""

    designation: str
    """A designation string."""


LeapSecond = namedtuple("LeapSecond", ["occurrence", "correction"])
"""A correction that needs to be applied to UTC in order to determine TAI.

The occurrence is the time at which the leap-second correction occurs.
The correction is the value of LEAPCORR on or after the occurrence (1 or -1).
"""


@dataclass
class TzifData:
    """The results of decoding a TZif file."""

    transitions: list[TzifTransition]
    """Local time changes."""

    local_time_types: list[LocalTimeType]
    """Local time types, the first applies before the first transition."""

    leap_seconds: list[LeapSecond] = field(default_factory=list)

    footer: Optional[str] = None
    """The raw TZ string from the footer of a version 2+ file."""

    rule: Optional[Rule] = None
    """A rule for computing local time changes after the last transition."""
