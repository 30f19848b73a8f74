"""A library for resolving UTC offsets from time-zone rules.

The `ZoneRules` class holds the historic offset transitions of a time-zone
and the recurring rules used for future years. It answers which offset
applies at an `Instant`, and whether a `LocalDateTime` is normal, falls in a
gap, or falls in an overlap.
"""

from .calendar import DayOfWeek, Month
from .exceptions import InvalidRulesError, TzifError, UnknownZoneError, ZoneRulesError
from .instant import Instant
from .local_datetime import LocalDateTime
from .offset import ZoneOffset
from .rules import Gap, OffsetInfo, Overlap, Single, ZoneRules
from .transition import ZoneOffsetTransition
from .transition_rule import TimeDefinition, ZoneOffsetTransitionRule

__all__ = [
    "DayOfWeek",
    "Gap",
    "Instant",
    "InvalidRulesError",
    "LocalDateTime",
    "Month",
    "OffsetInfo",
    "Overlap",
    "Single",
    "TimeDefinition",
    "TzifError",
    "UnknownZoneError",
    "ZoneOffset",
    "ZoneOffsetTransition",
    "ZoneOffsetTransitionRule",
    "ZoneRules",
    "ZoneRulesError",
    "cache",
    "compat",
    "model",
    "provider",
    "tzif",
    "tzinfo",
]
