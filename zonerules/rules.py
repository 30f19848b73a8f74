"""The rules defining how the zone offset varies for a single time-zone.

The rules model all the historic and future transitions for a time-zone.
Historic transitions are held in sorted arrays and searched with `bisect`,
while transitions after the last historic one are generated from a small
list of recurring `ZoneOffsetTransitionRule`s.

A local date-time resolves to one of three states:

  - `Single`: the normal case, with exactly one valid offset.
  - `Gap`: the local date-time was skipped when the clocks moved forward.
  - `Overlap`: the local date-time occurred twice when the clocks moved back.

Instances are immutable and safe to share between threads. The only
mutable state is the cache of transitions generated from the rules.
"""

from __future__ import annotations

import bisect
import datetime
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Union

from .cache import TransitionCache
from .calendar import MAX_YEAR, SECONDS_PER_DAY, from_epoch_day
from .exceptions import InvalidRulesError
from .instant import Instant
from .local_datetime import LocalDateTime
from .offset import ZoneOffset
from .transition import ZoneOffsetTransition
from .transition_rule import ZoneOffsetTransitionRule

__all__ = [
    "ZoneRules",
    "OffsetInfo",
    "Single",
    "Gap",
    "Overlap",
    "MAX_LAST_RULES",
]

_LOGGER = logging.getLogger(__name__)

MAX_LAST_RULES = 16

_ZERO = datetime.timedelta(0)


@dataclass(frozen=True)
class Single:
    """A local date-time with exactly one valid offset."""

    offset: ZoneOffset


@dataclass(frozen=True)
class Gap:
    """A local date-time skipped by a transition, with no valid offset."""

    transition: ZoneOffsetTransition


@dataclass(frozen=True)
class Overlap:
    """A local date-time repeated by a transition, with two valid offsets."""

    transition: ZoneOffsetTransition


OffsetInfo = Union[Single, Gap, Overlap]
"""The resolution of a local date-time against the zone rules."""


def _find_year(epoch_second: int, offset: ZoneOffset) -> int:
    """Return the year of the epoch second as seen with the offset."""
    local_epoch_day = (epoch_second + offset.total_seconds) // SECONDS_PER_DAY
    return from_epoch_day(local_epoch_day)[0]


def _check_sorted(name: str, values: Sequence[int]) -> None:
    for prev, cur in zip(values, values[1:]):
        if cur <= prev:
            raise InvalidRulesError(
                f"{name} must be in strictly increasing order: {prev} >= {cur}"
            )


def _local_transitions(
    transitions: Iterable[ZoneOffsetTransition],
) -> tuple[LocalDateTime, ...]:
    """Flatten each transition into a pair of local date-times.

    A gap is stored as (before, after) and an overlap as (after, before) so
    that the result is non-decreasing and can be binary searched.
    """
    result: list[LocalDateTime] = []
    for trans in transitions:
        if trans.is_gap():
            result.extend((trans.date_time_before, trans.date_time_after))
        else:
            result.extend((trans.date_time_after, trans.date_time_before))
    return tuple(result)


class ZoneRules:
    """The offset rules for a time-zone."""

    def __init__(
        self,
        standard_transitions: Sequence[int],
        standard_offsets: Sequence[ZoneOffset],
        savings_instant_transitions: Sequence[int],
        wall_offsets: Sequence[ZoneOffset],
        last_rules: Sequence[ZoneOffsetTransitionRule] = (),
        *,
        savings_local_transitions: Sequence[LocalDateTime] | None = None,
    ) -> None:
        """Initialize ZoneRules from the parallel transition arrays.

        Prefer the `of`, `of_transitions` or `from_arrays` factories.
        """
        if len(standard_offsets) != len(standard_transitions) + 1:
            raise InvalidRulesError(
                "Expected one more standard offset than standard transitions: "
                f"{len(standard_offsets)} != {len(standard_transitions)} + 1"
            )
        if len(wall_offsets) != len(savings_instant_transitions) + 1:
            raise InvalidRulesError(
                "Expected one more wall offset than savings transitions: "
                f"{len(wall_offsets)} != {len(savings_instant_transitions)} + 1"
            )
        if len(last_rules) > MAX_LAST_RULES:
            raise InvalidRulesError(
                f"Too many transition rules: {len(last_rules)} > {MAX_LAST_RULES}"
            )
        _check_sorted("Standard transitions", standard_transitions)
        _check_sorted("Savings transitions", savings_instant_transitions)
        self._standard_transitions = tuple(standard_transitions)
        self._standard_offsets = tuple(standard_offsets)
        self._savings_instant_transitions = tuple(savings_instant_transitions)
        self._wall_offsets = tuple(wall_offsets)
        self._last_rules = tuple(last_rules)
        if savings_local_transitions is None:
            savings_local_transitions = _local_transitions(
                ZoneOffsetTransition.from_epoch_second(
                    epoch_second, wall_offsets[i], wall_offsets[i + 1]
                )
                for i, epoch_second in enumerate(savings_instant_transitions)
            )
        if len(savings_local_transitions) != 2 * len(savings_instant_transitions):
            raise InvalidRulesError(
                "Expected two local transitions for each savings transition"
            )
        self._savings_local_transitions = tuple(savings_local_transitions)
        self._cache = TransitionCache(self._last_rules)

    @classmethod
    def of(cls, offset: ZoneOffset) -> ZoneRules:
        """Create rules for a zone that always uses a single offset."""
        return cls((), (offset,), (), (offset,), ())

    @classmethod
    def of_transitions(
        cls,
        base_standard_offset: ZoneOffset,
        base_wall_offset: ZoneOffset,
        standard_offset_transitions: Sequence[ZoneOffsetTransition],
        transitions: Sequence[ZoneOffsetTransition],
        last_rules: Sequence[ZoneOffsetTransitionRule],
    ) -> ZoneRules:
        """Create rules from lists of historic transitions and recurring rules.

        The standard offset transitions record changes to the standard
        offset while the transitions record every change of the wall offset.
        Both lists must be in chronological order.
        """
        _LOGGER.debug(
            "Creating zone rules with %d standard transitions, %d transitions, %d rules",
            len(standard_offset_transitions),
            len(transitions),
            len(last_rules),
        )
        return cls(
            [trans.epoch_second for trans in standard_offset_transitions],
            [base_standard_offset]
            + [trans.offset_after for trans in standard_offset_transitions],
            [trans.epoch_second for trans in transitions],
            [base_wall_offset] + [trans.offset_after for trans in transitions],
            last_rules,
            savings_local_transitions=_local_transitions(transitions),
        )

    @classmethod
    def from_arrays(
        cls,
        standard_transitions: Sequence[int],
        standard_offsets: Sequence[ZoneOffset],
        savings_instant_transitions: Sequence[int],
        wall_offsets: Sequence[ZoneOffset],
        last_rules: Sequence[ZoneOffsetTransitionRule],
    ) -> ZoneRules:
        """Create rules from the stored arrays, as when deserializing."""
        return cls(
            standard_transitions,
            standard_offsets,
            savings_instant_transitions,
            wall_offsets,
            last_rules,
        )

    @property
    def standard_transitions(self) -> tuple[int, ...]:
        """Return the epoch seconds where the standard offset changed."""
        return self._standard_transitions

    @property
    def standard_offsets(self) -> tuple[ZoneOffset, ...]:
        """Return the standard offsets, one more than the standard transitions."""
        return self._standard_offsets

    @property
    def savings_instant_transitions(self) -> tuple[int, ...]:
        """Return the epoch seconds where the wall offset changed."""
        return self._savings_instant_transitions

    @property
    def wall_offsets(self) -> tuple[ZoneOffset, ...]:
        """Return the wall offsets, one more than the savings transitions."""
        return self._wall_offsets

    @property
    def cache(self) -> TransitionCache:
        """Return the cache of transitions generated from the recurring rules."""
        return self._cache

    def is_fixed_offset(self) -> bool:
        """Return True if the zone always uses the same offset."""
        return not self._savings_instant_transitions

    def offset_at(self, instant: Instant) -> ZoneOffset:
        """Return the offset in effect at the instant."""
        if not self._savings_instant_transitions:
            return self._standard_offsets[0]
        epoch_second = instant.epoch_second
        if self._last_rules and epoch_second >= self._savings_instant_transitions[-1]:
            year = _find_year(epoch_second, self._wall_offsets[-1])
            transitions = self._cache.get(year)
            for trans in transitions:
                if epoch_second < trans.epoch_second:
                    return trans.offset_before
            return transitions[-1].offset_after
        index = bisect.bisect_right(self._savings_instant_transitions, epoch_second)
        return self._wall_offsets[index]

    def standard_offset_at(self, instant: Instant) -> ZoneOffset:
        """Return the standard offset, ignoring daylight saving, at the instant."""
        if not self._savings_instant_transitions:
            return self._standard_offsets[0]
        index = bisect.bisect_right(self._standard_transitions, instant.epoch_second)
        return self._standard_offsets[index]

    def daylight_savings_at(self, instant: Instant) -> datetime.timedelta:
        """Return the amount of daylight saving in effect at the instant."""
        if not self._savings_instant_transitions:
            return _ZERO
        return datetime.timedelta(
            seconds=self.offset_at(instant).total_seconds
            - self.standard_offset_at(instant).total_seconds
        )

    def is_daylight_savings(self, instant: Instant) -> bool:
        """Return True if the instant is in daylight saving time."""
        return self.standard_offset_at(instant) != self.offset_at(instant)

    def offset_info(self, date_time: LocalDateTime) -> OffsetInfo:
        """Resolve a local date-time into a `Single`, `Gap` or `Overlap`."""
        if not self._savings_instant_transitions:
            return Single(self._standard_offsets[0])
        local_transitions = self._savings_local_transitions
        if self._last_rules and date_time > local_transitions[-1]:
            info: OffsetInfo | None = None
            for trans in self._cache.get(date_time.year):
                info = _find_offset_info(date_time, trans)
                if not isinstance(info, Single) or info.offset == trans.offset_before:
                    return info
            # The last rule of the year is the one in effect into the next year
            assert info is not None
            return info
        index = bisect.bisect_left(local_transitions, date_time)
        if index == len(local_transitions) or local_transitions[index] != date_time:
            if index == 0:
                # before the first transition
                return Single(self._wall_offsets[0])
            # start of the range containing the date-time
            index -= 1
        elif (
            index < len(local_transitions) - 1
            and local_transitions[index] == local_transitions[index + 1]
        ):
            # An overlap immediately following a gap at the same local
            # date-time, the second pair is the one in effect
            index += 1
        if index % 2 == 0:
            dt_before = local_transitions[index]
            dt_after = local_transitions[index + 1]
            offset_before = self._wall_offsets[index // 2]
            offset_after = self._wall_offsets[index // 2 + 1]
            if offset_after > offset_before:
                return Gap(
                    ZoneOffsetTransition.from_local(
                        dt_before, offset_before, offset_after
                    )
                )
            # overlap pairs are stored as (after, before)
            return Overlap(
                ZoneOffsetTransition.from_local(dt_after, offset_before, offset_after)
            )
        return Single(self._wall_offsets[index // 2 + 1])

    def offset_at_local(self, date_time: LocalDateTime) -> ZoneOffset:
        """Return a best effort offset for a local date-time.

        A local date-time in a gap or overlap has no single offset, so the
        offset before the transition is returned.
        """
        match self.offset_info(date_time):
            case Single(offset):
                return offset
            case Gap(transition) | Overlap(transition):
                return transition.offset_before
        raise AssertionError("Unreachable offset info")

    def valid_offsets_at(self, date_time: LocalDateTime) -> list[ZoneOffset]:
        """Return the offsets valid for a local date-time.

        This is a single offset in the normal case, empty for a gap and two
        offsets, earlier instant first, for an overlap.
        """
        match self.offset_info(date_time):
            case Single(offset):
                return [offset]
            case Gap(transition) | Overlap(transition):
                return transition.valid_offsets()
        raise AssertionError("Unreachable offset info")

    def transition_at(self, date_time: LocalDateTime) -> ZoneOffsetTransition | None:
        """Return the transition at a local date-time in a gap or overlap, else None."""
        match self.offset_info(date_time):
            case Gap(transition) | Overlap(transition):
                return transition
        return None

    def is_valid_offset(self, date_time: LocalDateTime, offset: ZoneOffset) -> bool:
        """Return True if the offset is valid for the local date-time."""
        return offset in self.valid_offsets_at(date_time)

    def next_transition(self, instant: Instant) -> ZoneOffsetTransition | None:
        """Return the next transition strictly after the instant."""
        if not self._savings_instant_transitions:
            return None
        epoch_second = instant.epoch_second
        if epoch_second >= self._savings_instant_transitions[-1]:
            if not self._last_rules:
                return None
            year = _find_year(epoch_second, self._wall_offsets[-1])
            for trans in self._cache.get(year):
                if epoch_second < trans.epoch_second:
                    return trans
            if year < MAX_YEAR:
                return self._cache.get(year + 1)[0]
            return None
        # An exact match moves on to the following transition
        index = bisect.bisect_right(self._savings_instant_transitions, epoch_second)
        return ZoneOffsetTransition.from_epoch_second(
            self._savings_instant_transitions[index],
            self._wall_offsets[index],
            self._wall_offsets[index + 1],
        )

    def previous_transition(self, instant: Instant) -> ZoneOffsetTransition | None:
        """Return the previous transition at or before the instant.

        A transition exactly at the instant is only returned when the
        instant has a fractional second.
        """
        if not self._savings_instant_transitions:
            return None
        epoch_second = instant.epoch_second
        if instant.nano > 0:
            epoch_second += 1
        last_historic = self._savings_instant_transitions[-1]
        if self._last_rules and epoch_second > last_historic:
            last_historic_offset = self._wall_offsets[-1]
            year = _find_year(epoch_second, last_historic_offset)
            transitions = self._cache.get(year)
            for trans in reversed(transitions):
                if epoch_second > trans.epoch_second:
                    return trans
            year -= 1
            if year > _find_year(last_historic, last_historic_offset):
                return self._cache.get(year)[-1]
        index = bisect.bisect_left(self._savings_instant_transitions, epoch_second)
        if index <= 0:
            return None
        return ZoneOffsetTransition.from_epoch_second(
            self._savings_instant_transitions[index - 1],
            self._wall_offsets[index - 1],
            self._wall_offsets[index],
        )

    def transitions(self) -> list[ZoneOffsetTransition]:
        """Return the historic transitions in chronological order.

        Transitions generated from the recurring rules are not included.
        """
        return [
            ZoneOffsetTransition.from_epoch_second(
                epoch_second, self._wall_offsets[i], self._wall_offsets[i + 1]
            )
            for i, epoch_second in enumerate(self._savings_instant_transitions)
        ]

    def transition_rules(self) -> list[ZoneOffsetTransitionRule]:
        """Return the recurring rules used after the last historic transition."""
        return list(self._last_rules)

    def _key(self) -> tuple[Any, ...]:
        return (
            self._standard_transitions,
            self._standard_offsets,
            self._savings_instant_transitions,
            self._wall_offsets,
            self._last_rules,
        )

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, ZoneRules):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"ZoneRules[currentStandardOffset={self._standard_offsets[-1]}]"


def _find_offset_info(
    date_time: LocalDateTime, trans: ZoneOffsetTransition
) -> OffsetInfo:
    """Resolve a local date-time against a single transition."""
    local_transition = trans.date_time_before
    if trans.is_gap():
        if date_time < local_transition:
            return Single(trans.offset_before)
        if date_time < trans.date_time_after:
            return Gap(trans)
        return Single(trans.offset_after)
    if date_time >= local_transition:
        return Single(trans.offset_after)
    if date_time < trans.date_time_after:
        return Single(trans.offset_before)
    return Overlap(trans)
