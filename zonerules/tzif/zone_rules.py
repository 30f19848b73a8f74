"""Build zone rules from decoded TZif data.

A TZif file records the wall offset after each transition but not the
standard offset during daylight saving time. The standard offset of a
daylight saving local time type is taken from the closest preceding
standard time type, or from the following one when the preceding one has
the same offset.

Transitions that only change the designation or daylight saving flag,
without changing the offset, are dropped since zone rules only record
offset changes.

The footer rule only applies after the last transition in the data block.
Its transitions for the remainder of that year are added to the historic
transitions, along with the following year when the data block ends partway
through the rule's yearly cycle, so the recurring rules are only consulted
for years they fully govern.
"""

from __future__ import annotations

import logging

from ..calendar import MAX_YEAR
from ..compat import rules_compat
from ..exceptions import TzifError
from ..instant import MAX_SECOND, MIN_SECOND
from ..local_datetime import LocalDateTime
from ..offset import ZoneOffset
from ..rules import ZoneRules
from ..transition import ZoneOffsetTransition
from ..transition_rule import ZoneOffsetTransitionRule
from .model import TzifData, TzifTransition
from .tzif import read_tzif

__all__ = ["read_zone_rules", "zone_rules_from_tzif"]

_LOGGER = logging.getLogger(__name__)

_DEFAULT_SAVINGS = 3600


def _standard_utoffs(
    transitions: list[TzifTransition], fallback: int | None
) -> list[int]:
    """Return the standard offset in effect after each transition."""
    following: list[int | None] = []
    next_std = fallback
    for trans in reversed(transitions):
        if not trans.dst:
            next_std = trans.utoff
        following.append(next_std)
    following.reverse()

    result: list[int] = []
    last_std = None
    for trans, next_std in zip(transitions, following):
        if not trans.dst:
            last_std = trans.utoff
            result.append(last_std)
            continue
        result.append(
            next(
                (
                    std
                    for std in (last_std, next_std)
                    if std is not None and std != trans.utoff
                ),
                trans.utoff - _DEFAULT_SAVINGS,
            )
        )
    return result


def _last_rules(data: TzifData) -> list[ZoneOffsetTransitionRule]:
    if data.rule is None:
        return []
    try:
        return data.rule.transition_rules()
    except ValueError as err:
        if not rules_compat.is_lenient_tzif_enabled():
            raise TzifError(f"Unsupported TZ footer rule: {data.footer}") from err
        _LOGGER.warning("Ignoring unsupported TZ footer rule %s: %s", data.footer, err)
        return []


def zone_rules_from_tzif(data: TzifData) -> ZoneRules:
    """Create zone rules from decoded TZif data."""
    if not data.local_time_types:
        raise TzifError("TZif data has no local time types")
    footer_std = data.rule.standard_offset.total_seconds if data.rule else None
    standard_utoffs = _standard_utoffs(data.transitions, footer_std)

    # Local time before the first transition is the first local time type
    first_type = data.local_time_types[0]
    base_wall = first_type.utoff
    base_std = first_type.utoff
    if first_type.dst:
        base_std = standard_utoffs[0] if standard_utoffs else base_wall - _DEFAULT_SAVINGS

    last_time: int | None = None
    try:
        wall = ZoneOffset.of_total_seconds(base_wall)
        std = ZoneOffset.of_total_seconds(base_std)
        base_wall_offset, base_std_offset = wall, std
        transitions: list[ZoneOffsetTransition] = []
        standard_transitions: list[ZoneOffsetTransition] = []
        for trans, std_utoff in zip(data.transitions, standard_utoffs):
            if trans.transition_time > MAX_SECOND:
                break
            next_wall = ZoneOffset.of_total_seconds(trans.utoff)
            next_std = ZoneOffset.of_total_seconds(std_utoff)
            if trans.transition_time < MIN_SECOND:
                # Applies since the start of time, e.g. a 'big bang' transition
                base_wall_offset = wall = next_wall
                base_std_offset = std = next_std
                continue
            last_time = trans.transition_time
            if next_wall != wall:
                transitions.append(
                    ZoneOffsetTransition.from_epoch_second(
                        trans.transition_time, wall, next_wall
                    )
                )
            if next_std != std:
                standard_transitions.append(
                    ZoneOffsetTransition.from_epoch_second(
                        trans.transition_time, std, next_std
                    )
                )
            wall, std = next_wall, next_std
    except ValueError as err:
        raise TzifError(f"Invalid offset in TZif data: {err}") from err

    last_rules = _last_rules(data)
    if last_rules and last_time is not None:
        year = LocalDateTime.of_epoch_second(last_time, 0, wall).year
        for rule_year in range(year, min(year + 1, MAX_YEAR) + 1):
            for rule in last_rules:
                rule_trans = rule.create_transition(rule_year)
                if rule_trans.epoch_second <= last_time:
                    continue
                if rule_trans.offset_after != wall:
                    transitions.append(
                        ZoneOffsetTransition.from_epoch_second(
                            rule_trans.epoch_second, wall, rule_trans.offset_after
                        )
                    )
                if rule.standard_offset != std:
                    standard_transitions.append(
                        ZoneOffsetTransition.from_epoch_second(
                            rule_trans.epoch_second, std, rule.standard_offset
                        )
                    )
                wall, std = rule_trans.offset_after, rule.standard_offset
            # The year's final rule transition must be the last historic one
            final = last_rules[-1].create_transition(rule_year)
            if transitions and transitions[-1].epoch_second == final.epoch_second:
                break
    _LOGGER.debug(
        "Built zone rules with %d transitions and %d rules",
        len(transitions),
        len(last_rules),
    )
    return ZoneRules.of_transitions(
        base_std_offset,
        base_wall_offset,
        standard_transitions,
        transitions,
        last_rules,
    )


def read_zone_rules(content: bytes) -> ZoneRules:
    """Decode the bytes of a TZif file into zone rules."""
    return zone_rules_from_tzif(read_tzif(content))
