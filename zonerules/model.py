"""Library for pydantic models used to serialize zone rules.

Zone rule data is produced by an external loader and handed to this library
in the form of the arrays stored by `ZoneRules`. This model is the
serialized form of those arrays, with offsets stored as total seconds, and
validates the data before any rules are constructed.
"""

from __future__ import annotations

import datetime
from typing import Optional, Self

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .calendar import DayOfWeek, Month
from .exceptions import InvalidRulesError
from .offset import MAX_SECONDS, ZoneOffset
from .rules import MAX_LAST_RULES, ZoneRules
from .transition_rule import TimeDefinition, ZoneOffsetTransitionRule

__all__ = [
    "TransitionRuleModel",
    "ZoneRulesModel",
    "rules_to_json",
    "rules_from_json",
]

OffsetSeconds = int


def _check_offsets(values: list[int]) -> list[int]:
    for value in values:
        if not -MAX_SECONDS <= value <= MAX_SECONDS:
            raise ValueError(f"Zone offset not in valid range: {value}")
    return values


class TransitionRuleModel(BaseModel):
    """Serialized form of a `ZoneOffsetTransitionRule`."""

    month: int = Field(ge=1, le=12)
    day_of_month_indicator: int = Field(ge=-28, le=31)
    day_of_week: Optional[int] = Field(default=None, ge=1, le=7)
    time_seconds: int = Field(gt=-168 * 3600, lt=168 * 3600)
    """Seconds from local midnight of the resolved date."""

    time_definition: TimeDefinition = TimeDefinition.WALL
    standard_offset: OffsetSeconds = Field(ge=-MAX_SECONDS, le=MAX_SECONDS)
    offset_before: OffsetSeconds = Field(ge=-MAX_SECONDS, le=MAX_SECONDS)
    offset_after: OffsetSeconds = Field(ge=-MAX_SECONDS, le=MAX_SECONDS)

    @field_validator("day_of_month_indicator")
    @classmethod
    def verify_day_of_month_indicator(cls, value: int) -> int:
        """Validate that the day of month indicator is not zero."""
        if value == 0:
            raise ValueError("Day of month indicator must not be zero")
        return value

    @classmethod
    def from_rule(cls, rule: ZoneOffsetTransitionRule) -> TransitionRuleModel:
        """Create the serialized form of a rule."""
        return cls(
            month=int(rule.month),
            day_of_month_indicator=rule.day_of_month_indicator,
            day_of_week=int(rule.day_of_week) if rule.day_of_week is not None else None,
            time_seconds=int(rule.time.total_seconds()),
            time_definition=rule.time_definition,
            standard_offset=rule.standard_offset.total_seconds,
            offset_before=rule.offset_before.total_seconds,
            offset_after=rule.offset_after.total_seconds,
        )

    def to_rule(self) -> ZoneOffsetTransitionRule:
        """Create the rule described by this model."""
        return ZoneOffsetTransitionRule(
            Month(self.month),
            self.day_of_month_indicator,
            DayOfWeek(self.day_of_week) if self.day_of_week is not None else None,
            datetime.timedelta(seconds=self.time_seconds),
            self.time_definition,
            ZoneOffset.of_total_seconds(self.standard_offset),
            ZoneOffset.of_total_seconds(self.offset_before),
            ZoneOffset.of_total_seconds(self.offset_after),
        )


class ZoneRulesModel(BaseModel):
    """Serialized form of `ZoneRules`."""

    standard_transitions: list[int] = Field(default_factory=list)
    """Epoch seconds where the standard offset changed."""

    standard_offsets: list[OffsetSeconds]
    """Standard offsets in seconds, one more than the standard transitions."""

    savings_instant_transitions: list[int] = Field(default_factory=list)
    """Epoch seconds where the wall offset changed."""

    wall_offsets: list[OffsetSeconds]
    """Wall offsets in seconds, one more than the savings transitions."""

    last_rules: list[TransitionRuleModel] = Field(
        default_factory=list, max_length=MAX_LAST_RULES
    )
    """Recurring rules used after the last savings transition."""

    verify_offsets = field_validator("standard_offsets", "wall_offsets")(
        _check_offsets
    )

    @model_validator(mode="after")
    def verify_lengths(self) -> Self:
        """Validate that the offset arrays match the transition arrays."""
        if len(self.standard_offsets) != len(self.standard_transitions) + 1:
            raise ValueError(
                "Expected one more standard offset than standard transitions"
            )
        if len(self.wall_offsets) != len(self.savings_instant_transitions) + 1:
            raise ValueError("Expected one more wall offset than savings transitions")
        return self

    @classmethod
    def from_rules(cls, rules: ZoneRules) -> ZoneRulesModel:
        """Create the serialized form of zone rules."""
        return cls(
            standard_transitions=list(rules.standard_transitions),
            standard_offsets=[offset.total_seconds for offset in rules.standard_offsets],
            savings_instant_transitions=list(rules.savings_instant_transitions),
            wall_offsets=[offset.total_seconds for offset in rules.wall_offsets],
            last_rules=[
                TransitionRuleModel.from_rule(rule) for rule in rules.transition_rules()
            ],
        )

    def to_rules(self) -> ZoneRules:
        """Create the zone rules described by this model."""
        return ZoneRules.from_arrays(
            self.standard_transitions,
            [ZoneOffset.of_total_seconds(value) for value in self.standard_offsets],
            self.savings_instant_transitions,
            [ZoneOffset.of_total_seconds(value) for value in self.wall_offsets],
            [rule.to_rule() for rule in self.last_rules],
        )


def rules_to_json(rules: ZoneRules) -> str:
    """Serialize zone rules as a json string."""
    return ZoneRulesModel.from_rules(rules).model_dump_json(exclude_defaults=True)


def rules_from_json(content: str | bytes) -> ZoneRules:
    """Deserialize zone rules from a json string."""
    try:
        model = ZoneRulesModel.model_validate_json(content)
    except ValidationError as err:
        raise InvalidRulesError(f"Invalid zone rules data: {err}") from err
    return model.to_rules()
