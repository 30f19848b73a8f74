"""Test fixtures."""

from collections.abc import Callable
import datetime
from importlib import resources

import pytest

from zonerules import (
    DayOfWeek,
    Month,
    TimeDefinition,
    ZoneOffset,
    ZoneOffsetTransitionRule,
    ZoneRules,
)

OFFSET_1 = ZoneOffset.of_hours(1)
OFFSET_2 = ZoneOffset.of_hours(2)

# Central European rules: last Sunday of March and October at 01:00 UTC
SPRING_RULE = ZoneOffsetTransitionRule.of(
    Month.MARCH,
    -1,
    DayOfWeek.SUNDAY,
    datetime.time(1, 0),
    False,
    TimeDefinition.UTC,
    OFFSET_1,
    OFFSET_1,
    OFFSET_2,
)
AUTUMN_RULE = ZoneOffsetTransitionRule.of(
    Month.OCTOBER,
    -1,
    DayOfWeek.SUNDAY,
    datetime.time(1, 0),
    False,
    TimeDefinition.UTC,
    OFFSET_1,
    OFFSET_2,
    OFFSET_1,
)

FIRST_HISTORIC_YEAR = 1996
LAST_HISTORIC_YEAR = 2010


def build_europe_rules() -> ZoneRules:
    """Build rules with historic transitions from 1996 to 2010 and recurring rules after."""
    transitions = [
        rule.create_transition(year)
        for year in range(FIRST_HISTORIC_YEAR, LAST_HISTORIC_YEAR + 1)
        for rule in (SPRING_RULE, AUTUMN_RULE)
    ]
    return ZoneRules.of_transitions(
        OFFSET_1, OFFSET_1, [], transitions, [SPRING_RULE, AUTUMN_RULE]
    )


@pytest.fixture(name="europe_rules")
def mock_europe_rules() -> ZoneRules:
    """Fixture for zone rules with central European daylight saving time."""
    return build_europe_rules()


def _read_tzdata(key: str) -> bytes:
    """Read the TZif file for a key from the tzdata package."""
    package = "tzdata.zoneinfo"
    resource = key
    if "/" in key:
        package_loc, resource = key.rsplit("/", 1)
        package += "." + package_loc.replace("/", ".")
    return resources.files(package).joinpath(resource).read_bytes()


@pytest.fixture(name="read_tzdata")
def mock_read_tzdata() -> Callable[[str], bytes]:
    """Fixture that reads TZif bytes for a key from the tzdata package."""
    return _read_tzdata
