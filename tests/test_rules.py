"""Tests for resolving offsets with zone rules."""

import datetime

from dateutil import rrule
import pytest

from zonerules import (
    DayOfWeek,
    Gap,
    Instant,
    InvalidRulesError,
    LocalDateTime,
    Month,
    Overlap,
    Single,
    TimeDefinition,
    ZoneOffset,
    ZoneOffsetTransition,
    ZoneOffsetTransitionRule,
    ZoneRules,
)

OFFSET_1 = ZoneOffset.of_hours(1)
OFFSET_2 = ZoneOffset.of_hours(2)
AEST = ZoneOffset.of_hours(10)
AEDT = ZoneOffset.of_hours(11)


def _instant(*args: int) -> Instant:
    """Return the instant of a UTC date and time."""
    value = datetime.datetime(*args, tzinfo=datetime.timezone.utc)
    return Instant(int(value.timestamp()))


def _europe_transitions(first_year: int, last_year: int) -> list[Instant]:
    """Return the central European transition instants from a recurrence rule."""
    dates = rrule.rrule(
        rrule.YEARLY,
        bymonth=(3, 10),
        byweekday=rrule.SU(-1),
        dtstart=datetime.datetime(first_year, 1, 1, 1, 0, tzinfo=datetime.timezone.utc),
        until=datetime.datetime(last_year, 12, 31, tzinfo=datetime.timezone.utc),
    )
    return [Instant(int(value.timestamp())) for value in dates]


def _sydney_rules() -> ZoneRules:
    """Rules with daylight saving time spanning the end of the year."""
    autumn = ZoneOffsetTransitionRule.of(
        Month.APRIL,
        1,
        DayOfWeek.SUNDAY,
        datetime.time(3, 0),
        False,
        TimeDefinition.WALL,
        AEST,
        AEDT,
        AEST,
    )
    spring = ZoneOffsetTransitionRule.of(
        Month.OCTOBER,
        1,
        DayOfWeek.SUNDAY,
        datetime.time(2, 0),
        False,
        TimeDefinition.WALL,
        AEST,
        AEST,
        AEDT,
    )
    transitions = [
        rule.create_transition(year) for year in (2008, 2009) for rule in (autumn, spring)
    ]
    return ZoneRules.of_transitions(AEST, AEDT, [], transitions, [autumn, spring])


@pytest.mark.parametrize(
    "instant,expected",
    [
        (_instant(1990, 7, 1), OFFSET_1),
        (_instant(2005, 1, 1), OFFSET_1),
        (_instant(2005, 7, 1), OFFSET_2),
        (_instant(2010, 3, 28, 0, 59, 59), OFFSET_1),
        (_instant(2010, 3, 28, 1, 0), OFFSET_2),
        (_instant(2010, 10, 31, 0, 59, 59), OFFSET_2),
        (_instant(2010, 10, 31, 1, 0), OFFSET_1),
        (_instant(2010, 12, 31, 23, 59, 59), OFFSET_1),
        (_instant(2011, 3, 27, 0, 59, 59), OFFSET_1),
        (_instant(2011, 3, 27, 1, 0), OFFSET_2),
        (_instant(2024, 7, 1), OFFSET_2),
        (_instant(2024, 12, 31, 23, 30), OFFSET_1),
        (_instant(2424, 3, 31, 1, 0), OFFSET_2),
        (_instant(2424, 10, 27, 1, 0), OFFSET_1),
    ],
)
def test_offset_at(europe_rules: ZoneRules, instant: Instant, expected: ZoneOffset) -> None:
    """Test the offset at an instant for historic and rule based years."""
    assert europe_rules.offset_at(instant) == expected


def test_offset_at_every_month(europe_rules: ZoneRules) -> None:
    """Test the offset in the middle of every month against a recurrence rule."""
    transitions = _europe_transitions(1996, 2130)
    for year in range(1990, 2131):
        for month in range(1, 13):
            instant = _instant(year, month, 15, 12)
            in_summer = sum(1 for trans in transitions if trans <= instant) % 2 == 1
            expected = OFFSET_2 if in_summer else OFFSET_1
            assert europe_rules.offset_at(instant) == expected, instant


@pytest.mark.parametrize(
    "date_time,expected",
    [
        (LocalDateTime(1990, 6, 1, 12), Single(OFFSET_1)),
        (LocalDateTime(2005, 6, 1, 12), Single(OFFSET_2)),
        (LocalDateTime(2010, 3, 28, 1, 59, 59, 999_999_999), Single(OFFSET_1)),
        (LocalDateTime(2010, 3, 28, 3, 0), Single(OFFSET_2)),
        (LocalDateTime(2010, 10, 31, 1, 59, 59), Single(OFFSET_2)),
        (LocalDateTime(2010, 10, 31, 3, 0), Single(OFFSET_1)),
        (LocalDateTime(2024, 6, 1, 12), Single(OFFSET_2)),
        (LocalDateTime(2024, 3, 31, 1, 59, 59), Single(OFFSET_1)),
        (LocalDateTime(2024, 3, 31, 3, 0), Single(OFFSET_2)),
        (LocalDateTime(2024, 10, 27, 3, 0), Single(OFFSET_1)),
        (LocalDateTime(2024, 12, 31, 23, 59), Single(OFFSET_1)),
        (LocalDateTime(2424, 7, 1), Single(OFFSET_2)),
    ],
)
def test_offset_info_normal(
    europe_rules: ZoneRules, date_time: LocalDateTime, expected: Single
) -> None:
    """Test local date-times with a single valid offset."""
    assert europe_rules.offset_info(date_time) == expected
    assert europe_rules.valid_offsets_at(date_time) == [expected.offset]
    assert europe_rules.offset_at_local(date_time) == expected.offset
    assert europe_rules.transition_at(date_time) is None
    assert europe_rules.is_valid_offset(date_time, expected.offset)


@pytest.mark.parametrize(
    "date_time,transition_local",
    [
        (LocalDateTime(2010, 3, 28, 2, 0), LocalDateTime(2010, 3, 28, 2, 0)),
        (LocalDateTime(2010, 3, 28, 2, 30), LocalDateTime(2010, 3, 28, 2, 0)),
        (LocalDateTime(2024, 3, 31, 2, 0), LocalDateTime(2024, 3, 31, 2, 0)),
        (LocalDateTime(2024, 3, 31, 2, 59, 59, 999_999_999), LocalDateTime(2024, 3, 31, 2)),
        (LocalDateTime(2424, 3, 31, 2, 30), LocalDateTime(2424, 3, 31, 2, 0)),
    ],
)
def test_offset_info_gap(
    europe_rules: ZoneRules, date_time: LocalDateTime, transition_local: LocalDateTime
) -> None:
    """Test local date-times skipped when the clocks move forward."""
    expected = ZoneOffsetTransition.of(transition_local, OFFSET_1, OFFSET_2)
    assert europe_rules.offset_info(date_time) == Gap(expected)
    assert europe_rules.valid_offsets_at(date_time) == []
    assert europe_rules.offset_at_local(date_time) == OFFSET_1
    assert europe_rules.transition_at(date_time) == expected
    assert not europe_rules.is_valid_offset(date_time, OFFSET_1)
    assert not europe_rules.is_valid_offset(date_time, OFFSET_2)


@pytest.mark.parametrize(
    "date_time,transition_local",
    [
        (LocalDateTime(2010, 10, 31, 2, 0), LocalDateTime(2010, 10, 31, 3, 0)),
        (LocalDateTime(2010, 10, 31, 2, 30), LocalDateTime(2010, 10, 31, 3, 0)),
        (LocalDateTime(2024, 10, 27, 2, 0), LocalDateTime(2024, 10, 27, 3, 0)),
        (LocalDateTime(2024, 10, 27, 2, 59, 59), LocalDateTime(2024, 10, 27, 3, 0)),
        (LocalDateTime(2424, 10, 27, 2, 30), LocalDateTime(2424, 10, 27, 3, 0)),
    ],
)
def test_offset_info_overlap(
    europe_rules: ZoneRules, date_time: LocalDateTime, transition_local: LocalDateTime
) -> None:
    """Test local date-times repeated when the clocks move back."""
    expected = ZoneOffsetTransition.of(transition_local, OFFSET_2, OFFSET_1)
    assert europe_rules.offset_info(date_time) == Overlap(expected)
    # Earlier instant first
    assert europe_rules.valid_offsets_at(date_time) == [OFFSET_2, OFFSET_1]
    assert europe_rules.offset_at_local(date_time) == OFFSET_2
    assert europe_rules.transition_at(date_time) == expected
    assert europe_rules.is_valid_offset(date_time, OFFSET_1)
    assert europe_rules.is_valid_offset(date_time, OFFSET_2)
    assert not europe_rules.is_valid_offset(date_time, ZoneOffset.UTC)


def test_valid_offsets_round_trip(europe_rules: ZoneRules) -> None:
    """Test each valid offset maps the local date-time to an instant with that offset."""
    for date_time in (
        LocalDateTime(2005, 6, 1, 12),
        LocalDateTime(2010, 10, 31, 2, 30),
        LocalDateTime(2024, 10, 27, 2, 30),
        LocalDateTime(2024, 1, 1),
    ):
        for offset in europe_rules.valid_offsets_at(date_time):
            instant = Instant(date_time.to_epoch_second(offset))
            assert europe_rules.offset_at(instant) == offset


def test_fixed_offset() -> None:
    """Test rules for a zone without transitions."""
    offset = ZoneOffset.of_hours_minutes_seconds(5, 30)
    rules = ZoneRules.of(offset)
    assert rules.is_fixed_offset()
    assert rules.offset_at(_instant(2024, 7, 1)) == offset
    assert rules.standard_offset_at(_instant(2024, 7, 1)) == offset
    assert rules.daylight_savings_at(_instant(2024, 7, 1)) == datetime.timedelta(0)
    assert not rules.is_daylight_savings(_instant(2024, 7, 1))
    assert rules.offset_info(LocalDateTime(2024, 3, 31, 2, 30)) == Single(offset)
    assert rules.valid_offsets_at(LocalDateTime(2024, 3, 31, 2, 30)) == [offset]
    assert rules.next_transition(_instant(2024, 1, 1)) is None
    assert rules.previous_transition(_instant(2024, 1, 1)) is None
    assert rules.transitions() == []
    assert rules.transition_rules() == []
    assert repr(rules) == "ZoneRules[currentStandardOffset=+05:30]"


def test_gap_followed_by_overlap() -> None:
    """Test an overlap that starts at the local date-time a gap ends."""
    gap = ZoneOffsetTransition.from_epoch_second(
        _instant(1999, 12, 31, 23).epoch_second, OFFSET_1, OFFSET_2
    )
    overlap = ZoneOffsetTransition.from_epoch_second(
        _instant(2000, 1, 1, 0).epoch_second, OFFSET_2, OFFSET_1
    )
    assert gap.date_time_after == overlap.date_time_after
    rules = ZoneRules.of_transitions(OFFSET_1, OFFSET_1, [], [gap, overlap], [])

    assert rules.offset_info(LocalDateTime(1999, 12, 31, 23, 59)) == Single(OFFSET_1)
    assert rules.offset_info(LocalDateTime(2000, 1, 1, 0, 0)) == Gap(gap)
    assert rules.offset_info(LocalDateTime(2000, 1, 1, 0, 30)) == Gap(gap)
    assert rules.offset_info(LocalDateTime(2000, 1, 1, 1, 0)) == Overlap(overlap)
    assert rules.offset_info(LocalDateTime(2000, 1, 1, 1, 30)) == Overlap(overlap)
    assert rules.valid_offsets_at(LocalDateTime(2000, 1, 1, 1, 0)) == [OFFSET_2, OFFSET_1]
    assert rules.offset_info(LocalDateTime(2000, 1, 1, 2, 0)) == Single(OFFSET_1)


def test_next_transition(europe_rules: ZoneRules) -> None:
    """Test finding the next transition across historic and rule based years."""
    spring_2010 = _instant(2010, 3, 28, 1)
    trans = europe_rules.next_transition(_instant(2010, 1, 1))
    assert trans is not None
    assert trans.instant == spring_2010
    assert trans.is_gap()

    # A transition at exactly the instant is skipped
    trans = europe_rules.next_transition(spring_2010)
    assert trans is not None
    assert trans.instant == _instant(2010, 10, 31, 1)

    # From the last historic transition into the recurring rules
    trans = europe_rules.next_transition(_instant(2010, 10, 31, 1))
    assert trans is not None
    assert trans.instant == _instant(2011, 3, 27, 1)

    trans = europe_rules.next_transition(_instant(2024, 12, 1))
    assert trans is not None
    assert trans.instant == _instant(2025, 3, 30, 1)
    assert trans.offset_before == OFFSET_1
    assert trans.offset_after == OFFSET_2


def test_previous_transition(europe_rules: ZoneRules) -> None:
    """Test finding the previous transition across historic and rule based years."""
    assert europe_rules.previous_transition(_instant(1995, 1, 1)) is None

    trans = europe_rules.previous_transition(_instant(2011, 2, 1))
    assert trans is not None
    assert trans.instant == _instant(2010, 10, 31, 1)

    trans = europe_rules.previous_transition(_instant(2025, 1, 15))
    assert trans is not None
    assert trans.instant == _instant(2024, 10, 27, 1)

    # A transition exactly at the instant is excluded unless there is a fraction
    spring_2024 = _instant(2024, 3, 31, 1)
    trans = europe_rules.previous_transition(spring_2024)
    assert trans is not None
    assert trans.instant == _instant(2023, 10, 29, 1)
    trans = europe_rules.previous_transition(Instant(spring_2024.epoch_second, 1))
    assert trans is not None
    assert trans.instant == spring_2024

    spring_2005 = _instant(2005, 3, 27, 1)
    trans = europe_rules.previous_transition(spring_2005)
    assert trans is not None
    assert trans.instant == _instant(2004, 10, 31, 1)
    trans = europe_rules.previous_transition(Instant(spring_2005.epoch_second, 1))
    assert trans is not None
    assert trans.instant == spring_2005


def test_walk_transitions(europe_rules: ZoneRules) -> None:
    """Test walking forward and backward visits every transition in order."""
    expected = _europe_transitions(1996, 2060)

    forward = []
    instant = _instant(1990, 1, 1)
    while (trans := europe_rules.next_transition(instant)) and trans.instant <= expected[-1]:
        forward.append(trans.instant)
        instant = trans.instant
    assert forward == expected

    backward = []
    instant = Instant(expected[-1].epoch_second + 1)
    while trans := europe_rules.previous_transition(instant):
        backward.append(trans.instant)
        instant = trans.instant
    assert backward == list(reversed(expected))


def test_walk_matches_offsets(europe_rules: ZoneRules) -> None:
    """Test the offsets either side of each transition agree with offset_at."""
    instant = _instant(1990, 1, 1)
    for _ in range(100):
        trans = europe_rules.next_transition(instant)
        assert trans is not None
        before = Instant(trans.epoch_second - 1)
        assert europe_rules.offset_at(before) == trans.offset_before
        assert europe_rules.offset_at(trans.instant) == trans.offset_after
        instant = trans.instant


def test_standard_offset_and_daylight_savings(europe_rules: ZoneRules) -> None:
    """Test the standard offset and amount of daylight saving."""
    summer = _instant(2024, 7, 1)
    winter = _instant(2024, 1, 1)
    assert europe_rules.standard_offset_at(summer) == OFFSET_1
    assert europe_rules.standard_offset_at(winter) == OFFSET_1
    assert europe_rules.daylight_savings_at(summer) == datetime.timedelta(hours=1)
    assert europe_rules.daylight_savings_at(winter) == datetime.timedelta(0)
    assert europe_rules.is_daylight_savings(summer)
    assert not europe_rules.is_daylight_savings(winter)
    assert not europe_rules.is_fixed_offset()


def test_standard_offset_change() -> None:
    """Test a zone that changes its standard offset."""
    change = ZoneOffsetTransition.of(LocalDateTime(2000, 1, 1), OFFSET_1, OFFSET_2)
    rules = ZoneRules.of_transitions(OFFSET_1, OFFSET_1, [change], [change], [])
    assert rules.standard_offset_at(_instant(1999, 6, 1)) == OFFSET_1
    assert rules.standard_offset_at(_instant(2000, 6, 1)) == OFFSET_2
    assert rules.offset_at(_instant(2000, 6, 1)) == OFFSET_2
    assert not rules.is_daylight_savings(_instant(2000, 6, 1))
    assert rules.next_transition(_instant(2000, 6, 1)) is None
    assert rules.standard_offsets == (OFFSET_1, OFFSET_2)
    assert rules.standard_transitions == (change.epoch_second,)


def test_rules_spanning_year_end() -> None:
    """Test recurring rules where daylight saving continues into the next year."""
    rules = _sydney_rules()
    assert rules.offset_at(_instant(2024, 1, 15)) == AEDT
    assert rules.offset_at(_instant(2024, 6, 15)) == AEST
    assert rules.offset_at(_instant(2024, 12, 31, 23)) == AEDT
    assert rules.offset_info(LocalDateTime(2024, 1, 1)) == Single(AEDT)
    assert rules.offset_info(LocalDateTime(2024, 6, 1)) == Single(AEST)
    assert rules.offset_info(LocalDateTime(2024, 12, 31, 23)) == Single(AEDT)

    # First Sunday in April and October of 2024
    assert isinstance(rules.offset_info(LocalDateTime(2024, 4, 7, 2, 30)), Overlap)
    assert isinstance(rules.offset_info(LocalDateTime(2024, 10, 6, 2, 30)), Gap)

    trans = rules.next_transition(_instant(2024, 11, 1))
    assert trans is not None
    assert trans.date_time_before == LocalDateTime(2025, 4, 6, 3)
    trans = rules.previous_transition(_instant(2025, 1, 1))
    assert trans is not None
    assert trans.date_time_before == LocalDateTime(2024, 10, 6, 2)


def test_accessors(europe_rules: ZoneRules) -> None:
    """Test the historic transitions and recurring rules are exposed."""
    transitions = europe_rules.transitions()
    assert len(transitions) == 30
    assert [trans.instant for trans in transitions] == _europe_transitions(1996, 2010)
    assert len(europe_rules.transition_rules()) == 2
    assert europe_rules.wall_offsets[0] == OFFSET_1
    assert len(europe_rules.savings_instant_transitions) == 30


def test_equality(europe_rules: ZoneRules) -> None:
    """Test rules built from the same data are equal."""
    copy = ZoneRules.from_arrays(
        europe_rules.standard_transitions,
        europe_rules.standard_offsets,
        europe_rules.savings_instant_transitions,
        europe_rules.wall_offsets,
        europe_rules.transition_rules(),
    )
    assert copy == europe_rules
    assert hash(copy) == hash(europe_rules)
    assert copy.offset_info(LocalDateTime(2010, 3, 28, 2, 30)) == europe_rules.offset_info(
        LocalDateTime(2010, 3, 28, 2, 30)
    )
    assert europe_rules != ZoneRules.of(OFFSET_1)
    assert ZoneRules.of(OFFSET_1) == ZoneRules.of(OFFSET_1)
    assert repr(europe_rules) == "ZoneRules[currentStandardOffset=+01:00]"


def test_invalid_lengths() -> None:
    """Test the offset arrays must have one more entry than the transitions."""
    with pytest.raises(InvalidRulesError, match="standard offset"):
        ZoneRules.from_arrays([0], [OFFSET_1], [], [OFFSET_1], [])
    with pytest.raises(InvalidRulesError, match="wall offset"):
        ZoneRules.from_arrays([], [OFFSET_1], [0], [OFFSET_1], [])


def test_invalid_order() -> None:
    """Test transitions must be strictly increasing."""
    with pytest.raises(InvalidRulesError, match="strictly increasing"):
        ZoneRules.from_arrays(
            [], [OFFSET_1], [100, 100], [OFFSET_1, OFFSET_2, OFFSET_1], []
        )
    with pytest.raises(InvalidRulesError, match="strictly increasing"):
        ZoneRules.from_arrays([200, 100], [OFFSET_1, OFFSET_2, OFFSET_1], [], [OFFSET_1], [])


def test_too_many_rules(europe_rules: ZoneRules) -> None:
    """Test the number of recurring rules is limited."""
    rule = europe_rules.transition_rules()[0]
    with pytest.raises(InvalidRulesError, match="Too many transition rules"):
        ZoneRules.from_arrays([], [OFFSET_1], [0], [OFFSET_1, OFFSET_2], [rule] * 17)
    rules = ZoneRules.from_arrays([], [OFFSET_1], [0], [OFFSET_1, OFFSET_2], [rule] * 16)
    assert len(rules.transition_rules()) == 16
