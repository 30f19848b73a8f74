"""A registry of zone rules keyed by zone id.

Zone rule data is supplied by an external loader which registers rules,
or a factory that builds them on first use, for each zone id. A default
provider contains a small set of built-in zones.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import cache
from typing import Union

from .exceptions import UnknownZoneError, ZoneRulesError
from .local_datetime import LocalDateTime
from .offset import ZoneOffset
from .rules import ZoneRules
from .transition import ZoneOffsetTransition

__all__ = [
    "ZoneRulesProvider",
    "default_provider",
    "get_rules",
]

_LOGGER = logging.getLogger(__name__)

RulesFactory = Callable[[], ZoneRules]


class ZoneRulesProvider:
    """Provides zone rules for a set of zone ids."""

    def __init__(self) -> None:
        """Initialize ZoneRulesProvider."""
        self._factories: dict[str, RulesFactory] = {}
        self._rules: dict[str, ZoneRules] = {}
        self._lock = threading.Lock()

    def register(
        self, zone_id: str, rules: Union[ZoneRules, RulesFactory]
    ) -> None:
        """Register rules, or a factory for rules, for a zone id."""
        if not zone_id:
            raise ValueError("Zone id must not be empty")
        with self._lock:
            if isinstance(rules, ZoneRules):
                self._rules[zone_id] = rules
                self._factories[zone_id] = lambda: rules
            else:
                self._rules.pop(zone_id, None)
                self._factories[zone_id] = rules

    def get_rules(self, zone_id: str) -> ZoneRules:
        """Return the rules for the zone id, building them on first use."""
        if (rules := self._rules.get(zone_id)) is not None:
            return rules
        if (factory := self._factories.get(zone_id)) is None:
            if not self._factories:
                raise ZoneRulesError("No time-zone data registered")
            raise UnknownZoneError(f"Unknown time-zone id: {zone_id}")
        _LOGGER.debug("Building zone rules for %s", zone_id)
        rules = factory()
        with self._lock:
            return self._rules.setdefault(zone_id, rules)

    def available_zone_ids(self) -> set[str]:
        """Return the set of registered zone ids."""
        return set(self._factories)


_PLUS_8 = ZoneOffset.of_hours(8)
_PLUS_9 = ZoneOffset.of_hours(9)

# China observed daylight saving time from 1986 to 1991, with clocks moving
# at 02:00 local time on a Sunday in April and September.
_CHINA_DST_DATES = [
    ((1986, 5, 4), (1986, 9, 14)),
    ((1987, 4, 12), (1987, 9, 13)),
    ((1988, 4, 10), (1988, 9, 11)),
    ((1989, 4, 16), (1989, 9, 17)),
    ((1990, 4, 15), (1990, 9, 16)),
    ((1991, 4, 14), (1991, 9, 15)),
]


def _china_rules() -> ZoneRules:
    transitions: list[ZoneOffsetTransition] = []
    for start, end in _CHINA_DST_DATES:
        transitions.append(
            ZoneOffsetTransition.of(LocalDateTime(*start, 2), _PLUS_8, _PLUS_9)
        )
        transitions.append(
            ZoneOffsetTransition.of(LocalDateTime(*end, 2), _PLUS_9, _PLUS_8)
        )
    return ZoneRules.of_transitions(_PLUS_8, _PLUS_8, [], transitions, [])


def _fixed_rules(offset: ZoneOffset) -> RulesFactory:
    return lambda: ZoneRules.of(offset)


@cache
def default_provider() -> ZoneRulesProvider:
    """Return the process wide provider holding the built-in zones."""
    provider = ZoneRulesProvider()
    provider.register("UTC", _fixed_rules(ZoneOffset.UTC))
    for zone_id in (
        "PRC",
        "Asia/Shanghai",
        "Asia/Chongqing",
        "Asia/Chungking",
        "Asia/Urumqi",
    ):
        provider.register(zone_id, _china_rules)
    for zone_id in ("Asia/Hong_Kong", "Hongkong", "Asia/Singapore", "Singapore"):
        provider.register(zone_id, _fixed_rules(_PLUS_8))
    return provider


def get_rules(zone_id: str) -> ZoneRules:
    """Return the rules for a zone id from the default provider."""
    return default_provider().get_rules(zone_id)
