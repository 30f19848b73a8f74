"""A bounded per-year cache of transitions generated from recurring rules."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence

from .compat import rules_compat
from .transition import ZoneOffsetTransition
from .transition_rule import ZoneOffsetTransitionRule

__all__ = ["TransitionCache", "LAST_CACHED_YEAR"]

_LOGGER = logging.getLogger(__name__)

LAST_CACHED_YEAR = 2100
"""Years at or after this are generated on every call and never stored."""


class TransitionCache:
    """Memoizes the transitions created by a fixed list of rules for each year.

    Each entry holds one transition per rule in rule order. Rule evaluation
    is pure, so two threads racing on the same year compute equal values
    and either result may be kept.
    """

    def __init__(self, rules: Sequence[ZoneOffsetTransitionRule]) -> None:
        """Initialize TransitionCache."""
        self._rules = tuple(rules)
        self._cache: dict[int, tuple[ZoneOffsetTransition, ...]] = {}
        self._lock = threading.Lock()

    def get(self, year: int) -> tuple[ZoneOffsetTransition, ...]:
        """Return the transitions for the year, generating them on a miss."""
        if (transitions := self._cache.get(year)) is not None:
            return transitions
        _LOGGER.debug("Generating %d rule transitions for %d", len(self._rules), year)
        transitions = tuple(rule.create_transition(year) for rule in self._rules)
        if year < LAST_CACHED_YEAR and rules_compat.is_transition_cache_enabled():
            with self._lock:
                transitions = self._cache.setdefault(year, transitions)
        return transitions

    def clear(self) -> None:
        """Remove all stored years."""
        with self._lock:
            self._cache.clear()

    def __contains__(self, year: object) -> bool:
        return year in self._cache

    def __len__(self) -> int:
        return len(self._cache)
