"""Context flags for the transition cache and lenient TZif decoding."""

from collections.abc import Generator
import contextlib
import contextvars


_transition_cache_disabled = contextvars.ContextVar(
    "transition_cache_disabled", default=False
)
_lenient_tzif = contextvars.ContextVar("lenient_tzif", default=False)


@contextlib.contextmanager
def disable_transition_cache() -> Generator[None]:
    """Context manager that generates rule transitions without storing them."""
    token = _transition_cache_disabled.set(True)
    try:
        yield
    finally:
        _transition_cache_disabled.reset(token)


def is_transition_cache_enabled() -> bool:
    """Check if generated rule transitions may be stored in the cache."""
    return not _transition_cache_disabled.get()


@contextlib.contextmanager
def enable_lenient_tzif() -> Generator[None]:
    """Context manager to allow TZif data with an unsupported footer rule.

    The recurring rules are dropped and only the historical transitions
    are used.
    """
    token = _lenient_tzif.set(True)
    try:
        yield
    finally:
        _lenient_tzif.reset(token)


def is_lenient_tzif_enabled() -> bool:
    """Check if lenient TZif decoding is enabled."""
    return _lenient_tzif.get()
