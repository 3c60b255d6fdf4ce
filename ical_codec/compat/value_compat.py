"""Compatibility switches for how strictly property values are interpreted."""

from collections.abc import Generator
import contextlib
import contextvars


_strict_values = contextvars.ContextVar("strict_values", default=False)
_orphan_exceptions = contextvars.ContextVar("orphan_exceptions", default=False)


@contextlib.contextmanager
def enable_strict_values() -> Generator[None, None, None]:
    """Context manager to fail on any property value that can't be decoded.

    By default only DTSTART and DTEND must decode, and other properties fall
    back to their text value.
    """
    token = _strict_values.set(True)
    try:
        yield
    finally:
        _strict_values.reset(token)


def is_strict_values_enabled() -> bool:
    """Check if strict value decoding is enabled."""
    return _strict_values.get()


@contextlib.contextmanager
def enable_orphan_exceptions() -> Generator[None, None, None]:
    """Context manager to keep recurrence exceptions that have no master event.

    By default an event with a RECURRENCE-ID and no event with the same UID
    to attach to is dropped. When enabled it is returned as a top-level event.
    """
    token = _orphan_exceptions.set(True)
    try:
        yield
    finally:
        _orphan_exceptions.reset(token)


def is_orphan_exceptions_enabled() -> bool:
    """Check if orphaned recurrence exceptions are kept."""
    return _orphan_exceptions.get()
