"""Duration helpers with saturating arithmetic.

``timedelta`` raises ``OverflowError`` when a product leaves its range. Backoff
delays must only grow, so every multiplication here clamps to
``MAX_DURATION`` (or ``MIN_DURATION``) instead.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Optional, Union

MAX_DURATION = timedelta.max
MIN_DURATION = timedelta.min

_MICROSECOND = timedelta(microseconds=1)

DurationLike = Union[timedelta, int, float]


def to_microseconds(duration: timedelta) -> int:
    """Exact number of microseconds in a duration."""
    return duration // _MICROSECOND


_MAX_MICROSECONDS = to_microseconds(MAX_DURATION)
_MIN_MICROSECONDS = to_microseconds(MIN_DURATION)


def from_microseconds(microseconds: int) -> timedelta:
    """Build a duration from microseconds, saturating at the representable range."""
    if microseconds >= _MAX_MICROSECONDS:
        return MAX_DURATION
    if microseconds <= _MIN_MICROSECONDS:
        return MIN_DURATION
    return timedelta(microseconds=microseconds)


def saturating_power(base: int, exponent: int, limit: int) -> int:
    """Compute ``base ** exponent`` without growing past ``limit``.

    Args:
        base: Non-negative integer base
        exponent: Non-negative integer exponent
        limit: Largest value the caller cares about

    Returns:
        The exact power, or ``limit + 1`` if it would exceed ``limit``
    """
    if exponent <= 0:
        return 1
    if base in (0, 1):
        return base
    result = 1
    for _ in range(exponent):
        result *= base
        if result > limit:
            return limit + 1
    return result


def saturating_multiply(duration: timedelta, multiplier: int) -> timedelta:
    """Multiply a duration by an integer, saturating instead of overflowing."""
    return from_microseconds(to_microseconds(duration) * multiplier)


def to_duration(value: Optional[DurationLike]) -> Optional[timedelta]:
    """Normalize a duration given as ``timedelta`` or seconds.

    Raises:
        TypeError: If the value is neither a timedelta nor a number
    """
    if value is None or isinstance(value, timedelta):
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Expected timedelta or seconds, got {type(value).__name__}")
    return timedelta(seconds=value)
