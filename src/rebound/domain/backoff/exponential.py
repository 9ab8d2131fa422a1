"""Backoff policy with exponentially growing delays"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from rebound.domain.backoff.base import BackoffPolicy
from rebound.domain.durations import (
    MAX_DURATION,
    DurationLike,
    saturating_multiply,
    saturating_power,
    to_duration,
    to_microseconds,
)
from rebound.domain.errors import InvalidConfiguration
from rebound.domain.models import BackoffDelay, RetryContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExponentialBackoff(BackoffPolicy):
    """Exponential backoff.

    With ``based_on_previous_value`` unset the delay for iteration ``n`` is
    ``first_backoff * factor ** (n - 1)``. With it set the delay is the previous
    delay times ``factor``, never less than ``first_backoff``. That mode keeps
    growing exponentially when a jitter perturbs each value, because every
    step builds on the delay that was actually used.

    The computed delay is not capped at ``max_backoff``. The bounds travel in
    the returned ``BackoffDelay``; callers apply them via a jitter or
    ``BackoffDelay.clamped()``.

    Attributes:
        first_backoff: Delay before the first retry, must be positive
        max_backoff: Upper bound (None = unbounded)
        factor: Integer multiplier, at least 1
        based_on_previous_value: Grow from the previous delay instead of the iteration
    """

    first_backoff: timedelta
    max_backoff: Optional[timedelta] = None
    factor: int = 2
    based_on_previous_value: bool = False

    def __post_init__(self):
        """Validate backoff parameters"""
        first_backoff = to_duration(self.first_backoff)
        max_backoff = to_duration(self.max_backoff)
        if first_backoff is None or first_backoff <= timedelta(0):
            raise InvalidConfiguration("first_backoff must be > 0")
        effective_max = max_backoff if max_backoff is not None else MAX_DURATION
        if effective_max <= first_backoff:
            raise InvalidConfiguration("max_backoff must be > first_backoff")
        if isinstance(self.factor, bool) or not isinstance(self.factor, int):
            raise InvalidConfiguration("factor must be an integer")
        if self.factor < 1:
            raise InvalidConfiguration("factor must be >= 1")
        object.__setattr__(self, "first_backoff", first_backoff)
        object.__setattr__(self, "max_backoff", max_backoff)

    @property
    def effective_max(self) -> timedelta:
        """Configured maximum, or the largest representable duration"""
        return self.max_backoff if self.max_backoff is not None else MAX_DURATION

    def evaluate(self, context: RetryContext) -> BackoffDelay:
        if self.based_on_previous_value:
            previous = context.previous_backoff or timedelta(0)
            delay = max(saturating_multiply(previous, self.factor), self.first_backoff)
            return BackoffDelay(delay, min_delay=self.first_backoff, max_delay=self.max_backoff)

        limit = to_microseconds(MAX_DURATION) // to_microseconds(self.first_backoff)
        multiplier = saturating_power(self.factor, context.iteration - 1, limit)
        delay = saturating_multiply(self.first_backoff, multiplier)
        return BackoffDelay(delay, min_delay=self.first_backoff, max_delay=self.effective_max)


def exponential(
    first_backoff: DurationLike,
    max_backoff: Optional[DurationLike] = None,
    factor: int = 2,
    based_on_previous_value: bool = False,
) -> ExponentialBackoff:
    """Backoff policy with exponential delay

    Args:
        first_backoff: Delay before the first retry (timedelta or seconds)
        max_backoff: Maximum delay, None for unbounded
        factor: Multiplier applied per retry
        based_on_previous_value: Compute from the previous (possibly jittered) delay

    Returns:
        Exponential backoff policy

    Raises:
        InvalidConfiguration: If first_backoff is not positive, max_backoff is
            not greater than first_backoff, or factor is below 1
    """
    policy = ExponentialBackoff(
        first_backoff=first_backoff,
        max_backoff=max_backoff,
        factor=factor,
        based_on_previous_value=based_on_previous_value,
    )
    logger.debug(
        f"Created exponential backoff: first={policy.first_backoff}, "
        f"max={policy.max_backoff}, factor={policy.factor}, "
        f"based_on_previous_value={policy.based_on_previous_value}"
    )
    return policy
