"""Jitter applied to backoff delays before they are used.

A jitter turns a ``BackoffDelay`` into the duration a retry loop actually
waits, keeping it within the delay's ``min_delay``/``max_delay`` bounds.
"""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import timedelta

from rebound.domain.durations import (
    MAX_DURATION,
    from_microseconds,
    to_microseconds,
)
from rebound.domain.errors import InvalidConfiguration
from rebound.domain.models import BackoffDelay

logger = logging.getLogger(__name__)


class Jitter(ABC):
    """Abstract base class for jitter functions"""

    @abstractmethod
    def apply(self, backoff: BackoffDelay) -> timedelta:
        """Return the duration to wait for ``backoff``"""
        pass

    def __call__(self, backoff: BackoffDelay) -> timedelta:
        return self.apply(backoff)


@dataclass(frozen=True)
class NoJitter(Jitter):
    """Use the delay as is, capped to its bounds"""

    def apply(self, backoff: BackoffDelay) -> timedelta:
        return backoff.clamped()


@dataclass(frozen=True)
class RandomJitter(Jitter):
    """Spread the delay uniformly by up to ``factor`` of its value.

    The random offset is chosen so the result stays inside the delay's
    bounds. A delay above ``max_delay`` by at most ``factor`` of its value is
    jittered down into ``[delay - offset, max_delay]``; one further out than
    that (a large uncapped exponential value) is only clamped.
    """

    factor: float = 0.5
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def __post_init__(self):
        if not 0.0 <= self.factor <= 1.0:
            raise InvalidConfiguration("jitter factor must be between 0 and 1")

    def apply(self, backoff: BackoffDelay) -> timedelta:
        delay = to_microseconds(backoff.delay)
        min_delay = to_microseconds(backoff.min_delay) if backoff.min_delay is not None else 0
        max_delay = to_microseconds(backoff.max_delay if backoff.max_delay is not None else MAX_DURATION)

        offset = int(abs(delay) * self.factor)
        low = max(min_delay - delay, -offset)
        high = min(max_delay - delay, offset)

        if high < low:
            jitter = 0
        elif high == low:
            jitter = low
        else:
            jitter = self.rng.randint(low, high)

        jittered = BackoffDelay(
            from_microseconds(delay + jitter),
            min_delay=backoff.min_delay,
            max_delay=backoff.max_delay,
        )
        return jittered.clamped()


NO_JITTER = NoJitter()


def no_jitter() -> NoJitter:
    """Jitter that leaves delays unchanged (apart from capping)"""
    return NO_JITTER


def random_jitter(factor: float = 0.5, seed: int | None = None) -> RandomJitter:
    """Jitter that randomizes delays by up to ``factor`` of their value

    Args:
        factor: Fraction of the delay used as jitter range (0.0-1.0)
        seed: Optional seed for reproducible sequences

    Returns:
        Random jitter

    Raises:
        InvalidConfiguration: If factor is outside [0, 1]
    """
    jitter = RandomJitter(factor=factor, rng=random.Random(seed))
    logger.debug(f"Created random jitter: factor={factor}, seed={seed}")
    return jitter
