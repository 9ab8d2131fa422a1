"""Backoff policy with a constant delay"""

import logging
from dataclasses import dataclass
from datetime import timedelta

from rebound.domain.backoff.base import BackoffPolicy
from rebound.domain.durations import DurationLike, to_duration
from rebound.domain.models import BackoffDelay, RetryContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FixedBackoff(BackoffPolicy):
    """Wait the same interval before every retry.

    The interval is not validated: zero and negative values are handed back
    unchanged, and interpreting them is up to the caller.
    """

    interval: timedelta

    def __post_init__(self):
        object.__setattr__(self, "interval", to_duration(self.interval))

    def evaluate(self, context: RetryContext) -> BackoffDelay:
        return BackoffDelay(self.interval)


def fixed(interval: DurationLike) -> FixedBackoff:
    """Backoff policy with a fixed delay

    Args:
        interval: Delay between retries (timedelta or seconds)

    Returns:
        Fixed backoff policy
    """
    policy = FixedBackoff(interval)
    logger.debug(f"Created fixed backoff: interval={policy.interval}")
    return policy
