"""Backoff policy that never waits"""

from dataclasses import dataclass

from rebound.domain.backoff.base import BackoffPolicy
from rebound.domain.models import BackoffDelay, RetryContext


@dataclass(frozen=True)
class ZeroBackoff(BackoffPolicy):
    """Retry immediately"""

    def evaluate(self, context: RetryContext) -> BackoffDelay:
        return BackoffDelay.ZERO


ZERO_BACKOFF = ZeroBackoff()


def zero() -> ZeroBackoff:
    """Backoff policy with no delay"""
    return ZERO_BACKOFF
