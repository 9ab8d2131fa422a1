"""Value objects exchanged between a retry loop and a backoff policy"""

from rebound.domain.models.context import RetryContext
from rebound.domain.models.delay import BackoffDelay

__all__ = ["RetryContext", "BackoffDelay"]
