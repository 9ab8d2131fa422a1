"""BackoffDelay model - the result of evaluating a backoff policy"""

from dataclasses import dataclass
from datetime import timedelta
from typing import ClassVar, Optional


@dataclass(frozen=True)
class BackoffDelay:
    """Delay to wait before the next attempt.

    ``min_delay`` and ``max_delay`` are the bounds a consumer (usually a jitter)
    should keep the delay within. ``delay`` itself may lie outside them: the
    exponential policy reports its raw value and leaves capping to the caller.
    """

    delay: timedelta
    min_delay: Optional[timedelta] = None
    max_delay: Optional[timedelta] = None

    ZERO: ClassVar["BackoffDelay"]

    def clamped(self) -> timedelta:
        """Delay kept within ``[min_delay, max_delay]``; absent bounds don't constrain"""
        delay = self.delay
        if self.max_delay is not None and delay > self.max_delay:
            delay = self.max_delay
        if self.min_delay is not None and delay < self.min_delay:
            delay = self.min_delay
        return delay

    def total_seconds(self) -> float:
        """Raw delay in seconds, as expected by sleep primitives"""
        return self.delay.total_seconds()


BackoffDelay.ZERO = BackoffDelay(timedelta(0))
