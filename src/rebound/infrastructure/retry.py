"""Backoff policies as tenacity wait strategies.

tenacity owns the retry loop (stop conditions, exception filtering, sleeping);
this module only tells it how long to wait.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional
from weakref import WeakKeyDictionary

from tenacity import RetryCallState
from tenacity.wait import wait_base

from rebound.domain.backoff import BackoffPolicy
from rebound.domain.jitter import Jitter
from rebound.domain.models import RetryContext

logger = logging.getLogger(__name__)


def context_from_retry_state(
    retry_state: RetryCallState,
    previous_backoff: Optional[timedelta] = None,
) -> RetryContext:
    """Build the backoff context for a tenacity retry state.

    The first retry never has a previous backoff, whatever the caller passes.
    """
    iteration = retry_state.attempt_number
    previous = previous_backoff if iteration > 1 else None
    return RetryContext(iteration=iteration, previous_backoff=previous)


class wait_backoff(wait_base):
    """Wait strategy driven by a backoff policy

    The delay returned for each retry state is remembered and fed back as the
    previous backoff on its next attempt. It is this strategy's own delay
    (jitter included), not tenacity's ``upcoming_sleep``, which also holds
    any waits combined with ``+``.

    Args:
        policy: Backoff policy computing the delay
        jitter: Optional jitter; without one the delay is capped to its bounds
    """

    def __init__(self, policy: BackoffPolicy, jitter: Optional[Jitter] = None) -> None:
        self.policy = policy
        self.jitter = jitter
        self._applied: "WeakKeyDictionary[RetryCallState, timedelta]" = WeakKeyDictionary()

    def __call__(self, retry_state: RetryCallState) -> float:
        context = context_from_retry_state(retry_state, self._applied.get(retry_state))
        backoff = self.policy.evaluate(context)
        delay = self.jitter.apply(backoff) if self.jitter is not None else backoff.clamped()
        self._applied[retry_state] = delay
        logger.debug(
            f"Backoff for attempt {context.iteration}: "
            f"computed {backoff.total_seconds():.3f}s, waiting {delay.total_seconds():.3f}s"
        )
        return max(0.0, delay.total_seconds())
