"""Base backoff policy interface"""

from abc import ABC, abstractmethod

from rebound.domain.models import BackoffDelay, RetryContext


class BackoffPolicy(ABC):
    """Abstract base class for backoff policies.

    A policy is a pure function of the retry context: it keeps only the
    parameters captured at construction time and can be shared freely
    between concurrent retry loops.
    """

    @abstractmethod
    def evaluate(self, context: RetryContext) -> BackoffDelay:
        """Compute the delay before the attempt described by ``context``

        Args:
            context: Current iteration and previously used delay

        Returns:
            Delay to wait, with the bounds a jitter should respect
        """
        pass

    def __call__(self, context: RetryContext) -> BackoffDelay:
        return self.evaluate(context)
