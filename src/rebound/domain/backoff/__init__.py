"""Backoff policies"""

from rebound.domain.backoff.base import BackoffPolicy
from rebound.domain.backoff.exponential import ExponentialBackoff, exponential
from rebound.domain.backoff.fixed import FixedBackoff, fixed
from rebound.domain.backoff.zero import ZERO_BACKOFF, ZeroBackoff, zero

__all__ = [
    "BackoffPolicy",
    "ZeroBackoff",
    "FixedBackoff",
    "ExponentialBackoff",
    "ZERO_BACKOFF",
    "zero",
    "fixed",
    "exponential",
]
