"""Backoff configuration model."""

from datetime import timedelta
from typing import Literal, Optional

from pydantic import BaseModel, Field


class BackoffConfig(BaseModel):
    """Configuration for the backoff policy.

    Durations accept seconds (int/float) or ISO 8601 strings such as "PT1.5S".

    Attributes:
        strategy: Backoff strategy (zero, fixed or exponential)
        interval: Delay for the fixed strategy
        first_backoff: First delay for the exponential strategy
        max_backoff: Maximum delay for the exponential strategy (None = unbounded)
        factor: Exponential multiplier
        based_on_previous_value: Grow from the previously used delay
    """

    strategy: Literal["zero", "fixed", "exponential"] = "exponential"
    interval: timedelta = timedelta(seconds=1)
    first_backoff: timedelta = timedelta(milliseconds=100)
    max_backoff: Optional[timedelta] = None
    factor: int = Field(2, ge=1, le=100)
    based_on_previous_value: bool = False
