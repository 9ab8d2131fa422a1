"""RetryContext model - snapshot handed to a backoff policy on each retry"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional


@dataclass(frozen=True)
class RetryContext:
    """State of the retry loop at the moment a backoff is computed"""

    iteration: int  # 1-based retry attempt number
    previous_backoff: Optional[timedelta] = None  # Delay used before this attempt, if any

    def __post_init__(self):
        """Validate context data"""
        if self.iteration < 1:
            raise ValueError("Iteration must be >= 1")

    def next(self, backoff: Optional[timedelta]) -> "RetryContext":
        """Context for the following attempt, remembering the delay just used"""
        return RetryContext(iteration=self.iteration + 1, previous_backoff=backoff)
