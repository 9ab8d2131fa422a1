"""Jitter configuration model."""

from typing import Optional

from pydantic import BaseModel, Field


class JitterConfig(BaseModel):
    """Configuration for jitter applied to backoff delays.

    Attributes:
        enabled: Whether random jitter is applied
        factor: Jitter range as a fraction of the delay (0.0-1.0)
        seed: Random seed (None = nondeterministic)
    """

    enabled: bool = False
    factor: float = Field(0.5, ge=0.0, le=1.0)
    seed: Optional[int] = None
