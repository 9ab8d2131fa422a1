"""Main application configuration model."""

from pydantic import BaseModel, ConfigDict, Field

from rebound.domain.config.backoff import BackoffConfig
from rebound.domain.config.jitter import JitterConfig


class AppConfig(BaseModel):
    """Main application configuration.

    Root model aggregating all configuration sections. Validation is
    performed at load time to fail fast on configuration errors.

    Attributes:
        backoff: Backoff policy configuration
        jitter: Jitter configuration
    """

    backoff: BackoffConfig = Field(default_factory=BackoffConfig)
    jitter: JitterConfig = Field(default_factory=JitterConfig)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "backoff": {
                    "strategy": "exponential",
                    "first_backoff": 0.5,
                    "max_backoff": 30,
                    "factor": 2,
                    "based_on_previous_value": True,
                },
                "jitter": {
                    "enabled": True,
                    "factor": 0.5,
                },
            }
        },
    )
