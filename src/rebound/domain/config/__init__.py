"""Configuration models with Pydantic validation."""

from rebound.domain.config.app import AppConfig
from rebound.domain.config.backoff import BackoffConfig
from rebound.domain.config.jitter import JitterConfig

__all__ = [
    "AppConfig",
    "BackoffConfig",
    "JitterConfig",
]
