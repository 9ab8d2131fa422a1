"""Factory for creating backoff policies and jitters from configuration"""

import logging
from typing import Callable, Dict, Optional

from rebound.domain.backoff.base import BackoffPolicy
from rebound.domain.backoff.exponential import exponential
from rebound.domain.backoff.fixed import fixed
from rebound.domain.backoff.zero import zero
from rebound.domain.config import BackoffConfig, JitterConfig
from rebound.domain.jitter import Jitter, no_jitter, random_jitter

logger = logging.getLogger(__name__)


def _create_zero(config: BackoffConfig) -> BackoffPolicy:
    return zero()


def _create_fixed(config: BackoffConfig) -> BackoffPolicy:
    return fixed(config.interval)


def _create_exponential(config: BackoffConfig) -> BackoffPolicy:
    return exponential(
        config.first_backoff,
        config.max_backoff,
        config.factor,
        config.based_on_previous_value,
    )


class BackoffFactory:
    """Factory for creating backoff policy instances"""

    STRATEGIES: Dict[str, Callable[[BackoffConfig], BackoffPolicy]] = {
        "zero": _create_zero,
        "fixed": _create_fixed,
        "exponential": _create_exponential,
    }

    @classmethod
    def create(cls, config: Optional[BackoffConfig] = None) -> BackoffPolicy:
        """Create backoff policy instance

        Args:
            config: Backoff configuration (defaults if None)

        Returns:
            BackoffPolicy instance

        Raises:
            ValueError: If strategy is not supported
            InvalidConfiguration: If the strategy parameters are invalid
        """
        if config is None:
            config = BackoffConfig()

        strategy = config.strategy.lower()

        if strategy not in cls.STRATEGIES:
            available = ", ".join(cls.STRATEGIES.keys())
            raise ValueError(
                f"Unknown backoff strategy: {config.strategy}. "
                f"Available strategies: {available}"
            )

        logger.info(f"Creating {strategy} backoff")
        return cls.STRATEGIES[strategy](config)

    @classmethod
    def create_jitter(cls, config: Optional[JitterConfig] = None) -> Jitter:
        """Create jitter instance

        Args:
            config: Jitter configuration (defaults if None)

        Returns:
            Random jitter when enabled, otherwise a capping no-op jitter
        """
        if config is None or not config.enabled:
            return no_jitter()
        return random_jitter(config.factor, seed=config.seed)
