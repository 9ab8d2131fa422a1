"""Configuration manager for loading and validating .rebound.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from rebound.domain.backoff import BackoffPolicy
from rebound.domain.backoff.factory import BackoffFactory
from rebound.domain.config import AppConfig, BackoffConfig, JitterConfig
from rebound.domain.errors import InvalidConfiguration
from rebound.domain.jitter import Jitter

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".rebound.yml"


class ConfigurationError(Exception):
    """Configuration validation error."""

    pass


def _seconds_or_raw(value: str) -> Union[float, str]:
    """Env values are strings: plain numbers are seconds, anything else goes to pydantic"""
    try:
        return float(value)
    except ValueError:
        return value


class ConfigManager:
    """Manages configuration from .rebound.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values
    2. .rebound.yml file (searched from current directory upwards)
    3. Environment variables (REBOUND_*)
    4. CLI arguments (handled by CLI layer)
    """

    DEFAULT_CONFIG = {
        "backoff": {
            "strategy": "exponential",
            "interval": 1.0,
            "first_backoff": 0.1,
            "max_backoff": None,
            "factor": 2,
            "based_on_previous_value": False,
        },
        "jitter": {
            "enabled": False,
            "factor": 0.5,
            "seed": None,
        },
    }

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config manager

        Args:
            config_path: Path to .rebound.yml (searches from current dir if None)

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                msg = error["msg"]
                errors.append(f"  - {field}: {msg}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .rebound.yml starting from current directory

        Returns:
            Path to config file or None if not found
        """
        current = Path.cwd()
        for parent in [current] + list(current.parents):
            config_file = parent / CONFIG_FILE_NAME
            if config_file.exists():
                logger.info(f"Found config file: {config_file}")
                return config_file
        logger.debug(f"No {CONFIG_FILE_NAME} found, using defaults")
        return None

    def _load_config(self) -> AppConfig:
        """Load configuration from file and validate with Pydantic

        Raises:
            ValidationError: If configuration is invalid
            ConfigurationError: If the file or one of its sections is not a mapping
        """
        config_dict = copy.deepcopy(self.DEFAULT_CONFIG)

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
                self._check_mappings(file_config)
                config_dict = self._merge_config(config_dict, file_config)
                logger.info(f"Loaded configuration from {self.config_path}")
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config from {self.config_path}: {e}")
                logger.info("Using default configuration")

        config_dict = self._apply_env_overrides(config_dict)

        return AppConfig(**config_dict)

    def _check_mappings(self, file_config: Any) -> None:
        """Reject a config file whose root or known sections are not mappings

        Raises:
            ConfigurationError: If the file does not have the expected shape
        """
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration validation failed:\n"
                f"  - {self.config_path}: expected a mapping, got {type(file_config).__name__}"
            )
        errors = [
            f"  - {section}: expected a mapping, got {type(file_config[section]).__name__}"
            for section in self.DEFAULT_CONFIG
            if section in file_config and not isinstance(file_config[section], dict)
        ]
        if errors:
            raise ConfigurationError("Configuration validation failed:\n" + "\n".join(errors))

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries"""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result

    def _apply_env_overrides(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Apply environment variable overrides

        Args:
            config: Configuration dictionary

        Returns:
            Configuration with env overrides applied
        """
        if os.getenv("REBOUND_BACKOFF_STRATEGY"):
            config["backoff"]["strategy"] = os.getenv("REBOUND_BACKOFF_STRATEGY").lower()

        if os.getenv("REBOUND_FIRST_BACKOFF"):
            config["backoff"]["first_backoff"] = _seconds_or_raw(os.getenv("REBOUND_FIRST_BACKOFF"))

        if os.getenv("REBOUND_MAX_BACKOFF"):
            config["backoff"]["max_backoff"] = _seconds_or_raw(os.getenv("REBOUND_MAX_BACKOFF"))

        # pydantic rejects non-integer strings with a field error
        if os.getenv("REBOUND_BACKOFF_FACTOR"):
            config["backoff"]["factor"] = os.getenv("REBOUND_BACKOFF_FACTOR")

        # Setting a jitter factor implies jitter is wanted
        if os.getenv("REBOUND_JITTER_FACTOR"):
            config["jitter"]["factor"] = os.getenv("REBOUND_JITTER_FACTOR")
            config["jitter"]["enabled"] = True

        return config

    def get_backoff_config(self) -> BackoffConfig:
        """Get backoff configuration

        Returns:
            Backoff configuration model
        """
        return self.config.backoff

    def get_jitter_config(self) -> JitterConfig:
        """Get jitter configuration

        Returns:
            Jitter configuration model
        """
        return self.config.jitter

    def build_backoff_policy(self) -> BackoffPolicy:
        """Create the configured backoff policy

        Raises:
            ConfigurationError: If the backoff parameters are inconsistent
        """
        try:
            return BackoffFactory.create(self.config.backoff)
        except InvalidConfiguration as e:
            raise ConfigurationError(f"Invalid backoff configuration: {e}") from e

    def build_jitter(self) -> Jitter:
        """Create the configured jitter"""
        return BackoffFactory.create_jitter(self.config.jitter)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key (supports dot notation)

        Args:
            key: Configuration key (e.g., "backoff.factor" or "backoff")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key.split(".")
        value = self.config.model_dump()
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value
