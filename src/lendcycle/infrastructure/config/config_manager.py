"""Configuration manager for loading and validating .lendcycle.yml"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from lendcycle.domain.config import (
    AppConfig,
    DelayRange,
    GasConfig,
    NetworkConfig,
    RetryPolicy,
    StakeConfig,
)
from lendcycle.domain.errors import FatalStartupFailure

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".lendcycle.yml"
PRIVATE_KEY_ENV = "PRIVATE_KEY"


class ConfigurationError(FatalStartupFailure):
    """Configuration validation error."""

    pass


class ConfigManager:
    """Manages configuration from .lendcycle.yml and environment variables

    Loads configuration with validation using Pydantic models. Configuration priority:
    1. Default values (defined in Pydantic models)
    2. .lendcycle.yml file (searched from current directory)
    3. Environment variables (LENDCYCLE_*), including values from a .env file

    The signing key is only read from the PRIVATE_KEY environment variable.
    """

    def __init__(self, config_path: Optional[Path] = None, load_env_file: bool = True):
        """Initialize config manager

        Args:
            config_path: Path to .lendcycle.yml (searches from current dir if None)
            load_env_file: Whether to load a .env file into the environment

        Raises:
            ConfigurationError: If configuration validation fails
        """
        if load_env_file:
            load_dotenv(find_dotenv(usecwd=True))
        if isinstance(config_path, str):
            config_path = Path(config_path)
        self.config_path = config_path or self._find_config_file()
        try:
            self.config: AppConfig = self._load_config()
        except ValidationError as e:
            errors = []
            for error in e.errors():
                field = ".".join(str(x) for x in error["loc"])
                errors.append(f"  - {field}: {error['msg']}")
            raise ConfigurationError(
                "Configuration validation failed:\n" + "\n".join(errors)
            ) from e

    def _find_config_file(self) -> Optional[Path]:
        """Find .lendcycle.yml starting from current directory

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
        config_dict: Dict[str, Any] = {}

        if self.config_path and self.config_path.exists():
            try:
                with open(self.config_path, "r", encoding="utf-8") as f:
                    file_config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigurationError(f"Failed to read {self.config_path}: {e}") from e
            if not isinstance(file_config, dict):
                raise ConfigurationError(f"{self.config_path} must contain a mapping")
            config_dict = self._merge_config(config_dict, file_config)
            logger.info(f"Loaded configuration from {self.config_path}")

        config_dict = self._apply_env_overrides(copy.deepcopy(config_dict))
        return AppConfig(**config_dict)

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
        """Apply environment variable overrides"""
        if os.getenv("LENDCYCLE_RPC_URL"):
            config.setdefault("network", {})["rpc_url"] = os.getenv("LENDCYCLE_RPC_URL")

        if os.getenv("LENDCYCLE_EXPLORER_URL"):
            config.setdefault("network", {})["explorer_url"] = os.getenv("LENDCYCLE_EXPLORER_URL")

        return config

    def get_private_key(self) -> str:
        """Get the signing key

        Raises:
            FatalStartupFailure: If PRIVATE_KEY is not set
        """
        private_key = os.getenv(PRIVATE_KEY_ENV, "").strip()
        if not private_key:
            raise FatalStartupFailure(
                f"Signing key is required. Set the {PRIVATE_KEY_ENV} environment variable "
                "or add it to a .env file."
            )
        return private_key

    def get_network_config(self) -> NetworkConfig:
        return self.config.network

    def get_gas_config(self) -> GasConfig:
        return self.config.gas

    def get_stake_config(self) -> StakeConfig:
        return self.config.stake

    def get_retry_policy(self) -> RetryPolicy:
        return self.config.retry

    def get_delay_range(self) -> DelayRange:
        return self.config.delays
