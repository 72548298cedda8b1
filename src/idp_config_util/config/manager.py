"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from idp_config_util.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from idp_config_util.config.schema import (
    AttributeValidationConfig,
    Config,
    INVALID_CHARS_DELIMITER,
    LoggingConfig,
)
from idp_config_util.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "IDP_CONFIG_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (IDP_CONFIG_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> config.attribute_validation.minimum_password_length
        8
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)

    try:
        config_dict = _apply_env_overrides(config_dict)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid environment override: {e}\n"
            f"Fix: Check {ENV_PREFIX}* environment variables for numeric values."
        ) from e

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or not an object
    """
    if not config_path.exists():
        logger.info(
            f"Config file not found: {config_path}. Using default configuration."
        )
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read config file: {config_path}\n"
            f"Error: {e}\n"
            f"Fix: Check file permissions and path"
        ) from e

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Invalid config file: {config_path}\n"
            f"Fix: The top-level JSON value must be an object"
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config_dict


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with IDP_CONFIG_ prefix.

    Recognized variables:
    - IDP_CONFIG_MIN_PASSWORD_LENGTH
    - IDP_CONFIG_USERNAME_INVALID_CHARS ('|'-delimited)
    - IDP_CONFIG_LOG_LEVEL, IDP_CONFIG_LOG_FILE, IDP_CONFIG_REDACT_SECRETS

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied

    Raises:
        ValueError: If a numeric override is not an integer
    """
    if min_length := os.getenv(f"{ENV_PREFIX}MIN_PASSWORD_LENGTH"):
        config_dict.setdefault("attribute_validation", {})[
            "minimum_password_length"
        ] = int(min_length)
        logger.debug("Override: minimum_password_length from environment")

    if invalid_chars := os.getenv(f"{ENV_PREFIX}USERNAME_INVALID_CHARS"):
        config_dict.setdefault("attribute_validation", {})[
            "username_invalid_chars"
        ] = [c for c in invalid_chars.split(INVALID_CHARS_DELIMITER) if c]
        logger.debug("Override: username_invalid_chars from environment")

    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_secrets := os.getenv(f"{ENV_PREFIX}REDACT_SECRETS"):
        config_dict.setdefault("logging", {})["redact_secrets"] = _parse_bool(
            redact_secrets
        )
        logger.debug("Override: redact_secrets from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.

    Args:
        value: String value to parse (case-insensitive)

    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration.

    Args:
        config: Configuration instance

    Returns:
        LoggingConfig instance
    """
    return config.logging


def get_attribute_validation_config(config: Config) -> AttributeValidationConfig:
    """Get attribute policy configuration.

    Args:
        config: Configuration instance

    Returns:
        AttributeValidationConfig instance

    Example:
        >>> config = load_config()
        >>> validator = AttributeValidator.from_settings(
        ...     get_attribute_validation_config(config)
        ... )
    """
    return config.attribute_validation
