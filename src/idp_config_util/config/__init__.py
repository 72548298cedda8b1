"""Config module.

This module provides configuration management functionality.
"""

from idp_config_util.config.manager import (
    get_attribute_validation_config,
    get_logging_config,
    load_config,
)
from idp_config_util.config.schema import (
    AttributeValidationConfig,
    Config,
    LoggingConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_logging_config",
    "get_attribute_validation_config",
    # Configuration models
    "Config",
    "AttributeValidationConfig",
    "LoggingConfig",
]
