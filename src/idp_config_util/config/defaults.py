"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present
DEFAULT_CONFIG: dict[str, Any] = {
    "attribute_validation": {
        # Both rules disabled until configured
        "minimum_password_length": 0,
        "username_invalid_chars": [],
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/idp-config-util.log",
        # Mask keystore and signature key passwords in log output
        "redact_secrets": True,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
