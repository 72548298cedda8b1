"""Validation module.

This module provides attribute policy enforcement for repository writes.
"""

from idp_config_util.validation.attribute_validator import (
    AttributeValidator,
    ValidationPolicy,
)

__all__ = [
    "AttributeValidator",
    "ValidationPolicy",
]
