"""Models module.

This module provides data models shared across the application.
"""

from idp_config_util.models.attributes import (
    AttributeChangeSet,
    CaseInsensitiveAttributes,
    OperationKind,
)

__all__ = [
    "AttributeChangeSet",
    "CaseInsensitiveAttributes",
    "OperationKind",
]
