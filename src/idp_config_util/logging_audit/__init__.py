"""Logging Audit module.

This module provides logging configuration and secret-redacting formatting.
"""

from .formatters import SecretRedactingFormatter
from .logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "SecretRedactingFormatter",
]
