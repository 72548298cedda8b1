"""Custom log formatters for the IdP Config Utility.

This module provides specialized formatters for logging, including secret redaction.
"""

import logging
import re
from typing import List, Tuple


class SecretRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts secrets from log messages.

    Keystore and signature key passwords travel through the marshaller as
    plain text, so any ``password=...`` or ``"...-password": "..."`` fragment
    that reaches a log line is masked when redaction is enabled.

    Attributes:
        redact_secrets: Whether to enable secret redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = SecretRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_secrets=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_secrets: bool = False,
    ) -> None:
        """Initialize the SecretRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_secrets: Whether to enable secret redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_secrets = redact_secrets

        # Define redaction patterns: (regex, replacement_text)
        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # Matches: password=secret, userpassword='secret'
            (
                re.compile(r'(\w*password)=["\']?[^"\'\s,}]+["\']?', re.IGNORECASE),
                r"\1=[REDACTED]",
            ),
            # Matches dict/JSON renderings: 'saml2-keystore-password': 'secret'
            (
                re.compile(
                    r'(["\'][\w-]*password["\']\s*:\s*)(["\'])[^"\']*\2',
                    re.IGNORECASE,
                ),
                r"\1\2[REDACTED]\2",
            ),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional secret redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with secrets redacted if enabled
        """
        original = super().format(record)

        if self.redact_secrets:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
