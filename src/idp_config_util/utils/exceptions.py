"""Custom exception classes for the IdP Config Utility.

All exceptions inherit from IdpConfigError to allow catching all custom exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class IdpConfigError(Exception):
    """Base exception for all IdP Config Utility custom exceptions."""

    pass


class PolicyViolationError(IdpConfigError):
    """Raised when a proposed attribute change-set violates attribute policy.

    The caller is expected to reject the write and show the user the rule.
    The rule parameters are kept on the exception so that the caller can
    format its own (possibly localized) message.

    Attributes:
        error_code: Stable identifier of the violated rule
        args_for_message: Rule parameters in message-argument order
    """

    error_code: str = "POLICY_VIOLATION"

    def __init__(self, message: str, *args_for_message: Any) -> None:
        super().__init__(message)
        self.args_for_message = tuple(args_for_message)


class PasswordPolicyError(PolicyViolationError):
    """Raised when a password does not satisfy the minimum length rule.

    Examples:
        - Password attribute missing from a create request
        - Password attribute present with no value
        - Password shorter than the configured minimum
    """

    error_code = "MINIMUM_PASSWORD_LENGTH"

    def __init__(self, min_length: int) -> None:
        super().__init__(
            f"Password must be at least {min_length} characters long",
            str(min_length),
        )
        self.min_length = min_length


class InvalidAttributeValueError(PolicyViolationError):
    """Raised when an attribute value contains a forbidden substring.

    Examples:
        - Username containing '@' when '@' is configured as forbidden
    """

    error_code = "IDENTITY_ATTRIBUTE_INVALID"

    def __init__(
        self, attribute_name: str, value: str, forbidden: list[str]
    ) -> None:
        super().__init__(
            f"Invalid value '{value}' for attribute '{attribute_name}'. "
            f"Value must not contain any of: {', '.join(forbidden)}",
            attribute_name,
            value,
            list(forbidden),
        )
        self.attribute_name = attribute_name
        self.value = value
        self.forbidden = list(forbidden)


class ConfigurationInvariantError(IdpConfigError):
    """Raised when a token issuance configuration violates its invariants.

    This is a programming or configuration error, not a runtime condition
    to recover from.

    Examples:
        - Missing SP entity id or identity provider id
        - Encryption requested without an encryption algorithm
        - Whole-assertion and element-level encryption both requested
    """

    pass


class MarshallingError(IdpConfigError):
    """Raised when a persisted configuration record cannot be converted.

    Examples:
        - Malformed integer or boolean text
        - Unexpected value type for the attribute map field
        - Password bytes that are not valid UTF-8
    """

    pass


class ConfigurationError(IdpConfigError):
    """Raised when application configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Configuration value out of range
    """

    pass


class ErrorCategory(Enum):
    """Error categorization for handling strategy.

    Attributes:
        RECOVERABLE: Reject the request and report the rule to the user
        CRITICAL: Stop processing the record or configuration
    """

    RECOVERABLE = "RECOVERABLE"
    CRITICAL = "CRITICAL"


@dataclass
class ErrorInfo:
    """Structured error information for actionable error handling.

    Attributes:
        category: Error category (RECOVERABLE, CRITICAL)
        error_type: Exception class name (e.g., "PasswordPolicyError")
        message: User-friendly error message
        remediation: Actionable guidance for resolving the error
        error_code: Rule identifier for policy violations
        technical_details: Optional technical details for debugging

    Example:
        >>> info = create_error_info(PasswordPolicyError(8))
        >>> info.category
        <ErrorCategory.RECOVERABLE: 'RECOVERABLE'>
    """

    category: ErrorCategory
    error_type: str
    message: str
    remediation: str
    error_code: Optional[str] = None
    technical_details: Optional[str] = None


def categorize_error(exception: Exception) -> ErrorCategory:
    """Categorize exception for error handling strategy.

    Args:
        exception: The exception to categorize

    Returns:
        ErrorCategory indicating handling strategy

    Example:
        >>> categorize_error(PasswordPolicyError(8))
        ErrorCategory.RECOVERABLE
        >>> categorize_error(MarshallingError("bad record"))
        ErrorCategory.CRITICAL
    """
    if isinstance(exception, PolicyViolationError):
        return ErrorCategory.RECOVERABLE

    # Invariant, marshalling and configuration errors, and anything unknown
    return ErrorCategory.CRITICAL


def create_error_info(exception: Exception) -> ErrorInfo:
    """Create structured error information from exception.

    Args:
        exception: Exception that occurred

    Returns:
        ErrorInfo with categorization and remediation guidance
    """
    category = categorize_error(exception)

    technical_details = None
    if exception.__cause__ is not None:
        technical_details = (
            f"Caused by: {type(exception.__cause__).__name__}: {exception.__cause__}"
        )

    return ErrorInfo(
        category=category,
        error_type=type(exception).__name__,
        message=str(exception),
        remediation=_generate_remediation(exception),
        error_code=getattr(exception, "error_code", None),
        technical_details=technical_details,
    )


def _generate_remediation(exception: Exception) -> str:
    """Generate actionable remediation message for an error.

    Args:
        exception: Exception that occurred

    Returns:
        Actionable remediation message
    """
    if isinstance(exception, PasswordPolicyError):
        return (
            f"Choose a password with at least {exception.min_length} characters "
            "and submit the request again."
        )

    if isinstance(exception, InvalidAttributeValueError):
        return (
            f"Remove the characters {exception.forbidden} from "
            f"'{exception.attribute_name}' and submit the request again."
        )

    if isinstance(exception, ConfigurationInvariantError):
        return (
            "Token issuance configuration is inconsistent. Check the signing and "
            "encryption flags together with the keystore, key alias and algorithm "
            "settings they require."
        )

    if isinstance(exception, MarshallingError):
        return (
            "Stored configuration record is corrupt or was written by an "
            "incompatible version. Re-save the configuration to rewrite the record."
        )

    if isinstance(exception, ConfigurationError):
        return (
            "Configuration error. Check config.json for missing or invalid values. "
            "Use examples/config.example.json as template."
        )

    return "Review error message and check the log file for complete details."
