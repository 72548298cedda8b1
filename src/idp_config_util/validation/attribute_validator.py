"""Attribute policy enforcement for identity repository writes.

The repository write path calls :meth:`AttributeValidator.validate_attributes`
with the proposed change-set before the write is committed. Violations are
raised as :class:`PolicyViolationError` subclasses; data is never coerced.
"""

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from idp_config_util.config.schema import (
    INVALID_CHARS_DELIMITER,
    MIN_PASSWORD_LENGTH_OPTION,
    USERNAME_INVALID_CHARS_OPTION,
)
from idp_config_util.logging_audit import get_logger
from idp_config_util.models.attributes import (
    AttributeChangeSet,
    CaseInsensitiveAttributes,
    OperationKind,
)
from idp_config_util.utils.exceptions import (
    InvalidAttributeValueError,
    PasswordPolicyError,
)

if TYPE_CHECKING:
    from idp_config_util.config.schema import AttributeValidationConfig

logger = get_logger(__name__)

ATTR_USER_PASSWORD = "userpassword"
ATTR_USERNAME = "username"


@dataclass(frozen=True)
class ValidationPolicy:
    """Active attribute policy.

    Attributes:
        min_password_length: Minimum password length, 0 disables the rule
        username_invalid_chars: Forbidden username substrings, empty disables the rule
    """

    min_password_length: int = 0
    username_invalid_chars: tuple[str, ...] = ()


class AttributeValidator:
    """Applies the configured attribute policy to proposed change-sets.

    The policy is replaced as a whole on every :meth:`initialize` call, so a
    concurrent :meth:`validate_attributes` sees either the old or the new
    policy and never a mix of both.

    Example:
        >>> validator = AttributeValidator()
        >>> validator.initialize({"minimumPasswordLength": {"8"}})
        >>> validator.validate_attributes(
        ...     {"userPassword": {"s3cretpw"}}, OperationKind.CREATE
        ... )
    """

    def __init__(self) -> None:
        self._policy = ValidationPolicy()

    @classmethod
    def from_settings(cls, settings: "AttributeValidationConfig") -> "AttributeValidator":
        """Create a validator from the application's attribute policy settings.

        Args:
            settings: AttributeValidationConfig from the loaded configuration

        Returns:
            Initialized AttributeValidator
        """
        validator = cls()
        validator.initialize(settings.to_raw_options())
        return validator

    @property
    def policy(self) -> ValidationPolicy:
        """Currently active policy."""
        return self._policy

    def initialize(self, raw_options: Optional[Mapping[str, Collection[str]]]) -> None:
        """Parse raw configuration options into a new policy.

        A malformed ``minimumPasswordLength`` disables the password rule and
        is logged; it never raises, so a bad setting cannot block startup.

        Args:
            raw_options: Mapping of option name to a collection of raw values
        """
        min_password_length = 0
        invalid_chars: tuple[str, ...] = ()

        for name, values in (raw_options or {}).items():
            if name == MIN_PASSWORD_LENGTH_OPTION:
                min_password_length = _parse_min_password_length(values)
            elif name == USERNAME_INVALID_CHARS_OPTION:
                raw_value = next((v for v in values or () if v), None)
                if raw_value is not None:
                    invalid_chars = _split_invalid_chars(raw_value)

        self._policy = ValidationPolicy(
            min_password_length=min_password_length,
            username_invalid_chars=invalid_chars,
        )
        logger.debug(
            "Attribute policy initialized: min_password_length=%d, "
            "username_invalid_chars=%s",
            min_password_length,
            list(invalid_chars),
        )

    def validate_attributes(
        self, attributes: AttributeChangeSet, operation: OperationKind
    ) -> None:
        """Validate a proposed change-set against the active policy.

        Args:
            attributes: Attribute name to values; names match case-insensitively
            operation: Kind of repository operation being performed

        Raises:
            PasswordPolicyError: If the password rule is violated
            InvalidAttributeValueError: If the username contains a forbidden substring
        """
        policy = self._policy
        view = CaseInsensitiveAttributes(attributes)

        _validate_password(policy, view, operation)
        _validate_username(policy, view, operation)


def _parse_min_password_length(values: Optional[Collection[str]]) -> int:
    """Parse the first raw value as a non-negative integer, or 0 on failure."""
    if not values:
        return 0
    value = next(iter(values))
    try:
        length = int(value)
    except (TypeError, ValueError):
        logger.warning(
            "Ignoring malformed %s value %r; password length rule disabled",
            MIN_PASSWORD_LENGTH_OPTION,
            value,
        )
        return 0
    return max(length, 0)


def _split_invalid_chars(raw_value: str) -> tuple[str, ...]:
    """Split on the delimiter, dropping trailing empty entries.

    Empty entries between delimiters are kept and match every username.
    """
    entries = raw_value.split(INVALID_CHARS_DELIMITER)
    while entries and not entries[-1]:
        entries.pop()
    return tuple(entries)


def _validate_password(
    policy: ValidationPolicy,
    attributes: CaseInsensitiveAttributes,
    operation: OperationKind,
) -> None:
    min_length = policy.min_password_length
    if min_length == 0:
        return

    if ATTR_USER_PASSWORD not in attributes:
        # Edits that don't touch the password are exempt
        if operation is OperationKind.CREATE:
            raise PasswordPolicyError(min_length)
        return

    password = attributes.first_value(ATTR_USER_PASSWORD)
    if password is None or len(password) < min_length:
        raise PasswordPolicyError(min_length)


def _validate_username(
    policy: ValidationPolicy,
    attributes: CaseInsensitiveAttributes,
    operation: OperationKind,
) -> None:
    # Non-create change-sets carry only modified attributes
    if not policy.username_invalid_chars or operation is not OperationKind.CREATE:
        return

    username = attributes.first_value(ATTR_USERNAME)
    if username is None:
        return

    for invalid in policy.username_invalid_chars:
        if invalid in username:
            raise InvalidAttributeValueError(
                attributes.original_key(ATTR_USERNAME) or ATTR_USERNAME,
                username,
                list(policy.username_invalid_chars),
            )
