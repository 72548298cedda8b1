"""Configuration schema models using pydantic.

This module defines the application configuration structure and validation rules.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

# Option names understood by AttributeValidator.initialize
MIN_PASSWORD_LENGTH_OPTION = "minimumPasswordLength"
USERNAME_INVALID_CHARS_OPTION = "usernameInvalidChars"

# Delimiter between forbidden username substrings in the raw option value
INVALID_CHARS_DELIMITER = "|"


class AttributeValidationConfig(BaseModel):
    """Configuration for identity repository attribute policy.

    Attributes:
        minimum_password_length: Minimum password length (0 disables the rule)
        username_invalid_chars: Substrings a new username must not contain

    Example:
        >>> cfg = AttributeValidationConfig(
        ...     minimum_password_length=8,
        ...     username_invalid_chars=["@", "/"]
        ... )
        >>> cfg.to_raw_options()["usernameInvalidChars"]
        {'@|/'}
    """

    minimum_password_length: int = Field(
        default=0,
        ge=0,
        description="Minimum password length, 0 disables the rule",
    )
    username_invalid_chars: list[str] = Field(
        default_factory=list,
        description="Forbidden username substrings",
    )

    @field_validator("username_invalid_chars")
    @classmethod
    def validate_invalid_chars(cls, v: list[str]) -> list[str]:
        """Validate forbidden username substrings.

        Args:
            v: List of forbidden substrings

        Returns:
            Validated list

        Raises:
            ValueError: If an entry is empty or contains the '|' delimiter
        """
        for entry in v:
            if not entry:
                raise ValueError("Invalid username_invalid_chars: entries must not be empty")
            if INVALID_CHARS_DELIMITER in entry:
                raise ValueError(
                    f"Invalid username_invalid_chars entry: {entry!r}. "
                    f"Entries must not contain '{INVALID_CHARS_DELIMITER}'"
                )
        return v

    def to_raw_options(self) -> dict[str, set[str]]:
        """Render as the option-name to value-set mapping the validator parses.

        Returns:
            Raw option mapping; disabled rules are left out
        """
        options: dict[str, set[str]] = {}
        if self.minimum_password_length:
            options[MIN_PASSWORD_LENGTH_OPTION] = {str(self.minimum_password_length)}
        if self.username_invalid_chars:
            options[USERNAME_INVALID_CHARS_OPTION] = {
                INVALID_CHARS_DELIMITER.join(self.username_invalid_chars)
            }
        return options


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_secrets: Whether to mask passwords in logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/idp-config-util.log"),
        description="Log file path"
    )
    redact_secrets: bool = Field(
        default=True,
        description="Mask passwords in logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(valid_levels)}"
            )
        return v_upper


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        attribute_validation: Attribute policy applied before repository writes
        logging: Logging configuration

    Example:
        >>> config = Config(
        ...     attribute_validation=AttributeValidationConfig(minimum_password_length=8)
        ... )
        >>> config.attribute_validation.minimum_password_length
        8
    """

    attribute_validation: AttributeValidationConfig = AttributeValidationConfig()
    logging: LoggingConfig = LoggingConfig()
