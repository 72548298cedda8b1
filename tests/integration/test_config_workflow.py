"""Integration tests for the configuration to attribute policy workflow."""

import json
import logging
from pathlib import Path

import pytest

from idp_config_util.config import get_attribute_validation_config, load_config
from idp_config_util.logging_audit import configure_logging
from idp_config_util.models import OperationKind
from idp_config_util.utils.exceptions import InvalidAttributeValueError, PasswordPolicyError
from idp_config_util.validation import AttributeValidator


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("IDP_CONFIG_MIN_PASSWORD_LENGTH", "IDP_CONFIG_USERNAME_INVALID_CHARS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestConfigToValidator:
    """Test building the validator from loaded configuration."""

    def test_example_config_drives_validator(self, examples_dir: Path) -> None:
        """Test the shipped example configuration enables both rules."""
        # Arrange
        config = load_config(examples_dir / "config.example.json")

        # Act
        validator = AttributeValidator.from_settings(get_attribute_validation_config(config))

        # Assert
        assert validator.policy.min_password_length == 8
        assert validator.policy.username_invalid_chars == ("@", "/", "\\")
        with pytest.raises(InvalidAttributeValueError):
            validator.validate_attributes(
                {"username": ["dom\\alice"], "userPassword": ["longenough"]},
                OperationKind.CREATE,
            )

    def test_environment_override_reaches_validator(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test an environment override changes the enforced policy."""
        # Arrange
        path = tmp_path / "config.json"
        path.write_text(
            json.dumps({"attribute_validation": {"minimum_password_length": 4}}),
            encoding="utf-8",
        )
        monkeypatch.setenv("IDP_CONFIG_MIN_PASSWORD_LENGTH", "12")

        # Act
        validator = AttributeValidator.from_settings(
            get_attribute_validation_config(load_config(path))
        )

        # Assert
        with pytest.raises(PasswordPolicyError) as exc_info:
            validator.validate_attributes({"userpassword": ["only11chars"]}, OperationKind.CREATE)
        assert exc_info.value.min_length == 12

    def test_reload_swaps_policy(self, tmp_path: Path) -> None:
        """Test re-initializing from new settings replaces the active policy."""
        # Arrange
        strict = tmp_path / "strict.json"
        strict.write_text(
            json.dumps({"attribute_validation": {"minimum_password_length": 20}}),
            encoding="utf-8",
        )
        validator = AttributeValidator.from_settings(
            get_attribute_validation_config(load_config(strict))
        )
        change_set = {"userpassword": ["medium-length"]}
        with pytest.raises(PasswordPolicyError):
            validator.validate_attributes(change_set, OperationKind.CREATE)

        # Act
        relaxed = get_attribute_validation_config(load_config(tmp_path / "missing.json"))
        validator.initialize(relaxed.to_raw_options())

        # Assert
        validator.validate_attributes(change_set, OperationKind.CREATE)

    def test_policy_changes_are_logged(self, tmp_path: Path) -> None:
        """Test the active policy is written to the debug log."""
        # Arrange
        log_file = tmp_path / "policy.log"
        configure_logging(level="WARNING", log_file=log_file)

        # Act
        validator = AttributeValidator()
        validator.initialize({"minimumPasswordLength": {"6"}})
        for handler in logging.getLogger().handlers:
            handler.flush()

        # Assert
        assert "min_password_length=6" in log_file.read_text(encoding="utf-8")
