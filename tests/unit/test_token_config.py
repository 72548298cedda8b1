"""Unit tests for the token issuance configuration model and builder.

Tests cover defaults, each construction invariant and the order in which they
are checked, immutability, equality, hashing and password masking.
"""

import pytest
from pydantic import ValidationError

from idp_config_util.token_config import (
    DEFAULT_NAME_ID_FORMAT,
    DEFAULT_TOKEN_LIFETIME_SECONDS,
    TRIPLEDES_CBC,
    TokenIssuanceConfig,
    TokenIssuanceConfigBuilder,
    default_strength_for,
)
from idp_config_util.token_config.constants import AES_128_CBC, AES_256_CBC
from idp_config_util.utils.exceptions import ConfigurationInvariantError


def _encrypting(builder: TokenIssuanceConfigBuilder) -> TokenIssuanceConfigBuilder:
    return (
        builder.encryption_algorithm(AES_256_CBC)
        .encryption_algorithm_strength(256)
        .encryption_key_alias("sp-encryption")
        .keystore_file_name("/etc/idp/keystore.jks")
        .keystore_password(b"storepass")
    )


class TestDefaults:
    """Test builder defaults."""

    def test_minimal_config_defaults(self, minimal_config: TokenIssuanceConfig) -> None:
        """Test every optional field's default value."""
        # Arrange & Act & Assert
        assert minimal_config.identity_provider_id == "https://idp.example.com"
        assert minimal_config.sp_entity_id == "https://sp.example.com"
        assert minimal_config.name_id_format == DEFAULT_NAME_ID_FORMAT
        assert minimal_config.token_lifetime_seconds == DEFAULT_TOKEN_LIFETIME_SECONDS == 600
        assert dict(minimal_config.attribute_map) == {}
        assert minimal_config.sign_assertion is False
        assert minimal_config.encrypt_assertion is False
        assert minimal_config.encrypt_name_id is False
        assert minimal_config.encrypt_attributes is False
        assert minimal_config.encryption_algorithm_strength == 0
        assert minimal_config.sp_acs_url is None
        assert minimal_config.keystore_password is None
        assert minimal_config.custom_authn_context_mapper_class_name is None

    def test_none_restores_defaults(self, minimal_builder: TokenIssuanceConfigBuilder) -> None:
        """Test None for name_id_format, lifetime and attribute map means default."""
        # Arrange
        minimal_builder.name_id_format("custom").token_lifetime_seconds(5)

        # Act
        config = (
            minimal_builder.name_id_format(None)
            .token_lifetime_seconds(None)
            .attribute_map(None)
            .build()
        )

        # Assert
        assert config.name_id_format == DEFAULT_NAME_ID_FORMAT
        assert config.token_lifetime_seconds == DEFAULT_TOKEN_LIFETIME_SECONDS
        assert dict(config.attribute_map) == {}

    def test_default_strength_for(self) -> None:
        """Test the conventional strength lookup."""
        # Arrange & Act & Assert
        assert default_strength_for(AES_128_CBC) == 128
        assert default_strength_for(AES_256_CBC) == 256
        assert default_strength_for(TRIPLEDES_CBC) == 0
        assert default_strength_for("urn:unknown") is None


class TestInvariants:
    """Test construction invariants."""

    def test_sp_entity_id_required(self) -> None:
        """Test a missing SP entity id is rejected."""
        # Arrange
        builder = TokenIssuanceConfig.builder().identity_provider_id("https://idp")

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="entity id of the consumer"):
            builder.build()

    def test_sp_entity_id_checked_before_idp_id(self) -> None:
        """Test the SP entity id is reported first when both are missing."""
        # Arrange & Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="entity id of the consumer"):
            TokenIssuanceConfig.builder().build()

    @pytest.mark.parametrize("idp_id", [None, ""])
    def test_idp_id_required(self, idp_id: str) -> None:
        """Test a missing or empty identity provider id is rejected."""
        # Arrange
        builder = TokenIssuanceConfig.builder().sp_entity_id("https://sp").identity_provider_id(
            idp_id
        )

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="Identity Provider id"):
            builder.build()

    @pytest.mark.parametrize("flag", ["encrypt_assertion", "encrypt_name_id", "encrypt_attributes"])
    def test_encryption_requires_algorithm(
        self, minimal_builder: TokenIssuanceConfigBuilder, flag: str
    ) -> None:
        """Test each encryption flag requires an algorithm."""
        # Arrange
        getattr(minimal_builder, flag)(True)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="encryption algorithm must"):
            minimal_builder.build()

    def test_encryption_requires_strength(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test a non-triple-DES algorithm requires a strength."""
        # Arrange
        _encrypting(minimal_builder).encrypt_assertion(True).encryption_algorithm_strength(0)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="algorithm strength"):
            minimal_builder.build()

    def test_tripledes_needs_no_strength(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test triple-DES is accepted with strength 0."""
        # Arrange
        _encrypting(minimal_builder).encrypt_assertion(True).encryption_algorithm(
            TRIPLEDES_CBC
        ).encryption_algorithm_strength(0)

        # Act
        config = minimal_builder.build()

        # Assert
        assert config.encryption_algorithm == TRIPLEDES_CBC
        assert config.encryption_algorithm_strength == 0

    def test_encryption_requires_key_alias(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test encryption requires the SP encryption key alias."""
        # Arrange
        _encrypting(minimal_builder).encrypt_name_id(True).encryption_key_alias(None)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="encryption key alias"):
            minimal_builder.build()

    @pytest.mark.parametrize(
        "file_name, password",
        [(None, b"storepass"), ("/etc/idp/keystore.jks", None), ("", b"x"), ("ks", b"")],
    )
    def test_encryption_requires_keystore(
        self,
        minimal_builder: TokenIssuanceConfigBuilder,
        file_name: str,
        password: bytes,
    ) -> None:
        """Test encryption requires both keystore file and password."""
        # Arrange
        _encrypting(minimal_builder).encrypt_attributes(True).keystore_file_name(
            file_name
        ).keystore_password(password)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="keystore"):
            minimal_builder.build()

    def test_signing_requires_keystore(
        self, signing_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test signing requires the keystore."""
        # Arrange
        signing_builder.keystore_password(None)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="keystore"):
            signing_builder.build()

    @pytest.mark.parametrize("setter", ["signature_key_alias", "signature_key_password"])
    def test_signing_requires_signature_key(
        self, signing_builder: TokenIssuanceConfigBuilder, setter: str
    ) -> None:
        """Test signing requires the signature key alias and password."""
        # Arrange
        getattr(signing_builder, setter)(None)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="signature key alias"):
            signing_builder.build()

    @pytest.mark.parametrize("flag", ["encrypt_name_id", "encrypt_attributes"])
    def test_whole_and_element_encryption_exclusive(
        self, minimal_builder: TokenIssuanceConfigBuilder, flag: str
    ) -> None:
        """Test whole-assertion encryption excludes element encryption."""
        # Arrange
        _encrypting(minimal_builder).encrypt_assertion(True)
        getattr(minimal_builder, flag)(True)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="Either the entire assertion"):
            minimal_builder.build()

    def test_encryption_checked_before_keystore(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test the first violated invariant in order is reported."""
        # Arrange
        minimal_builder.encrypt_assertion(True).sign_assertion(True)

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="encryption algorithm must"):
            minimal_builder.build()

    def test_signing_without_encryption_needs_no_algorithm(
        self, signing_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test a signed-only configuration needs no encryption settings."""
        # Arrange & Act
        config = signing_builder.build()

        # Assert
        assert config.sign_assertion is True
        assert config.encryption_algorithm is None

    def test_wrong_field_type_reported_as_invariant_error(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test pydantic type errors surface as ConfigurationInvariantError."""
        # Arrange
        minimal_builder.token_lifetime_seconds("ten minutes")  # type: ignore[arg-type]

        # Act & Assert
        with pytest.raises(ConfigurationInvariantError, match="Invalid token issuance"):
            minimal_builder.build()


class TestImmutability:
    """Test that built configurations cannot change."""

    def test_fields_cannot_be_assigned(self, minimal_config: TokenIssuanceConfig) -> None:
        """Test field assignment is rejected."""
        # Arrange & Act & Assert
        with pytest.raises(ValidationError):
            minimal_config.sp_entity_id = "https://other"  # type: ignore[misc]

        assert minimal_config.sp_entity_id == "https://sp.example.com"

    def test_attribute_map_is_read_only(self, minimal_builder: TokenIssuanceConfigBuilder) -> None:
        """Test the attribute map cannot be modified in place."""
        # Arrange
        config = minimal_builder.attribute_map({"mail": "email"}).build()

        # Act & Assert
        with pytest.raises(TypeError):
            config.attribute_map["cn"] = "fullName"  # type: ignore[index]

    def test_caller_mutations_do_not_leak(
        self, signing_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test later changes to caller-held objects don't reach the config."""
        # Arrange
        attribute_map = {"mail": "email"}
        password = bytearray(b"storepass")
        signing_builder.attribute_map(attribute_map).keystore_password(password)  # type: ignore[arg-type]

        # Act
        config = signing_builder.build()
        attribute_map["cn"] = "fullName"
        password[:] = b"XXXXXXXXX"

        # Assert
        assert dict(config.attribute_map) == {"mail": "email"}
        assert config.keystore_password == b"storepass"

    def test_builder_reuse_after_build(self, minimal_builder: TokenIssuanceConfigBuilder) -> None:
        """Test building again after modifying the builder leaves the first result alone."""
        # Arrange
        first = minimal_builder.build()

        # Act
        second = minimal_builder.token_lifetime_seconds(30).build()

        # Assert
        assert first.token_lifetime_seconds == 600
        assert second.token_lifetime_seconds == 30


class TestEqualityAndHash:
    """Test value equality, hashing and to_builder."""

    def test_equal_values_are_equal(self, full_config: TokenIssuanceConfig) -> None:
        """Test configurations with equal fields compare equal."""
        # Arrange & Act
        copy = full_config.to_builder().build()

        # Assert
        assert copy == full_config
        assert hash(copy) == hash(full_config)

    def test_attribute_map_order_does_not_matter(
        self, minimal_builder: TokenIssuanceConfigBuilder
    ) -> None:
        """Test equality and hash ignore attribute map insertion order."""
        # Arrange
        first = minimal_builder.attribute_map({"a": "1", "b": "2"}).build()
        second = minimal_builder.attribute_map({"b": "2", "a": "1"}).build()

        # Act & Assert
        assert first == second
        assert hash(first) == hash(second)

    def test_any_field_difference_breaks_equality(
        self, full_config: TokenIssuanceConfig
    ) -> None:
        """Test fields outside the hash still take part in equality."""
        # Arrange & Act
        other = full_config.to_builder().signature_key_password(b"other").build()

        # Assert
        assert other != full_config

    def test_not_equal_to_other_types(self, minimal_config: TokenIssuanceConfig) -> None:
        """Test comparison with unrelated objects is False."""
        # Arrange & Act & Assert
        assert minimal_config != "config"

    def test_usable_as_dict_key(self, minimal_config: TokenIssuanceConfig) -> None:
        """Test configurations can key a dict."""
        # Arrange
        registry = {minimal_config: "sp"}

        # Act & Assert
        assert registry[minimal_config.to_builder().build()] == "sp"

    def test_to_builder_allows_derivation(self, full_config: TokenIssuanceConfig) -> None:
        """Test deriving a modified configuration from an existing one."""
        # Arrange & Act
        derived = full_config.to_builder().token_lifetime_seconds(60).build()

        # Assert
        assert derived.token_lifetime_seconds == 60
        assert derived.sp_entity_id == full_config.sp_entity_id
        assert full_config.token_lifetime_seconds == 300


class TestRepr:
    """Test string rendering."""

    def test_passwords_are_masked(self, full_config: TokenIssuanceConfig) -> None:
        """Test password contents never appear in repr or str."""
        # Arrange & Act
        text = repr(full_config) + str(full_config)

        # Assert
        assert "storepass" not in text
        assert "keypass" not in text
        assert "keystore_password='xxx'" in text
        assert "https://sp.example.com" in text

    def test_unset_passwords_render_as_none(self, minimal_config: TokenIssuanceConfig) -> None:
        """Test unset passwords are shown as None rather than masked."""
        # Arrange & Act & Assert
        assert "keystore_password=None" in repr(minimal_config)

