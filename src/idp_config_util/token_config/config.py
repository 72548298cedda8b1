"""Token issuance configuration model and builder.

:class:`TokenIssuanceConfig` holds everything needed to issue SAML2 assertions
for a single service provider. Instances are immutable and are checked against
their cross-field invariants when constructed; an inconsistent instance is never
observable. :class:`TokenIssuanceConfigBuilder` accumulates field values through
fluent setters and defers all checking to :meth:`TokenIssuanceConfigBuilder.build`.

The custom provider and mapper class names are opaque identifiers resolved by
the token issuer. When both a custom attribute mapper and a custom attribute
statements provider are set, which one takes effect is decided there.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from idp_config_util.token_config.constants import (
    DEFAULT_NAME_ID_FORMAT,
    DEFAULT_TOKEN_LIFETIME_SECONDS,
    TRIPLEDES_CBC,
)
from idp_config_util.utils.exceptions import ConfigurationInvariantError

# Shown instead of password contents in repr()
MASKED_VALUE = "xxx"


def _present(value: Any) -> bool:
    """None and empty strings or byte sequences count as unset."""
    return value is not None and value != "" and value != b""


class TokenIssuanceConfig(BaseModel):
    """Immutable SAML2 token issuance configuration.

    Attributes:
        identity_provider_id: Issuer of the assertions (IdP entity id)
        sp_entity_id: Entity id of the service provider consuming the assertions
        sp_acs_url: Assertion consumer service URL of the service provider
        name_id_format: NameID format URI
        attribute_map: Local attribute name to federated claim name
        token_lifetime_seconds: Assertion validity period
        custom_*_class_name: Opaque identifiers of custom providers and mappers
        sign_assertion: Whether the assertion is signed
        encrypt_name_id: Whether the NameID is encrypted
        encrypt_attributes: Whether the attributes are encrypted
        encrypt_assertion: Whether the whole assertion is encrypted
        encryption_algorithm: XML Encryption algorithm URI
        encryption_algorithm_strength: Key strength in bits
        keystore_file_name: Keystore holding signing and encryption keys
        keystore_password: Keystore password
        signature_key_alias: Alias of the IdP signing key
        signature_key_password: Password of the IdP signing key
        encryption_key_alias: Alias of the SP certificate used for encryption

    Example:
        >>> config = (
        ...     TokenIssuanceConfig.builder()
        ...     .identity_provider_id("https://idp.example.com")
        ...     .sp_entity_id("https://sp.example.com")
        ...     .build()
        ... )
        >>> config.token_lifetime_seconds
        600
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    identity_provider_id: Optional[str] = None
    sp_entity_id: Optional[str] = None
    sp_acs_url: Optional[str] = None
    name_id_format: str = DEFAULT_NAME_ID_FORMAT
    attribute_map: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    token_lifetime_seconds: int = DEFAULT_TOKEN_LIFETIME_SECONDS
    custom_conditions_provider_class_name: Optional[str] = None
    custom_subject_provider_class_name: Optional[str] = None
    custom_authentication_statements_provider_class_name: Optional[str] = None
    custom_attribute_statements_provider_class_name: Optional[str] = None
    custom_authz_decision_statements_provider_class_name: Optional[str] = None
    custom_attribute_mapper_class_name: Optional[str] = None
    custom_authn_context_mapper_class_name: Optional[str] = None
    sign_assertion: bool = False
    encrypt_name_id: bool = False
    encrypt_attributes: bool = False
    encrypt_assertion: bool = False
    encryption_algorithm: Optional[str] = None
    encryption_algorithm_strength: int = 0
    keystore_file_name: Optional[str] = None
    keystore_password: Optional[bytes] = None
    signature_key_alias: Optional[str] = None
    signature_key_password: Optional[bytes] = None
    encryption_key_alias: Optional[str] = None

    @field_validator("attribute_map", mode="after")
    @classmethod
    def freeze_attribute_map(cls, v: Mapping[str, str]) -> Mapping[str, str]:
        """Copy the attribute map into a read-only mapping.

        Args:
            v: Validated attribute map

        Returns:
            Read-only copy, detached from the caller's mapping
        """
        return MappingProxyType(dict(v))

    @model_validator(mode="after")
    def check_invariants(self) -> "TokenIssuanceConfig":
        """Enforce cross-field invariants, first violation wins.

        Returns:
            Validated TokenIssuanceConfig instance

        Raises:
            ConfigurationInvariantError: If any invariant is violated
        """
        if not _present(self.sp_entity_id):
            raise ConfigurationInvariantError(
                "The entity id of the consumer (SP) for issued assertions must be specified."
            )
        if not _present(self.identity_provider_id):
            raise ConfigurationInvariantError("The Identity Provider id must be set.")

        encrypts = self.encrypt_assertion or self.encrypt_name_id or self.encrypt_attributes
        if encrypts:
            if not _present(self.encryption_algorithm):
                raise ConfigurationInvariantError(
                    "If elements of the assertion are to be encrypted, an encryption "
                    "algorithm must be specified."
                )
            if (
                self.encryption_algorithm_strength == 0
                and self.encryption_algorithm != TRIPLEDES_CBC
            ):
                raise ConfigurationInvariantError(
                    "If elements of the assertion are to be encrypted, an encryption "
                    "algorithm strength must be specified."
                )
            if not _present(self.encryption_key_alias):
                raise ConfigurationInvariantError(
                    "If elements of the assertion are to be encrypted, an encryption "
                    "key alias must be specified."
                )

        if encrypts or self.sign_assertion:
            if not (_present(self.keystore_file_name) and _present(self.keystore_password)):
                raise ConfigurationInvariantError(
                    "If the assertions are to be signed or encrypted, then the keystore "
                    "file and password must be specified."
                )

        if self.sign_assertion:
            if not (
                _present(self.signature_key_alias) and _present(self.signature_key_password)
            ):
                raise ConfigurationInvariantError(
                    "If the assertion is to be signed, then the signature key alias and "
                    "signature key password must be specified."
                )

        if self.encrypt_assertion and (self.encrypt_name_id or self.encrypt_attributes):
            raise ConfigurationInvariantError(
                "Either the entire assertion can be encrypted, or the Attributes and/or NameID."
            )

        return self

    @classmethod
    def builder(cls) -> "TokenIssuanceConfigBuilder":
        """Create a new builder with the documented defaults."""
        return TokenIssuanceConfigBuilder()

    def to_builder(self) -> "TokenIssuanceConfigBuilder":
        """Create a builder pre-populated with this configuration's values.

        Returns:
            Builder whose build() yields an equal configuration until modified
        """
        builder = TokenIssuanceConfigBuilder()
        for name in type(self).model_fields:
            builder._set(name, getattr(self, name))
        return builder

    def _field_values(self) -> tuple[Any, ...]:
        return tuple(
            dict(value) if name == "attribute_map" else value
            for name, value in ((n, getattr(self, n)) for n in type(self).model_fields)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenIssuanceConfig):
            return NotImplemented
        return self._field_values() == other._field_values()

    def __hash__(self) -> int:
        return hash(
            (
                self.name_id_format,
                frozenset(self.attribute_map.items()),
                self.sp_entity_id,
                self.token_lifetime_seconds,
            )
        )

    def __repr_args__(self) -> Iterable[tuple[Optional[str], Any]]:
        for name, value in super().__repr_args__():
            if name in ("keystore_password", "signature_key_password") and value is not None:
                yield name, MASKED_VALUE
            elif name == "attribute_map":
                yield name, dict(value)
            else:
                yield name, value


class TokenIssuanceConfigBuilder:
    """Mutable accumulator for :class:`TokenIssuanceConfig` values.

    Setters return the builder for chaining and do not validate anything.
    Passing None to ``name_id_format`` or ``token_lifetime_seconds`` restores
    the default value.
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> "TokenIssuanceConfigBuilder":
        self._values[name] = value
        return self

    def identity_provider_id(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("identity_provider_id", value)

    def sp_entity_id(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("sp_entity_id", value)

    def sp_acs_url(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("sp_acs_url", value)

    def name_id_format(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        if value is None:
            self._values.pop("name_id_format", None)
            return self
        return self._set("name_id_format", value)

    def attribute_map(
        self, value: Optional[Mapping[str, str]]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("attribute_map", value if value is not None else {})

    def token_lifetime_seconds(self, value: Optional[int]) -> "TokenIssuanceConfigBuilder":
        if value is None:
            self._values.pop("token_lifetime_seconds", None)
            return self
        return self._set("token_lifetime_seconds", value)

    def custom_conditions_provider_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_conditions_provider_class_name", value)

    def custom_subject_provider_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_subject_provider_class_name", value)

    def custom_authentication_statements_provider_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_authentication_statements_provider_class_name", value)

    def custom_attribute_statements_provider_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_attribute_statements_provider_class_name", value)

    def custom_authz_decision_statements_provider_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_authz_decision_statements_provider_class_name", value)

    def custom_attribute_mapper_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_attribute_mapper_class_name", value)

    def custom_authn_context_mapper_class_name(
        self, value: Optional[str]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("custom_authn_context_mapper_class_name", value)

    def sign_assertion(self, value: bool) -> "TokenIssuanceConfigBuilder":
        return self._set("sign_assertion", value)

    def encrypt_name_id(self, value: bool) -> "TokenIssuanceConfigBuilder":
        return self._set("encrypt_name_id", value)

    def encrypt_attributes(self, value: bool) -> "TokenIssuanceConfigBuilder":
        return self._set("encrypt_attributes", value)

    def encrypt_assertion(self, value: bool) -> "TokenIssuanceConfigBuilder":
        return self._set("encrypt_assertion", value)

    def encryption_algorithm(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("encryption_algorithm", value)

    def encryption_algorithm_strength(self, value: int) -> "TokenIssuanceConfigBuilder":
        return self._set("encryption_algorithm_strength", value)

    def keystore_file_name(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("keystore_file_name", value)

    def keystore_password(self, value: Optional[bytes]) -> "TokenIssuanceConfigBuilder":
        return self._set("keystore_password", value)

    def signature_key_alias(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("signature_key_alias", value)

    def signature_key_password(
        self, value: Optional[bytes]
    ) -> "TokenIssuanceConfigBuilder":
        return self._set("signature_key_password", value)

    def encryption_key_alias(self, value: Optional[str]) -> "TokenIssuanceConfigBuilder":
        return self._set("encryption_key_alias", value)

    def build(self) -> TokenIssuanceConfig:
        """Build an immutable, invariant-checked configuration.

        Byte sequences are copied to ``bytes`` and the attribute map is copied,
        so later changes to caller-held objects don't reach the result.

        Returns:
            TokenIssuanceConfig instance

        Raises:
            ConfigurationInvariantError: If a field has the wrong type or an
                invariant is violated
        """
        values = dict(self._values)
        for name in ("keystore_password", "signature_key_password"):
            if isinstance(values.get(name), (bytearray, memoryview)):
                values[name] = bytes(values[name])

        try:
            return TokenIssuanceConfig(**values)
        except ValidationError as e:
            raise ConfigurationInvariantError(
                f"Invalid token issuance configuration field values:\n{e}"
            ) from e
