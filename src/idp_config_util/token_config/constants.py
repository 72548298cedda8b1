"""Constants for token issuance configuration.

Field names match the attribute schema of the persistence store, so they must
stay stable across versions. ``issuer-name`` predates the token-specific
prefix and is kept as-is to avoid a schema migration.
"""

from typing import Optional

# Persisted field names
ISSUER_NAME = "issuer-name"
NAME_ID_FORMAT = "saml2-name-id-format"
TOKEN_LIFETIME = "saml2-token-lifetime-seconds"
CUSTOM_CONDITIONS_PROVIDER_CLASS = "saml2-custom-conditions-provider-class-name"
CUSTOM_SUBJECT_PROVIDER_CLASS = "saml2-custom-subject-provider-class-name"
CUSTOM_AUTHENTICATION_STATEMENTS_PROVIDER_CLASS = (
    "saml2-custom-authentication-statements-provider-class-name"
)
CUSTOM_ATTRIBUTE_STATEMENTS_PROVIDER_CLASS = (
    "saml2-custom-attribute-statements-provider-class-name"
)
CUSTOM_AUTHZ_DECISION_STATEMENTS_PROVIDER_CLASS = (
    "saml2-custom-authz-decision-statements-provider-class-name"
)
CUSTOM_ATTRIBUTE_MAPPER_CLASS = "saml2-custom-attribute-mapper-class-name"
CUSTOM_AUTHN_CONTEXT_MAPPER_CLASS = "saml2-custom-authn-context-mapper-class-name"
SIGN_ASSERTION = "saml2-sign-assertion"
ENCRYPT_ASSERTION = "saml2-encrypt-assertion"
ENCRYPT_ATTRIBUTES = "saml2-encrypt-attributes"
ENCRYPT_NAME_ID = "saml2-encrypt-nameid"
ENCRYPTION_ALGORITHM = "saml2-encryption-algorithm"
ENCRYPTION_ALGORITHM_STRENGTH = "saml2-encryption-algorithm-strength"
ATTRIBUTE_MAP = "saml2-attribute-map"
KEYSTORE_FILE_NAME = "saml2-keystore-filename"
KEYSTORE_PASSWORD = "saml2-keystore-password"
SP_ENTITY_ID = "saml2-sp-entity-id"
SP_ACS_URL = "saml2-sp-acs-url"
SIGNATURE_KEY_ALIAS = "saml2-signature-key-alias"
SIGNATURE_KEY_PASSWORD = "saml2-signature-key-password"
ENCRYPTION_KEY_ALIAS = "saml2-encryption-key-alias"

WELL_KNOWN_FIELDS: tuple[str, ...] = (
    ISSUER_NAME,
    NAME_ID_FORMAT,
    TOKEN_LIFETIME,
    CUSTOM_CONDITIONS_PROVIDER_CLASS,
    CUSTOM_SUBJECT_PROVIDER_CLASS,
    CUSTOM_AUTHENTICATION_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_ATTRIBUTE_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_AUTHZ_DECISION_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_ATTRIBUTE_MAPPER_CLASS,
    CUSTOM_AUTHN_CONTEXT_MAPPER_CLASS,
    SIGN_ASSERTION,
    ENCRYPT_ASSERTION,
    ENCRYPT_ATTRIBUTES,
    ENCRYPT_NAME_ID,
    ENCRYPTION_ALGORITHM,
    ENCRYPTION_ALGORITHM_STRENGTH,
    ATTRIBUTE_MAP,
    KEYSTORE_FILE_NAME,
    KEYSTORE_PASSWORD,
    SP_ENTITY_ID,
    SP_ACS_URL,
    SIGNATURE_KEY_ALIAS,
    SIGNATURE_KEY_PASSWORD,
    ENCRYPTION_KEY_ALIAS,
)

# Separator between local and federated names in persisted attribute map entries
ATTRIBUTE_MAP_SEPARATOR = "="

DEFAULT_NAME_ID_FORMAT = "urn:oasis:names:tc:SAML:1.1:nameid-format:unspecified"
DEFAULT_TOKEN_LIFETIME_SECONDS = 60 * 10

# XML Encryption block cipher URIs
AES_128_CBC = "http://www.w3.org/2001/04/xmlenc#aes128-cbc"
AES_192_CBC = "http://www.w3.org/2001/04/xmlenc#aes192-cbc"
AES_256_CBC = "http://www.w3.org/2001/04/xmlenc#aes256-cbc"
TRIPLEDES_CBC = "http://www.w3.org/2001/04/xmlenc#tripledes-cbc"

# Triple-DES has no configurable strength, so 0 is allowed for it
ENCRYPTION_ALGORITHM_STRENGTHS: dict[str, int] = {
    AES_128_CBC: 128,
    AES_192_CBC: 192,
    AES_256_CBC: 256,
    TRIPLEDES_CBC: 0,
}


def default_strength_for(algorithm: str) -> Optional[int]:
    """Return the key strength conventionally paired with an algorithm URI.

    Args:
        algorithm: XML Encryption algorithm URI

    Returns:
        Strength in bits, 0 for triple-DES, or None for unknown algorithms
        (a custom encryption provider may support others)

    Example:
        >>> default_strength_for(AES_256_CBC)
        256
    """
    return ENCRYPTION_ALGORITHM_STRENGTHS.get(algorithm)
