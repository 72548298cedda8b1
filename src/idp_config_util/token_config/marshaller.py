"""Conversion between TokenIssuanceConfig and its persisted representations.

Two representations are supported:

- The *document* form: a dict keyed by the well-known field names, where every
  scalar is a string (or None when unset) and the attribute map is a nested dict.
- The *flat* form required by the attribute store: every field maps to a set of
  strings. Scalars become one-element sets, unset fields become empty sets and
  the attribute map becomes a set of ``local=federated`` entries.

For every valid configuration ``c``,
``from_flat_attribute_map(to_flat_attribute_map(c)) == c``.
"""

import json
import re
from collections.abc import Collection, Mapping
from typing import Any, Optional

from idp_config_util.logging_audit import get_logger
from idp_config_util.token_config.config import TokenIssuanceConfig
from idp_config_util.token_config.constants import (
    ATTRIBUTE_MAP,
    ATTRIBUTE_MAP_SEPARATOR,
    CUSTOM_ATTRIBUTE_MAPPER_CLASS,
    CUSTOM_ATTRIBUTE_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_AUTHENTICATION_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_AUTHN_CONTEXT_MAPPER_CLASS,
    CUSTOM_AUTHZ_DECISION_STATEMENTS_PROVIDER_CLASS,
    CUSTOM_CONDITIONS_PROVIDER_CLASS,
    CUSTOM_SUBJECT_PROVIDER_CLASS,
    ENCRYPT_ASSERTION,
    ENCRYPT_ATTRIBUTES,
    ENCRYPT_NAME_ID,
    ENCRYPTION_ALGORITHM,
    ENCRYPTION_ALGORITHM_STRENGTH,
    ENCRYPTION_KEY_ALIAS,
    ISSUER_NAME,
    KEYSTORE_FILE_NAME,
    KEYSTORE_PASSWORD,
    NAME_ID_FORMAT,
    SIGN_ASSERTION,
    SIGNATURE_KEY_ALIAS,
    SIGNATURE_KEY_PASSWORD,
    SP_ACS_URL,
    SP_ENTITY_ID,
    TOKEN_LIFETIME,
    WELL_KNOWN_FIELDS,
)
from idp_config_util.utils.exceptions import MarshallingError

logger = get_logger(__name__)

# Persisted text encoding of password fields
PASSWORD_ENCODING = "utf-8"

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# Document field name -> TokenIssuanceConfig attribute, for plain string fields
_STRING_FIELDS: dict[str, str] = {
    ISSUER_NAME: "identity_provider_id",
    NAME_ID_FORMAT: "name_id_format",
    CUSTOM_CONDITIONS_PROVIDER_CLASS: "custom_conditions_provider_class_name",
    CUSTOM_SUBJECT_PROVIDER_CLASS: "custom_subject_provider_class_name",
    CUSTOM_AUTHENTICATION_STATEMENTS_PROVIDER_CLASS: (
        "custom_authentication_statements_provider_class_name"
    ),
    CUSTOM_ATTRIBUTE_STATEMENTS_PROVIDER_CLASS: (
        "custom_attribute_statements_provider_class_name"
    ),
    CUSTOM_AUTHZ_DECISION_STATEMENTS_PROVIDER_CLASS: (
        "custom_authz_decision_statements_provider_class_name"
    ),
    CUSTOM_ATTRIBUTE_MAPPER_CLASS: "custom_attribute_mapper_class_name",
    CUSTOM_AUTHN_CONTEXT_MAPPER_CLASS: "custom_authn_context_mapper_class_name",
    ENCRYPTION_ALGORITHM: "encryption_algorithm",
    KEYSTORE_FILE_NAME: "keystore_file_name",
    SP_ENTITY_ID: "sp_entity_id",
    SP_ACS_URL: "sp_acs_url",
    SIGNATURE_KEY_ALIAS: "signature_key_alias",
    ENCRYPTION_KEY_ALIAS: "encryption_key_alias",
}

_BOOLEAN_FIELDS: dict[str, str] = {
    SIGN_ASSERTION: "sign_assertion",
    ENCRYPT_ASSERTION: "encrypt_assertion",
    ENCRYPT_ATTRIBUTES: "encrypt_attributes",
    ENCRYPT_NAME_ID: "encrypt_name_id",
}

_INTEGER_FIELDS: dict[str, str] = {
    TOKEN_LIFETIME: "token_lifetime_seconds",
    ENCRYPTION_ALGORITHM_STRENGTH: "encryption_algorithm_strength",
}

_PASSWORD_FIELDS: dict[str, str] = {
    KEYSTORE_PASSWORD: "keystore_password",
    SIGNATURE_KEY_PASSWORD: "signature_key_password",
}


def to_document(config: TokenIssuanceConfig) -> dict[str, Any]:
    """Render a configuration as a document of string-valued fields.

    Args:
        config: Configuration to render

    Returns:
        Dict with one entry per well-known field. Scalars are strings or None,
        the attribute map is a nested dict.

    Raises:
        MarshallingError: If a password is not valid UTF-8
    """
    document: dict[str, Any] = {}
    for name in WELL_KNOWN_FIELDS:
        if name in _STRING_FIELDS:
            document[name] = getattr(config, _STRING_FIELDS[name])
        elif name in _BOOLEAN_FIELDS:
            document[name] = _format_bool(getattr(config, _BOOLEAN_FIELDS[name]))
        elif name in _INTEGER_FIELDS:
            document[name] = str(getattr(config, _INTEGER_FIELDS[name]))
        elif name in _PASSWORD_FIELDS:
            document[name] = _decode_password(name, getattr(config, _PASSWORD_FIELDS[name]))
        elif name == ATTRIBUTE_MAP:
            document[name] = dict(config.attribute_map)
    return document


def from_document(document: Mapping[str, Any]) -> TokenIssuanceConfig:
    """Rebuild a configuration from its document form.

    Missing optional fields take the builder defaults. Numeric and boolean
    text is parsed strictly.

    Args:
        document: Mapping of well-known field names to values

    Returns:
        Validated TokenIssuanceConfig

    Raises:
        MarshallingError: If a field holds malformed text or an unexpected type
        ConfigurationInvariantError: If the rebuilt configuration is inconsistent
    """
    builder = TokenIssuanceConfig.builder()

    for name, attribute in _STRING_FIELDS.items():
        getattr(builder, attribute)(_get_text(document, name))

    for name, attribute in _BOOLEAN_FIELDS.items():
        text = _get_text(document, name)
        if text is not None:
            getattr(builder, attribute)(_parse_bool(name, text))

    for name, attribute in _INTEGER_FIELDS.items():
        text = _get_text(document, name)
        if text is not None:
            getattr(builder, attribute)(_parse_int(name, text))

    for name, attribute in _PASSWORD_FIELDS.items():
        getattr(builder, attribute)(_encode_password(name, _get_text(document, name)))

    attribute_map = document.get(ATTRIBUTE_MAP)
    if attribute_map is not None:
        builder.attribute_map(_check_attribute_map(attribute_map))

    return builder.build()


def to_flat_attribute_map(config: TokenIssuanceConfig) -> dict[str, set[str]]:
    """Render a configuration in the attribute store's flat format.

    Args:
        config: Configuration to render

    Returns:
        Dict mapping every well-known field name to a set of strings

    Raises:
        MarshallingError: If an attribute map key contains the '=' separator
            or a password is not valid UTF-8
    """
    document = to_document(config)
    attribute_map = document.pop(ATTRIBUTE_MAP)
    if not isinstance(attribute_map, Mapping):
        raise MarshallingError(
            f"Type corresponding to {ATTRIBUTE_MAP} key unexpected. "
            f"Type: {type(attribute_map).__name__}"
        )

    flat: dict[str, set[str]] = {
        name: {value} if value is not None else set()
        for name, value in document.items()
    }

    entries: set[str] = set()
    for local_name, federated_name in attribute_map.items():
        if ATTRIBUTE_MAP_SEPARATOR in local_name:
            raise MarshallingError(
                f"Attribute map key {local_name!r} contains "
                f"'{ATTRIBUTE_MAP_SEPARATOR}' and cannot be persisted"
            )
        entries.add(f"{local_name}{ATTRIBUTE_MAP_SEPARATOR}{federated_name}")
    flat[ATTRIBUTE_MAP] = entries

    logger.debug(
        "Marshalled token issuance config for SP %s to %d flat fields",
        config.sp_entity_id,
        len(flat),
    )
    return flat


def from_flat_attribute_map(
    flat: Mapping[str, Collection[str]],
) -> Optional[TokenIssuanceConfig]:
    """Rebuild a configuration from the attribute store's flat format.

    Args:
        flat: Mapping of field names to collections of strings

    Returns:
        TokenIssuanceConfig, or None if the record has no issuer name, which
        means the token configuration was never populated

    Raises:
        MarshallingError: If the record is malformed
        ConfigurationInvariantError: If the rebuilt configuration is inconsistent
    """
    if not flat.get(ISSUER_NAME):
        logger.debug("Flat record has no %s value; no token configuration", ISSUER_NAME)
        return None

    document: dict[str, Any] = {
        name: _unwrap(name, values)
        for name, values in flat.items()
        if name != ATTRIBUTE_MAP
    }

    attribute_map: dict[str, str] = {}
    entries = flat.get(ATTRIBUTE_MAP) or ()
    if isinstance(entries, str):
        raise MarshallingError(
            f"Field {ATTRIBUTE_MAP} must hold a collection of strings, not a string"
        )
    for entry in entries:
        if not isinstance(entry, str):
            raise MarshallingError(
                f"Field {ATTRIBUTE_MAP} must hold strings, got {type(entry).__name__}"
            )
        local_name, separator, federated_name = entry.partition(ATTRIBUTE_MAP_SEPARATOR)
        if not separator:
            raise MarshallingError(
                f"Malformed {ATTRIBUTE_MAP} entry {entry!r}: "
                f"expected 'local{ATTRIBUTE_MAP_SEPARATOR}federated'"
            )
        attribute_map[local_name] = federated_name
    document[ATTRIBUTE_MAP] = attribute_map

    return from_document(document)


def empty_flat_record() -> dict[str, set[str]]:
    """Return a flat record that clears every token configuration field.

    Writing this record makes the store overwrite previously persisted
    values, for example when an instance stops issuing SAML2 tokens.

    Returns:
        Dict mapping every well-known field name to an empty set
    """
    return {name: set() for name in WELL_KNOWN_FIELDS}


def to_json(config: TokenIssuanceConfig) -> str:
    """Serialize the document form of a configuration to JSON text.

    Args:
        config: Configuration to serialize

    Returns:
        Indented JSON object text
    """
    return json.dumps(to_document(config), indent=2)


def from_json(text: str) -> TokenIssuanceConfig:
    """Rebuild a configuration from document-form JSON text.

    Args:
        text: JSON object text as produced by to_json

    Returns:
        Validated TokenIssuanceConfig

    Raises:
        MarshallingError: If the text is not a JSON object or holds malformed fields
        ConfigurationInvariantError: If the rebuilt configuration is inconsistent
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise MarshallingError(
            f"Invalid JSON at line {e.lineno}, column {e.colno}: {e.msg}"
        ) from e
    if not isinstance(document, dict):
        raise MarshallingError("Token issuance config JSON must be an object")
    return from_document(document)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


def _parse_bool(name: str, text: str) -> bool:
    normalized = text.strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False
    raise MarshallingError(f"Field {name} holds {text!r}, expected 'true' or 'false'")


def _parse_int(name: str, text: str) -> int:
    if not _INTEGER_PATTERN.fullmatch(text):
        raise MarshallingError(f"Field {name} holds {text!r}, expected an integer")
    return int(text)


def _get_text(document: Mapping[str, Any], name: str) -> Optional[str]:
    value = document.get(name)
    if value is not None and not isinstance(value, str):
        raise MarshallingError(
            f"Field {name} must hold a string, got {type(value).__name__}"
        )
    return value


def _decode_password(name: str, value: Optional[bytes]) -> Optional[str]:
    if value is None:
        return None
    try:
        return value.decode(PASSWORD_ENCODING)
    except UnicodeDecodeError as e:
        raise MarshallingError(
            f"Field {name} is not valid {PASSWORD_ENCODING} text"
        ) from e


def _encode_password(name: str, text: Optional[str]) -> Optional[bytes]:
    if text is None:
        return None
    try:
        return text.encode(PASSWORD_ENCODING)
    except UnicodeEncodeError as e:
        raise MarshallingError(
            f"Field {name} cannot be encoded as {PASSWORD_ENCODING}"
        ) from e


def _check_attribute_map(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        raise MarshallingError(
            f"Type corresponding to {ATTRIBUTE_MAP} key unexpected. "
            f"Type: {type(value).__name__}"
        )
    for local_name, federated_name in value.items():
        if not isinstance(local_name, str) or not isinstance(federated_name, str):
            raise MarshallingError(
                f"Field {ATTRIBUTE_MAP} must map strings to strings, "
                f"got {local_name!r}: {federated_name!r}"
            )
    return dict(value)


def _unwrap(name: str, values: Optional[Collection[str]]) -> Optional[str]:
    """Turn a flat value set back into a scalar, empty meaning unset."""
    if values is None:
        return None
    if isinstance(values, str):
        raise MarshallingError(
            f"Field {name} must hold a collection of strings, not a string"
        )
    if len(values) > 1:
        raise MarshallingError(
            f"Field {name} holds {len(values)} values, expected at most one"
        )
    return next(iter(values), None)
