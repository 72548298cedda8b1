"""Token issuance configuration module.

This module provides the immutable SAML2 token issuance configuration, its
builder, and conversion to and from the persisted representations.
"""

from idp_config_util.token_config.config import (
    TokenIssuanceConfig,
    TokenIssuanceConfigBuilder,
)
from idp_config_util.token_config.constants import (
    DEFAULT_NAME_ID_FORMAT,
    DEFAULT_TOKEN_LIFETIME_SECONDS,
    TRIPLEDES_CBC,
    WELL_KNOWN_FIELDS,
    default_strength_for,
)
from idp_config_util.token_config.marshaller import (
    empty_flat_record,
    from_document,
    from_flat_attribute_map,
    from_json,
    to_document,
    to_flat_attribute_map,
    to_json,
)

__all__ = [
    # Configuration model
    "TokenIssuanceConfig",
    "TokenIssuanceConfigBuilder",
    # Marshalling
    "to_document",
    "from_document",
    "to_flat_attribute_map",
    "from_flat_attribute_map",
    "empty_flat_record",
    "to_json",
    "from_json",
    # Constants
    "DEFAULT_NAME_ID_FORMAT",
    "DEFAULT_TOKEN_LIFETIME_SECONDS",
    "TRIPLEDES_CBC",
    "WELL_KNOWN_FIELDS",
    "default_strength_for",
]
