"""Token Issuance Configuration Example.

This example demonstrates building a SAML2 token issuance configuration,
storing it in the flat attribute store format, and reading it back.

Key features demonstrated:
- Building a signed and encrypted configuration with the fluent builder
- Invariant checks rejecting inconsistent configurations
- Round trip through the flat attribute store format
- Clearing a stored configuration with the empty record
"""

import sys
from pathlib import Path

# Add src to path for running as standalone script
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from idp_config_util.token_config import (
    TokenIssuanceConfig,
    default_strength_for,
    empty_flat_record,
    from_flat_attribute_map,
    to_flat_attribute_map,
)
from idp_config_util.token_config.constants import AES_256_CBC
from idp_config_util.utils.exceptions import ConfigurationInvariantError


def example_build_config():
    """Example 1: Build a signed configuration with encrypted attributes."""
    print("\n" + "=" * 70)
    print("Example 1: Building a Token Issuance Configuration")
    print("=" * 70)

    config = (
        TokenIssuanceConfig.builder()
        .identity_provider_id("https://idp.example.com")
        .sp_entity_id("https://sp.example.com")
        .sp_acs_url("https://sp.example.com/saml/acs")
        .attribute_map({"mail": "email", "uid": "username"})
        .sign_assertion(True)
        .encrypt_attributes(True)
        .encryption_algorithm(AES_256_CBC)
        .encryption_algorithm_strength(default_strength_for(AES_256_CBC))
        .encryption_key_alias("sp-encryption-cert")
        .keystore_file_name("/opt/idp/keystore.jks")
        .keystore_password(b"changeit")
        .signature_key_alias("idp-signing-key")
        .signature_key_password(b"changeit")
        .build()
    )

    print(f"\n✓ Configuration built:")
    print(f"  • IdP id: {config.identity_provider_id}")
    print(f"  • SP entity id: {config.sp_entity_id}")
    print(f"  • Token lifetime: {config.token_lifetime_seconds}s")
    print(f"  • Attribute map: {dict(config.attribute_map)}")

    return config


def example_invariant_violation():
    """Example 2: Whole-assertion and element encryption are exclusive."""
    print("\n" + "=" * 70)
    print("Example 2: Invariant Violation")
    print("=" * 70)

    try:
        (
            TokenIssuanceConfig.builder()
            .identity_provider_id("https://idp.example.com")
            .sp_entity_id("https://sp.example.com")
            .encrypt_assertion(True)
            .encrypt_name_id(True)
            .encryption_algorithm(AES_256_CBC)
            .encryption_algorithm_strength(256)
            .encryption_key_alias("sp-encryption-cert")
            .keystore_file_name("/opt/idp/keystore.jks")
            .keystore_password(b"changeit")
            .build()
        )
    except ConfigurationInvariantError as e:
        print(f"\n✗ Rejected: {e}")


def example_flat_round_trip(config):
    """Example 3: Store and reload through the flat attribute store format."""
    print("\n" + "=" * 70)
    print("Example 3: Flat Attribute Store Round Trip")
    print("=" * 70)

    flat = to_flat_attribute_map(config)
    print(f"\n✓ Flat record with {len(flat)} fields")
    print(f"  • saml2-attribute-map: {sorted(flat['saml2-attribute-map'])}")

    restored = from_flat_attribute_map(flat)
    print(f"\n✓ Restored configuration equals original: {restored == config}")

    cleared = from_flat_attribute_map(empty_flat_record())
    print(f"✓ Empty record restores to: {cleared}")


if __name__ == "__main__":
    built = example_build_config()
    example_invariant_violation()
    example_flat_round_trip(built)
