"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import logging
from pathlib import Path
from typing import Generator

import pytest

from idp_config_util.logging_audit import logger as logger_module
from idp_config_util.token_config import TokenIssuanceConfig, TokenIssuanceConfigBuilder
from idp_config_util.token_config.constants import AES_128_CBC

IDP_ID = "https://idp.example.com"
SP_ENTITY_ID = "https://sp.example.com"


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def examples_dir(project_root: Path) -> Path:
    """
    Return the examples directory path.

    Args:
        project_root: Project root directory fixture.

    Returns:
        Path: Absolute path to the examples directory.
    """
    return project_root / "examples"


@pytest.fixture
def minimal_builder() -> TokenIssuanceConfigBuilder:
    """
    Return a builder holding only the two required identifiers.

    Returns:
        TokenIssuanceConfigBuilder: Builder that builds successfully as-is.
    """
    return TokenIssuanceConfig.builder().identity_provider_id(IDP_ID).sp_entity_id(
        SP_ENTITY_ID
    )


@pytest.fixture
def minimal_config(minimal_builder: TokenIssuanceConfigBuilder) -> TokenIssuanceConfig:
    """
    Return a configuration that neither signs nor encrypts.

    Args:
        minimal_builder: Builder fixture with the required identifiers.

    Returns:
        TokenIssuanceConfig: Valid configuration with defaults elsewhere.
    """
    return minimal_builder.build()


@pytest.fixture
def signing_builder(minimal_builder: TokenIssuanceConfigBuilder) -> TokenIssuanceConfigBuilder:
    """
    Return a builder configured to sign assertions.

    Args:
        minimal_builder: Builder fixture with the required identifiers.

    Returns:
        TokenIssuanceConfigBuilder: Builder with keystore and signing key set.
    """
    return (
        minimal_builder.sign_assertion(True)
        .keystore_file_name("/etc/idp/keystore.jks")
        .keystore_password(b"storepass")
        .signature_key_alias("idp-signing")
        .signature_key_password(b"keypass")
    )


@pytest.fixture
def full_config(signing_builder: TokenIssuanceConfigBuilder) -> TokenIssuanceConfig:
    """
    Return a configuration that signs and encrypts NameID and attributes.

    Every optional field is populated so round-trip tests cover all of them.

    Args:
        signing_builder: Builder fixture configured for signing.

    Returns:
        TokenIssuanceConfig: Fully populated valid configuration.
    """
    return (
        signing_builder.sp_acs_url("https://sp.example.com/acs")
        .name_id_format("urn:oasis:names:tc:SAML:2.0:nameid-format:persistent")
        .attribute_map({"mail": "email", "cn": "fullName"})
        .token_lifetime_seconds(300)
        .custom_conditions_provider_class_name("com.example.Conditions")
        .custom_subject_provider_class_name("com.example.Subject")
        .custom_authentication_statements_provider_class_name("com.example.AuthnStatements")
        .custom_attribute_statements_provider_class_name("com.example.AttrStatements")
        .custom_authz_decision_statements_provider_class_name("com.example.AuthzStatements")
        .custom_attribute_mapper_class_name("com.example.AttrMapper")
        .custom_authn_context_mapper_class_name("com.example.AuthnContextMapper")
        .encrypt_name_id(True)
        .encrypt_attributes(True)
        .encryption_algorithm(AES_128_CBC)
        .encryption_algorithm_strength(128)
        .encryption_key_alias("sp-encryption")
        .build()
    )


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """
    Remove handlers installed by configure_logging after each test.

    Yields:
        None
    """
    yield
    root_logger = logging.getLogger()
    while logger_module._installed_handlers:
        handler = logger_module._installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
