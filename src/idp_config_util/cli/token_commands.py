"""Token configuration CLI commands.

This module provides CLI commands for checking and converting persisted token
issuance configuration records:
- token validate: Build a configuration from a document-form JSON file
- token to-flat: Convert document-form JSON to a flat attribute store record
- token from-flat: Convert a flat attribute store record to document-form JSON
- token empty-record: Print the record that clears a stored configuration
"""

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import click

from idp_config_util.token_config import (
    empty_flat_record,
    from_flat_attribute_map,
    from_json,
    to_flat_attribute_map,
    to_json,
)
from idp_config_util.utils.exceptions import IdpConfigError, create_error_info

logger = logging.getLogger(__name__)


@click.group(name="token")
def token_group() -> None:
    """Token issuance configuration commands."""
    pass


@token_group.command(name="validate")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def validate(file: Path) -> None:
    """Validate a document-form token configuration JSON file.

    Examples:

        idp-config-util token validate saml2-config.json
    """
    try:
        config = from_json(file.read_text(encoding="utf-8"))
    except IdpConfigError as e:
        _fail(e)

    click.echo(click.style("✓", fg="green", bold=True) + " Token configuration is valid")
    click.echo(f"\n  IdP id:         {config.identity_provider_id}")
    click.echo(f"  SP entity id:   {config.sp_entity_id}")
    click.echo(f"  Token lifetime: {config.token_lifetime_seconds}s")
    click.echo(f"  Sign assertion: {config.sign_assertion}")
    click.echo(
        f"  Encryption:     assertion={config.encrypt_assertion}, "
        f"nameid={config.encrypt_name_id}, attributes={config.encrypt_attributes}"
    )


@token_group.command(name="to-flat")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def to_flat(file: Path) -> None:
    """Convert a document-form JSON file to a flat attribute store record.

    The record is printed as a JSON object mapping each field to a sorted list
    of values.

    Examples:

        idp-config-util token to-flat saml2-config.json > record.json
    """
    try:
        config = from_json(file.read_text(encoding="utf-8"))
        flat = to_flat_attribute_map(config)
    except IdpConfigError as e:
        _fail(e)

    click.echo(json.dumps(_flat_to_json(flat), indent=2))


@token_group.command(name="from-flat")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
def from_flat(file: Path) -> None:
    """Convert a flat attribute store record to document-form JSON.

    Exits with code 2 when the record holds no token configuration.

    Examples:

        idp-config-util token from-flat record.json
    """
    try:
        raw = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON in {file}: {e}", err=True)
        raise click.exceptions.Exit(1)

    if not _is_string_lists(raw):
        click.echo(
            f"Invalid record in {file}: expected an object of string lists", err=True
        )
        raise click.exceptions.Exit(1)

    try:
        config = from_flat_attribute_map({name: set(values) for name, values in raw.items()})
    except IdpConfigError as e:
        _fail(e)

    if config is None:
        click.echo("Record holds no token configuration", err=True)
        raise click.exceptions.Exit(2)

    click.echo(to_json(config))


@token_group.command(name="empty-record")
def empty_record() -> None:
    """Print the flat record that clears a stored token configuration."""
    click.echo(json.dumps(_flat_to_json(empty_flat_record()), indent=2))


def _flat_to_json(flat: dict[str, set[str]]) -> dict[str, Any]:
    return {name: sorted(values) for name, values in flat.items()}


def _fail(error: IdpConfigError) -> NoReturn:
    info = create_error_info(error)
    logger.error("%s: %s", info.error_type, info.message)
    click.echo(click.style("✗", fg="red", bold=True) + f" {info.message}", err=True)
    click.echo(f"  → {info.remediation}", err=True)
    raise click.exceptions.Exit(1)


def _is_string_lists(raw: Any) -> bool:
    return isinstance(raw, dict) and all(
        isinstance(values, list) and all(isinstance(v, str) for v in values)
        for values in raw.values()
    )
