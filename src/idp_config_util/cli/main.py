"""Main CLI entry point for IdP Config Utility.

This module provides the main Click command group for the idp-config-util CLI.
"""

from pathlib import Path
from typing import Optional

import click

from idp_config_util import __version__
from idp_config_util.cli.attribute_commands import attributes_group
from idp_config_util.cli.token_commands import token_group
from idp_config_util.config import load_config
from idp_config_util.logging_audit import configure_logging
from idp_config_util.utils.exceptions import ConfigurationError


@click.group()
@click.version_option(version=__version__, prog_name="idp-config-util")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/config.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (DEBUG level)")
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Path to log file (overrides config file)",
)
@click.option(
    "--redact-secrets",
    is_flag=True,
    help="Mask keystore and signing key passwords in logs",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: bool,
    log_file: Optional[Path],
    redact_secrets: bool,
) -> None:
    """IdP Config Utility - Token issuance config and attribute policy checks.

    Validates SAML2 token issuance configuration, converts it to and from the
    flat attribute store format, and checks identity attribute change-sets
    against the configured attribute policy.

    Common usage:

        # Validate a token configuration document
        idp-config-util token validate saml2-config.json

        # Convert a stored flat record back to a document
        idp-config-util token from-flat record.json

        # Check a new user's attributes against the password/username policy
        idp-config-util attributes check new-user.json
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["config"] = config_obj

    # Precedence: CLI flags > config file > defaults
    log_level = "DEBUG" if verbose else config_obj.logging.level
    log_file_path = log_file if log_file else config_obj.logging.log_file
    redact = redact_secrets or config_obj.logging.redact_secrets

    configure_logging(level=log_level, log_file=log_file_path, redact_secrets=redact)


cli.add_command(token_group)
cli.add_command(attributes_group)


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command()
@click.argument("config_file", type=click.Path(exists=True, path_type=Path))
def validate(config_file: Path) -> None:
    """Validate a configuration file.

    Example:
        idp-config-util config validate config/config.json
    """
    try:
        config_obj = load_config(config_file)
    except ConfigurationError as e:
        click.echo(click.style("✗", fg="red", bold=True) + " Configuration validation failed")
        click.echo(f"\n{e}", err=True)
        raise click.exceptions.Exit(1)

    policy = config_obj.attribute_validation
    click.echo(click.style("✓", fg="green", bold=True) + " Configuration is valid")
    click.echo(f"\nConfiguration file: {config_file}")
    click.echo("\nAttribute policy:")
    click.echo(f"  Min password length:    {policy.minimum_password_length or 'Disabled'}")
    click.echo(
        f"  Username invalid chars: "
        f"{' '.join(policy.username_invalid_chars) or 'Disabled'}"
    )
    click.echo("\nLogging:")
    click.echo(f"  Level:          {config_obj.logging.level}")
    click.echo(f"  Log file:       {config_obj.logging.log_file}")
    click.echo(f"  Redact secrets: {config_obj.logging.redact_secrets}")


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"idp-config-util version {__version__}")


if __name__ == "__main__":
    cli()
