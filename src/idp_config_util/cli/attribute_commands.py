"""Attribute policy CLI commands.

This module provides a CLI command for checking a proposed attribute
change-set against the configured attribute policy.
"""

import json
import logging
from pathlib import Path
from typing import Any

import click

from idp_config_util.config import get_attribute_validation_config
from idp_config_util.models import OperationKind
from idp_config_util.utils.exceptions import PolicyViolationError, create_error_info
from idp_config_util.validation import AttributeValidator

logger = logging.getLogger(__name__)


@click.group(name="attributes")
def attributes_group() -> None:
    """Identity repository attribute policy commands."""
    pass


@attributes_group.command(name="check")
@click.argument("file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--operation",
    type=click.Choice([kind.value for kind in OperationKind]),
    default=OperationKind.CREATE.value,
    show_default=True,
    help="Repository operation the change-set belongs to",
)
@click.pass_context
def check(ctx: click.Context, file: Path, operation: str) -> None:
    """Check a JSON change-set against the configured attribute policy.

    The change-set file is a JSON object mapping attribute names to lists of
    values. Exits with code 1 when the change-set violates the policy.

    Examples:

        idp-config-util attributes check new-user.json

        idp-config-util attributes check changes.json --operation edit
    """
    try:
        raw = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON in {file}: {e}", err=True)
        raise click.exceptions.Exit(1)

    if not _is_string_lists(raw):
        click.echo(
            f"Invalid change-set in {file}: expected an object of string lists", err=True
        )
        raise click.exceptions.Exit(1)

    config = ctx.obj["config"]
    validator = AttributeValidator.from_settings(get_attribute_validation_config(config))

    try:
        validator.validate_attributes(raw, OperationKind(operation))
    except PolicyViolationError as e:
        info = create_error_info(e)
        logger.info("Change-set rejected: %s", info.error_code)
        click.echo(
            click.style("✗", fg="red", bold=True) + f" [{info.error_code}] {info.message}",
            err=True,
        )
        click.echo(f"  → {info.remediation}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(click.style("✓", fg="green", bold=True) + " Change-set satisfies attribute policy")


def _is_string_lists(raw: Any) -> bool:
    return isinstance(raw, dict) and all(
        isinstance(values, list) and all(isinstance(v, str) for v in values)
        for values in raw.values()
    )
