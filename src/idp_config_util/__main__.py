"""Entry point for running idp_config_util as a module.

This allows the package to be executed as:
    python -m idp_config_util
"""

from idp_config_util.cli.main import cli

if __name__ == "__main__":
    cli()
