"""Subcommand modules for cmsctl.

Provides register_commands() which uses deferred imports to keep
``cmsctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the schema group and the standalone commands on the root group."""
    # --- Groups ---
    from cmsctl.commands.schema import schema

    cli.add_command(schema)

    # --- Standalone commands ---
    from cmsctl.commands.validate import check_id, validate, validate_bulk

    cli.add_command(validate)
    cli.add_command(validate_bulk)
    cli.add_command(check_id)
