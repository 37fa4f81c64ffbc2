"""cmsctl entry point.

The root group only turns global flags into :class:`CmsSettings` and hangs
an :class:`AppContext` on the click context; subcommands live in
:mod:`cmsctl.commands`.
"""

from __future__ import annotations

from pathlib import Path

import click

from cmsctl import __version__
from cmsctl.commands import register_commands
from cmsctl.commands._context import AppContext
from cmsctl.config.settings import CmsSettings

_OUTPUT_FLAGS = ("json_output", "quiet", "verbose", "log_json")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cmsctl")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print ids or OK/ERROR lines only.")
@click.option("-v", "--verbose", is_flag=True, help="Show error detail and debug logs.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option("-c", "--config", "config_path", default=None, help="Use this cmsctl.toml.")
@click.option(
    "-C",
    "--project-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Resolve schemas and plugins relative to this directory.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, project_root: Path | None, **flags: bool) -> None:
    """cmsctl: check headless-CMS content against content-type schemas."""
    ctx.ensure_object(dict)
    ctx.obj = AppContext(
        CmsSettings.from_cli(
            config_path=config_path,
            project_root=project_root,
            **{name: flags[name] for name in _OUTPUT_FLAGS},
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
