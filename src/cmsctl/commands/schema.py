"""Command group: inspect content-type schemas."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from cmsctl.commands._base import CmsGroup

if TYPE_CHECKING:
    from cmsctl.commands._context import AppContext


@click.group(
    cls=CmsGroup,
    examples="""\
  cmsctl schema check schemas/article.yaml
  cmsctl schema list
  cmsctl schema show article
  cmsctl schema kinds""",
)
def schema() -> None:
    """Check schema documents and browse the schema directory."""


@schema.command(
    examples="""\
  cmsctl schema check schemas/article.yaml
  cmsctl --json schema check legacy/blog.json"""
)
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_obj
def check(app: AppContext, path: Path) -> None:
    """Check the content-type document at PATH."""
    from cmsctl.services.schema import SchemaService

    app.emit(app.service(SchemaService).check_schema(path))


@schema.command(
    "list",
    examples="""\
  cmsctl schema list
  cmsctl -q schema list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List content types in the schema directory."""
    from cmsctl.services.schema import SchemaService

    app.emit(app.service(SchemaService).list_types())


@schema.command(
    examples="""\
  cmsctl schema show article
  cmsctl --json schema show 3f2b8c1e-0a4d-5e6f-9a7b-1c2d3e4f5a6b"""
)
@click.argument("identifier")
@click.pass_obj
def show(app: AppContext, identifier: str) -> None:
    """Show one content type by id or name."""
    from cmsctl.services.schema import SchemaService

    app.emit(app.service(SchemaService).show_type(identifier))


@schema.command(examples="  cmsctl schema kinds")
@click.pass_obj
def kinds(app: AppContext) -> None:
    """List the field kinds a schema may declare."""
    from cmsctl.services.schema import SchemaService

    app.emit(app.service(SchemaService).list_kinds())
