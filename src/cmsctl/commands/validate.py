"""Commands: validate payloads and check identifiers."""

from __future__ import annotations

from typing import IO, TYPE_CHECKING

import click

from cmsctl.commands._base import CmsCommand

if TYPE_CHECKING:
    from cmsctl.commands._context import AppContext


@click.command(
    cls=CmsCommand,
    examples="""\
  cmsctl validate article payload.json
  cmsctl validate schemas/article.yaml payload.json
  cmsctl validate 3f2b8c1e-0a4d-5e6f-9a7b-1c2d3e4f5a6b payload.json
  echo '{"title": "Hello"}' | cmsctl --json validate article -""",
)
@click.argument("type_ref")
@click.argument("payload", type=click.File("r", encoding="utf-8"), default="-")
@click.pass_obj
def validate(app: AppContext, type_ref: str, payload: IO[str]) -> None:
    """Validate a JSON PAYLOAD against a content type.

    TYPE_REF is a schema document path, or the id or name of a content type
    in the schema directory. PAYLOAD defaults to stdin.
    """
    from cmsctl.services.validation import ValidationService

    app.emit(app.service(ValidationService).validate_content(type_ref, payload.read()))


@click.command(
    "validate-bulk",
    cls=CmsCommand,
    examples="""\
  cmsctl validate-bulk number prices.json
  cmsctl validate-bulk date dates.json
  cmsctl validate-bulk enum colors.json -o Red -o Green -o Blue""",
)
@click.argument("kind")
@click.argument("payload", type=click.File("r", encoding="utf-8"), default="-")
@click.option(
    "-o",
    "--option",
    "options",
    multiple=True,
    help="Allowed value when KIND is enum (repeatable).",
)
@click.pass_obj
def validate_bulk(app: AppContext, kind: str, payload: IO[str], options: tuple[str, ...]) -> None:
    """Validate every key of a JSON PAYLOAD as a required field of KIND."""
    from cmsctl.services.validation import ValidationService

    app.emit(
        app.service(ValidationService).validate_bulk(
            payload.read(), kind, enum_options=list(options) or None
        )
    )


@click.command(
    "check-id",
    cls=CmsCommand,
    examples="""\
  cmsctl check-id 3f2b8c1e-0a4d-4e6f-9a7b-1c2d3e4f5a6b""",
)
@click.argument("value")
@click.pass_obj
def check_id(app: AppContext, value: str) -> None:
    """Check that VALUE is a canonical lowercase UUID."""
    from cmsctl.services.validation import ValidationService

    app.emit(app.service(ValidationService).check_id(value))
