"""Click base classes whose commands can print usage examples.

``@click.command(cls=CmsCommand, examples="...")`` adds an eager
``--examples`` flag that prints the text and exits without running the
command. Groups get the same flag through :class:`CmsGroup`, and their
subcommands default to :class:`CmsCommand`.
"""

from __future__ import annotations

from typing import Any

import click


def _print_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(examples)
    ctx.exit(0)


class _ExamplesMixin:
    """Stores ``examples`` and, when given, registers ``--examples``."""

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=_print_examples,
                    help="Show usage examples.",
                )
            )


class CmsCommand(_ExamplesMixin, click.Command):
    """A command that accepts ``examples=``."""


class CmsGroup(_ExamplesMixin, click.Group):
    """A group that accepts ``examples=``; subcommands are :class:`CmsCommand`."""

    command_class = CmsCommand
