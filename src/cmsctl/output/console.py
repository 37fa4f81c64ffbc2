"""Rich console for cmsctl output.

Renderers draw into a Console backed by an in-memory buffer and hand back
plain strings, so the CLI decides where text goes (stdout or stderr). When
the process is not attached to a terminal, as under CliRunner or in a pipe,
Rich emits no ANSI codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

# Fixed width keeps tables stable regardless of the invoking terminal.
DEFAULT_WIDTH = 120

CMS_THEME = Theme(
    {
        "cms.ok": "bold green",
        "cms.error": "bold red",
        "cms.op": "bold cyan",
        "cms.key": "dim",
        "cms.id": "bold blue",
        "cms.name": "bold",
        "cms.field": "bold magenta",
        "cms.kind": "cyan",
        "cms.optional": "dim",
    }
)


def create_console(*, no_color: bool = False, width: int = DEFAULT_WIDTH) -> Console:
    """Return a themed Console that writes into a fresh StringIO."""
    return Console(
        file=StringIO(),
        theme=CMS_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def get_output(console: Console) -> str:
    """Return everything rendered so far on a :func:`create_console` console."""
    buffer = console.file
    if not isinstance(buffer, StringIO):
        msg = "console was not created by create_console()"
        raise TypeError(msg)
    return buffer.getvalue()
