"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from cmsctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from cmsctl.services.result import ServiceResult

# Long values (base64 media, mostly) are cut to this many characters.
VALUE_PREVIEW_CHARS = 60


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(key for item in items if (key := _extract_key(item)))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_key(item: Any) -> str:
    """Extract the identifying value from a list item (content type or kind)."""
    if isinstance(item, dict):
        for key in ("id", "kind"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def preview(value: Any) -> str:
    """Render a record value on one line, shortening long strings."""
    text = value if isinstance(value, str) else json.dumps(value)
    if len(text) > VALUE_PREVIEW_CHARS:
        return f"{text[:VALUE_PREVIEW_CHARS]}… ({len(text)} chars)"
    return text


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="cms.ok")
    op = Text(f"  {result.op}", style="cms.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="cms.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="cms.id")
    elif key in ("name", "content_type"):
        v = Text(str(value), style="cms.name")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="cms.error")
    op = Text(f"  {result.op}", style="cms.op")
    console.print(label, op, Text(" — "), Text(msg))

    if err and err.code:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Validation renderers ──────────────────────────────────────────────


def _record_table(record: dict[str, Any]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="cms.field", no_wrap=True)
    table.add_column("Value")
    for key, value in record.items():
        table.add_row(key, preview(value))
    return table


def _render_validated(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render validate / validate_bulk results."""
    _status_line(console, result)
    d = result.data
    for key in ("content_type", "content_type_id", "kind"):
        if key in d:
            _field(console, key, d[key])

    record = d.get("record", {})
    if record:
        console.print()
        console.print(_record_table(record))
    _field(console, "fields", len(record))


# ── Schema renderers ──────────────────────────────────────────────────


def _fields_table(fields: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Field", style="cms.field", no_wrap=True)
    table.add_column("Kind", style="cms.kind")
    table.add_column("Required")
    table.add_column("Details")
    for f in fields:
        details = ""
        if "enumOptions" in f:
            details = ", ".join(f["enumOptions"])
        elif "relationTarget" in f:
            details = f"-> {f['relationTarget']}"
        required = Text("optional", style="cms.optional") if f.get("optional") else "required"
        table.add_row(str(f.get("name", "")), str(f.get("kind", "")), required, details)
    return table


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render check_schema / show_type results."""
    _status_line(console, result)
    d = result.data
    for key in ("id", "name", "path"):
        if key in d:
            _field(console, key, d[key])
    console.print()
    console.print(_fields_table(d.get("fields", [])))


def _render_types(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="cms.name")
    table.add_column("Fields", justify="right")
    if verbose:
        table.add_column("ID", style="cms.id", no_wrap=True)
    for item in items:
        row = [str(item.get("name", "")), str(item.get("field_count", ""))]
        if verbose:
            row.append(str(item.get("id", "")))
        table.add_row(*row)
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} content types")


def _render_kinds(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Kind", style="cms.kind")
    table.add_column("Extra")
    for item in result.data.get("items", []):
        table.add_row(str(item["kind"]), str(item.get("extra") or ""))
    console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, dict | list):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validated,
    "validate_bulk": _render_validated,
    "check_schema": _render_schema,
    "show_type": _render_schema,
    "list_types": _render_types,
    "list_kinds": _render_kinds,
    "check_id": _render_generic,
}
