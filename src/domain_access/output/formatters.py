"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output) or machines
(--json). Renderers are dispatched by ``result.op``; unknown ops fall
through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from domain_access.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from domain_access.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags taken from the CLI root."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return render_quiet(result)
    return render_result(result, verbose=settings.verbose)


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
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
        return f"ERROR: {result.op} - {msg}"
    if result.op == "check":
        return "granted" if result.data.get("granted") else "denied"
    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id") or item.get("view", "")) for item in items)
    return f"OK: {result.op}"


# ── Renderers ─────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="da.ok"), Text(f"  {result.op}", style="da.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    console.print(Text(f"  {key}: ", style="da.key"), str(value), sep="")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="da.error"), Text(f"  {result.op}", style="da.op"), "-", msg)
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    granted = data.get("granted")
    verdict = Text("granted", style="da.granted") if granted else Text("denied", style="da.denied")
    console.print(Text("  access: ", style="da.key"), verdict, sep="")
    for key in ("view", "plugin", "active_domain"):
        _field(console, key, data.get(key))
    requirements = data.get("route_requirements") or {}
    for key, value in requirements.items():
        _field(console, f"route {key}", value)
    if verbose and data.get("cache"):
        _field(console, "cache", data["cache"])


def _render_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    items: list[dict[str, Any]] = result.data.get("items", [])
    if not items:
        console.print("  (none)")
        return
    table = Table(show_header=True, header_style="bold")
    columns = list(items[0].keys())
    for column in columns:
        table.add_column(column)
    for item in items:
        table.add_row(*(_cell(item.get(column)) for column in columns))
    console.print(table)


def _cell(value: Any) -> str:
    if isinstance(value, dict):
        return ", ".join(f"{k}={v}" for k, v in value.items())
    return "" if value is None else str(value)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "check": _render_check,
    "routes": _render_table,
    "options": _render_table,
}
