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

from almanac.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from almanac.services.result import ServiceResult

ANSWER_LABEL = "Answer"


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
    """Render minimal output for ``--quiet`` mode: the bare integer."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} - {msg}"

    for key in ("answer", "location"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _answer_line(console: Console, answer: Any) -> None:
    console.print(Text(f"{ANSWER_LABEL}: {answer}", style="almanac.answer"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    console.print(Text(f"  {key}: ", style="almanac.key"), Text(str(value)), sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print meta block including telemetry span tree (verbose only)."""
    if not result.meta:
        return

    console.print()
    console.print(Text("  meta:", style="dim"))

    for k, v in result.meta.items():
        if k == "telemetry":
            _render_telemetry_tree(console, v, indent=4)
        else:
            console.print(Text(f"    {k}: {v}"))


def _render_telemetry_tree(
    console: Console,
    span_data: dict[str, Any],
    indent: int = 4,
) -> None:
    """Render a hierarchical span tree with color-coded timing."""
    prefix = " " * indent
    name = span_data.get("name", "?")
    duration = span_data.get("duration_ms", 0.0)

    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"

    line = Text(prefix)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {name}")
    annotations = span_data.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="almanac.error"),
        Text(f"  {result.op}", style="almanac.op"),
        Text(" - "),
        Text(msg),
        sep="",
        soft_wrap=True,
    )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_lowest(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """``Answer: <n>``; verbose adds how it was computed."""
    _answer_line(console, result.data.get("answer"))
    if verbose:
        for key in ("mode", "strategy", "stages", "initial_count"):
            if key in result.data:
                _field(console, key, result.data[key])
        _render_meta(console, result)


def _render_trace(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a seed's path as a stage/value table."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Stage", style="almanac.stage", no_wrap=True)
    table.add_column("Value", style="almanac.value", justify="right")
    for step in result.data.get("path", []):
        table.add_row(Text(str(step.get("stage", ""))), Text(str(step.get("value", ""))))
    console.print(table)
    console.print(Text(f"location: {result.data.get('location')}", style="almanac.answer"))
    if verbose:
        _render_meta(console, result)


def _render_verify(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _answer_line(console, result.data.get("answer"))
    _field(console, "split", result.data.get("split"))
    _field(console, "enumerate", result.data.get("enumerate"))
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    console.print(
        Text("OK", style="almanac.ok"), Text(f"  {result.op}", style="almanac.op"), sep=""
    )
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "lowest": _render_lowest,
    "trace": _render_trace,
    "verify": _render_verify,
}
