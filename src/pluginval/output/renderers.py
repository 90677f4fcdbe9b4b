"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from pluginval.output.console import create_console, get_output, style_for_layer

if TYPE_CHECKING:
    from rich.console import Console

    from pluginval.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    show_passed: bool = False,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    renderer = _OP_RENDERERS.get(result.op, _render_generic)
    if result.ok or (result.data and result.op in _REPORTING_OPS):
        renderer(result, console, verbose=verbose, show_passed=show_passed)
    if not result.ok:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("path", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="pv.ok")
    op = Text(f"  {result.op}", style="pv.op")
    console.print(label, op)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="pv.key")
    v = Text(str(value), style="pv.path" if key == "path" else "")
    console.print(k, v, sep="")


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
            console.print(f"    {k}: {v}")


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

    line = f"{prefix}[{style}]{duration:>8.2f}ms[/{style}]  {name}"
    annotations = span_data.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="pv.error")
    op = Text(f"  {result.op}", style="pv.op")
    sep = Text(" — ")
    console.print(label, op, sep, msg, sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Validation report ─────────────────────────────────────────────────


def _render_issue(console: Console, issue: dict[str, Any], *, verbose: bool) -> None:
    is_error = issue.get("severity") == "error"
    style = "pv.error" if is_error else "pv.warning"
    icon = "✗" if is_error else "⚠"
    console.print(
        Text(f"  {icon} ", style=style),
        Text(str(issue.get("file", "")), style="pv.path"),
        sep="",
    )
    console.print(Text(f"    Type: {issue.get('type', '')}", style="pv.type"))
    for message in issue.get("errors", []):
        console.print(Text(f"    → {message}", style=style.replace("bold ", "")))
    shared = issue.get("detail", {}).get("shared")
    if verbose and shared:
        console.print(Text(f"    shared: {', '.join(shared)}", style="dim"))
    console.print()


def _render_validate(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_passed: bool = False,
) -> None:
    """Render validation findings: errors, then warnings, then passes."""
    d = result.data
    issues: list[dict[str, Any]] = d.get("issues", [])

    if result.ok:
        _status_line(console, result)
    console.print(Text(f"  repository: {d.get('repo_root', '')}", style="pv.key"))
    console.print()

    for issue in sorted(issues, key=lambda i: i.get("severity") != "error"):
        _render_issue(console, issue, verbose=verbose)

    passed: list[dict[str, Any]] = d.get("passed", [])
    if show_passed:
        for item in passed:
            console.print(Text("  ✓ ", style="pv.ok"), Text(str(item.get("file", ""))), sep="")
            console.print(Text(f"    Type: {item.get('type', '')}", style="pv.type"))
    elif passed:
        console.print(Text(f"  ✓ {len(passed)} checks passed", style="pv.ok"))

    console.print()
    summary = Text()
    summary.append(f"{d.get('passed_count', len(passed))} passed", style="pv.ok")
    summary.append(", ")
    summary.append(f"{d.get('warning_count', 0)} warnings", style="pv.warning")
    summary.append(", ")
    summary.append(f"{d.get('error_count', 0)} errors", style="pv.error")
    console.print(summary)

    if verbose:
        _render_meta(console, result)


# ── Listing renderers ─────────────────────────────────────────────────


def _render_layers(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_passed: bool = False,
) -> None:
    """Render classified files as a table."""
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print("  No layer files found.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Plugin")
    table.add_column("Layer")
    table.add_column("Path", style="pv.path")
    table.add_column("Lines", justify="right")
    for item in items:
        layer = str(item.get("layer", ""))
        table.add_row(
            str(item.get("plugin", "")),
            Text(layer, style=style_for_layer(layer)),
            str(item.get("path", "")),
            str(item.get("lines", "")),
        )
    console.print(table)
    _field(console, "count", result.data.get("count", len(items)))
    if verbose:
        _render_meta(console, result)


def _render_skills(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_passed: bool = False,
) -> None:
    """Render the skill registry with declaring agents."""
    _status_line(console, result)
    items = result.data.get("items", [])
    if not items:
        console.print("  No skills found.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Skill", style="pv.layer.skill")
    table.add_column("Path", style="pv.path")
    table.add_column("Declared By")
    for item in items:
        agents = item.get("agents") or []
        table.add_row(
            str(item.get("skill", "")),
            str(item.get("path", "")),
            ", ".join(agents) if agents else "-",
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(
    result: ServiceResult,
    console: Console,
    *,
    verbose: bool = False,
    show_passed: bool = False,
) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "layers": _render_layers,
    "skills": _render_skills,
}

# Ops whose failed results still carry a report worth printing.
_REPORTING_OPS = frozenset({"validate"})
