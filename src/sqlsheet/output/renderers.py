"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a StringIO-backed Rich Console; the caller gets
the text back via ``get_output(console)``. Renderers are dispatched by
``result.op`` in :func:`render_result`, with a generic key-value fallback.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from sqlsheet.output.console import create_console, get_output, style_for_level

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from sqlsheet.services.result import ServiceResult

    Renderer = Callable[[ServiceResult, Console], None]

# Ops whose payload is the document text itself; shown without decoration.
TEXT_OPS = frozenset({"show", "render"})


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a string.

    Text payloads (``show``, ``render`` without an output file) come back
    verbatim; everything else goes through a Rich renderer.
    """
    if result.ok and result.op in TEXT_OPS and "text" in result.data:
        return str(result.data["text"])

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"
    if result.op in TEXT_OPS and "text" in result.data:
        return str(result.data["text"])
    if result.op == "sections":
        return "\n".join(item["title"] for item in result.data.get("items", []))
    if result.op == "check":
        d = result.data
        return f"{d.get('error_count', 0)} errors, {d.get('warning_count', 0)} warnings"
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="sheet.ok"), Text(f"  {result.op}", style="sheet.op"), sep="")


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="sheet.key")
    if key in ("source", "output_file", "path"):
        v = Text(str(value), style="sheet.path")
    elif key == "title":
        v = Text(str(value), style="sheet.title")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(Text(f"    {k}: {v}"))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="sheet.error"),
        Text(f"  {result.op}", style="sheet.op"),
        Text(" — "),
        Text(msg),
        sep="",
    )
    if verbose and err:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Document renderers ────────────────────────────────────────────────


def _render_written(result: ServiceResult, console: Console) -> None:
    """``render --output``: where the rendering went."""
    _status_line(console, result)
    for key in ("source", "format", "output_file", "bytes"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_sections(result: ServiceResult, console: Console) -> None:
    d = result.data
    if d.get("title"):
        console.print(Text(str(d["title"]), style="sheet.title"))

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("#", justify="right")
    table.add_column("Line", style="sheet.line", justify="right")
    table.add_column("Title")
    table.add_column("Code", justify="right")
    for item in d.get("items", []):
        level = int(item.get("level", 1))
        title = Text("  " * (level - 1) + str(item.get("title", "")), style=style_for_level(level))
        table.add_row(str(item["index"]), str(item["line"]), title, str(item["code_blocks"]))
    console.print(table)

    count = d.get("count", 0)
    total = d.get("total", count)
    suffix = f" of {total}" if total != count else ""
    console.print(f"\n{count}{suffix} sections")


def _render_snippets(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    for item in items:
        header = Text()
        header.append(f"line {item['line']}", style="sheet.line")
        if item.get("section"):
            header.append(f"  {item['section']}", style="sheet.title")
        if item.get("language"):
            header.append(f"  [{item['language']}]", style="sheet.lang")
        console.print(header)
        for line in str(item.get("text", "")).split("\n"):
            console.print(Text(f"    {line}" if line else ""), soft_wrap=True)
        console.print()
    console.print(f"{result.data.get('count', len(items))} snippets")


def _render_check(result: ServiceResult, console: Console) -> None:
    """Render check results with issues grouped by category."""
    d = result.data
    issues = d.get("issues", [])
    for key in ("source", "title", "sections", "code_blocks", "license", "credits"):
        if d.get(key) is not None:
            _field(console, key, d[key])

    if not issues:
        console.print("\n[sheet.ok]OK[/sheet.ok]  No issues found.")
        return

    severity_styles = {"error": "sheet.error", "warning": "sheet.warning"}
    by_category: dict[str, list[dict[str, Any]]] = {}
    for issue in issues:
        by_category.setdefault(str(issue.get("category", "unknown")), []).append(issue)

    for category, cat_issues in by_category.items():
        console.print(f"\n[bold]{category}[/bold]")
        for issue in cat_issues:
            sev = str(issue.get("severity", "warning"))
            style = severity_styles.get(sev, "")
            line = Text()
            line.append("  ")
            line.append(sev, style=style)
            if issue.get("line") is not None:
                line.append(f" [line {issue['line']}]", style="sheet.line")
            line.append(f": {issue.get('message', '')}")
            console.print(line)

    console.print(f"\n{d.get('error_count', 0)} errors, {d.get('warning_count', 0)} warnings")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            value = json.dumps(value, separators=(",", ":"))
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Renderer] = {
    "render": _render_written,
    "sections": _render_sections,
    "snippets": _render_snippets,
    "check": _render_check,
}
