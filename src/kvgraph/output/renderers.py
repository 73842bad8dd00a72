"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from kvgraph.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from kvgraph.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="kv.ok"), Text(f"  {result.op}", style="kv.op"), sep="")


def _compact(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="kv.key")
    style = "kv.id" if key == "id" or key.endswith("_id") else ""
    if key == "label":
        style = "kv.label"
    console.print(k, Text(_compact(value), style=style), sep="")


def _properties_block(properties: dict[str, Any]) -> str:
    if not properties:
        return "(no properties)"
    width = max(len(k) for k in properties)
    return "\n".join(f"{k.ljust(width)}  {_compact(v)}" for k, v in sorted(properties.items()))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    code = err.code if err else "UNKNOWN"
    console.print(
        Text("ERROR", style="kv.error"),
        Text(f"  {result.op}", style="kv.op"),
        Text(f" [{code}] "),
        Text(msg),
        sep="",
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Element renderers ─────────────────────────────────────────────────


def _render_element(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    kind = str(d.get("kind", ""))
    lines: list[str] = []
    if kind == "Edge":
        lines.append(f"{d.get('out_id')} -[{d.get('label')}]-> {d.get('in_id')}")
        lines.append("")
    lines.append(_properties_block(d.get("properties", {})))
    edges = d.get("edges", [])
    if edges:
        lines.append("")
        for edge in edges:
            arrow = "->" if edge["direction"] == "out" else "<-"
            lines.append(f"{arrow} {edge['other_id']}  [{edge['label']}]  {edge['id']}")
    title = f"{kind} {d.get('id', '?')}"
    console.print(
        Panel(
            Text("\n".join(lines)),
            title=Text(title),
            border_style=style_for_kind(kind) or "dim",
            expand=False,
        )
    )


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("id", "name", "kind", "label", "out_id", "in_id", "key", "value", "old_value"):
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose and result.data.get("properties"):
        _field(console, "properties", result.data["properties"])


def _render_find(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="kv.id", no_wrap=True)
    is_edge = result.data.get("kind") == "Edge"
    if is_edge:
        table.add_column("Label", style="kv.label")
        table.add_column("Out")
        table.add_column("In")
    table.add_column("Properties")
    for item in items:
        cells = [str(item.get("id", ""))]
        if is_edge:
            cells += [str(item.get(col, "")) for col in ("label", "out_id", "in_id")]
        cells.append(_compact(item.get("properties", {})))
        table.add_row(*(Text(cell) for cell in cells))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")


def _render_index_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="kv.id", no_wrap=True)
    table.add_column("Kind")
    for item in items:
        kind = str(item["kind"])
        table.add_row(Text(str(item["name"])), Text(kind, style=style_for_kind(kind)))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} indexes")


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Print the document alone (pipeable), or a summary when written to a file."""
    if "content" in result.data:
        console.print(result.data["content"], end="", markup=False, emoji=False, soft_wrap=True)
        return
    _status_line(console, result)
    for key in ("output_file", "format", "node_count", "edge_count"):
        if key in result.data:
            _field(console, key, result.data[key])


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "get_vertex": _render_element,
    "get_edge": _render_element,
    "add_vertex": _render_mutation,
    "add_edge": _render_mutation,
    "remove_vertex": _render_mutation,
    "remove_edge": _render_mutation,
    "set_property": _render_mutation,
    "remove_property": _render_mutation,
    "create_index": _render_mutation,
    "drop_index": _render_mutation,
    "find": _render_find,
    "list_indexes": _render_index_list,
    "export": _render_export,
}
