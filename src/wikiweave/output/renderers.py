"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from wikiweave.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from wikiweave.services.result import ServiceResult

_PREVIEW_WIDTH = 60


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
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    List results print one path (or block id) per line; single-file
    results print the file's path.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(key for item in items if (key := _extract_key(item)))

    path = result.data.get("path")
    if path:
        return str(path)
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_key(item: Any) -> str:
    """Pull the identifying value out of a list item."""
    if isinstance(item, dict):
        for key in ("source_file", "path", "id"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _preview(text: str, width: int = _PREVIEW_WIDTH) -> str:
    """Single-line preview of *text*, clipped to *width* characters."""
    flat = " ".join(text.split())
    if len(flat) <= width:
        return flat
    return flat[: width - 3].rstrip() + "..."


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="wiki.ok")
    op = Text(f"  {result.op}", style="wiki.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="wiki.key")
    if key == "path" or key.endswith("_file"):
        v = Text(str(value), style="wiki.path")
    elif key == "title":
        v = Text(str(value), style="wiki.title")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


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
        line.append(f"  ({', '.join(f'{k}={v}' for k, v in annotations.items())})")
    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _file_table(
    items: list[dict[str, Any]],
    *,
    extra_columns: list[str] | None = None,
) -> Table:
    """Build a Rich Table of path/title rows."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="wiki.path", no_wrap=True)
    table.add_column("Title", style="wiki.title")
    for col in extra_columns or []:
        table.add_column(col.replace("_", " ").title(), justify="right")

    for item in items:
        row = [Text(str(item.get("path", ""))), Text(str(item.get("title", "")))]
        row.extend(Text(str(item.get(col, ""))) for col in extra_columns or [])
        table.add_row(*row)
    return table


def _backlink_table(items: list[dict[str, Any]], *, verbose: bool) -> Table:
    table = Table(show_header=True, show_lines=verbose, pad_edge=False, expand=False)
    table.add_column("Source", style="wiki.path", no_wrap=True)
    table.add_column("Title", style="wiki.title")
    table.add_column("Refs", justify="right")
    table.add_column("Context", style="wiki.context")
    for item in items:
        context = str(item.get("context", ""))
        table.add_row(
            Text(str(item.get("source_file", ""))),
            Text(str(item.get("source_title", ""))),
            str(item.get("occurrences", 1)),
            Text(context if verbose else _preview(context)),
        )
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="wiki.error")
    op = Text(f"  {result.op}", style="wiki.op")
    console.print(label, op, Text(f": {msg}"), sep="")

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


# ── Content renderers ─────────────────────────────────────────────────


def _render_page(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render get_content / render as a panel with the expanded body."""
    d = result.data
    lines: list[str] = [f"path: {d.get('path', '')}"]
    tags = d.get("tags", [])
    if tags:
        lines.append(f"tags: {', '.join(tags)}")
    aliases = d.get("aliases", [])
    if aliases:
        lines.append(f"aliases: {', '.join(aliases)}")

    embeds = d.get("embeds") or {}
    if embeds.get("placeholders"):
        lines.append(f"unexpanded embeds: {embeds['placeholders']}")

    if "backlinks" in d:
        lines.append(f"backlinks: {len(d['backlinks'])}")
    if "blocks" in d:
        lines.append(f"blocks: {len(d['blocks'])}")
    links = d.get("links")
    if links:
        broken = [lnk["target"] for lnk in links if not lnk.get("resolved")]
        lines.append(f"links: {len(links)}")
        if broken:
            lines.append(f"broken links: {', '.join(broken)}")

    header = Text("\n".join(lines), style="wiki.key")
    body = str(d.get("content", "")).strip()
    renderable = Text.assemble(header, "\n\n", body) if body else header
    title = Text(str(d.get("title", "Untitled")), style="wiki.title")
    console.print(Panel(renderable, title=title, expand=False))

    if verbose and d.get("backlinks"):
        console.print()
        console.print(Text("Backlinks", style="bold"))
        console.print(_backlink_table(d["backlinks"], verbose=verbose))


def _render_backlinks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render backlinks and block_references as a source/context table."""
    d = result.data
    items = d.get("items", [])
    target = d.get("path", "")
    if "block_id" in d:
        target = f"{target}#^{d['block_id']}"

    console.print(Text.assemble("References to ", (str(target), "wiki.path")))
    if items:
        console.print(_backlink_table(items, verbose=verbose))
    console.print(f"\n{d.get('count', len(items))} sources")


def _render_blocks(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the addressable blocks of one file."""
    d = result.data
    items = d.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", no_wrap=True)
    table.add_column("Kind")
    table.add_column("Line", justify="right")
    table.add_column("Content")

    for item in items:
        kind = str(item.get("kind", ""))
        content = str(item.get("content", ""))
        table.add_row(
            Text(str(item.get("id", ""))),
            Text(kind, style=style_for_kind(kind)),
            str(item.get("line", "")),
            Text(content if verbose else _preview(content)),
        )

    console.print(Text.assemble("Blocks in ", (str(d.get("path", "")), "wiki.path")))
    if items:
        console.print(table)
    console.print(f"\n{d.get('count', len(items))} blocks")


# ── Graph renderers ───────────────────────────────────────────────────


def _render_neighbors(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text.assemble("Neighbors of ", (str(d.get("path", "")), "wiki.path")))
    for key, label in (("outgoing", "Links to"), ("incoming", "Linked from")):
        items = d.get(key, [])
        console.print(f"\n[bold]{label}[/bold] ({len(items)})")
        if items:
            console.print(_file_table(items, extra_columns=["weight"]))


def _render_file_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render orphans and hubs."""
    d = result.data
    items = d.get("items", [])
    extra = ["connections", "in_degree", "out_degree"] if result.op == "hubs" else []
    if items:
        console.print(_file_table(items, extra_columns=extra))
    suffix = f" (threshold {d['threshold']})" if "threshold" in d else ""
    console.print(f"\n{d.get('count', len(items))} {result.op}{suffix}")


def _render_broken(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    for item in d.get("items", []):
        console.print(Text(str(item.get("path", "")), style="wiki.path"))
        for target in item.get("targets", []):
            console.print(Text(f"  [[{target}]]", style="wiki.broken"))
    console.print(f"\n{d.get('links', 0)} broken links in {d.get('count', 0)} files")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Content
    "get_content": _render_page,
    "render": _render_page,
    "backlinks": _render_backlinks,
    "block_references": _render_backlinks,
    "blocks": _render_blocks,
    # Graph
    "neighbors": _render_neighbors,
    "orphans": _render_file_list,
    "hubs": _render_file_list,
    "broken": _render_broken,
}
