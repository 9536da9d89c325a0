"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from archmap.output.console import (
    create_console,
    get_output,
    style_for_progress,
    style_for_type,
)

if TYPE_CHECKING:
    from rich.console import Console

    from archmap.services.result import ServiceResult


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
        return f"ERROR: {result.op}: {msg}"

    # Lists render as one id per line
    for key in ("items", "order", "cycle", "path", "nodes"):
        items = result.data.get(key)
        if items and isinstance(items, list):
            return "\n".join(i for i in (_extract_id(item) for item in items) if i)

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    """Extract an ID from a list entry (node dict, layer row, or bare id)."""
    if isinstance(item, str):
        return item
    if isinstance(item, dict):
        for key in ("id", "layer_id", "filename"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="arch.ok")
    op = Text(f"  {result.op}", style="arch.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="arch.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="arch.id")
    elif key in ("path", "output_dir", "backup_path"):
        v = Text(str(value), style="arch.path")
    elif key in ("name", "title"):
        v = Text(str(value), style="arch.title")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _progress_text(progress: int) -> Text:
    return Text(f"{progress:>3}%", style=style_for_progress(progress))


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
        line += "  (" + ", ".join(f"{ak}={av}" for ak, av in annotations.items()) + ")"

    console.print(line)

    for child in span_data.get("children", []):
        _render_telemetry_tree(console, child, indent=indent + 4)


def _node_table(
    items: list[dict[str, Any]],
    *,
    extra_columns: list[str] | None = None,
) -> Table:
    """Build a Rich Table of ``{id, name, type}`` rows plus extra columns."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="arch.id", no_wrap=True)
    table.add_column("Name", style="arch.title")
    table.add_column("Type")
    for col in extra_columns or []:
        justify = "right" if col in ("progress", "total_steps", "feature_count") else "left"
        table.add_column(col.replace("_", " ").title(), justify=justify)

    for item in items:
        node_type = str(item.get("type", ""))
        row: list[Any] = [
            str(item.get("id", "")),
            str(item.get("name", "")),
            Text(node_type, style=style_for_type(node_type)),
        ]
        for col in extra_columns or []:
            val = item.get(col, "")
            if col == "progress":
                row.append(_progress_text(int(val)))
            else:
                row.append("" if val is None else str(val))
        table.add_row(*row)

    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="arch.error")
    op = Text(f"  {result.op}", style="arch.op")
    code = Text(f" [{err.code}] " if err else " ", style="arch.key")
    console.print(label, op, code, Text(msg))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Mutation renderers ────────────────────────────────────────────────


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/update/move/delete results."""
    _status_line(console, result)
    mutation_keys = (
        "id",
        "name",
        "type",
        "layer",
        "from_layer",
        "moved",
        "source_id",
        "target_id",
        "node_id",
        "version",
        "filename",
        "title",
        "progress",
        "status",
        "step_count",
        "current_version",
        "deleted",
        "deleted_versions",
        "deleted_features",
        "deleted_edges",
    )
    for key in mutation_keys:
        if result.data.get(key) is not None:
            _field(console, key, result.data[key])
    if result.data.get("fields_changed"):
        _field(console, "fields_changed", ", ".join(result.data["fields_changed"]))
    if result.data.get("recalculated_versions"):
        _field(console, "recalculated", ", ".join(result.data["recalculated_versions"]))
    if verbose:
        _render_meta(console, result)


def _render_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render feature batch uploads."""
    _status_line(console, result)
    d = result.data
    _field(console, "uploaded", d.get("uploaded", 0))
    if "version" in d:
        _field(console, "version", d["version"])
    _field(console, "total_steps", d.get("total_steps", 0))
    for err in d.get("errors", []):
        console.print(f"  [arch.error]error[/arch.error] {err.get('filename')}: {err.get('error')}")
    if verbose:
        _render_meta(console, result)


# ── Graph renderers ───────────────────────────────────────────────────


def _render_path(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render shortest path as a chain with edge types."""
    path = result.data.get("path", [])
    edges = result.data.get("edges", [])

    if not path:
        console.print("No path found.")
        return

    parts: list[str] = [f"[arch.id]{path[0]['id']}[/arch.id]"]
    for edge, node in zip(edges, path[1:], strict=True):
        parts.append(f" -[{edge['type']}]- [arch.id]{node['id']}[/arch.id]")
    console.print("".join(parts))
    console.print(f"\nPath length: {len(edges)}")


def _add_tree_items(tree: Tree, items: list[dict[str, Any]]) -> None:
    for item in items:
        style = style_for_type(str(item.get("type", "")))
        branch = tree.add(f"[arch.id]{item['id']}[/arch.id]  [{style or 'dim'}]{item['name']}[/]")
        _add_tree_items(branch, item.get("dependencies") or [])


def _render_tree(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a dependency tree."""
    d = result.data
    tree = Tree(f"[arch.id]{d['node_id']}[/arch.id] [dim](depth {d['max_depth']})[/dim]")
    _add_tree_items(tree, d.get("items", []))
    console.print(tree)
    if not d.get("items"):
        console.print("No dependencies.")
    if verbose:
        _render_meta(console, result)


def _render_neighbourhood(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    nodes = d.get("nodes", [])
    console.print(_node_table(nodes))
    edges = d.get("edges", [])
    if edges:
        console.print()
        for e in edges:
            console.print(
                f"  [arch.id]{e['source_id']}[/arch.id] -[{e['type']}]-> "
                f"[arch.id]{e['target_id']}[/arch.id]"
            )
    console.print(f"\n{len(nodes)} nodes, {len(edges)} edges within {d['hops']} hop(s)")


def _render_order(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render implementation order, or the nodes stuck in a cycle."""
    d = result.data
    if "cycle" in d:
        console.print(Text("Dependency cycle detected", style="arch.warning"))
        for node_id in d["cycle"]:
            console.print(f"  [arch.id]{node_id}[/arch.id]")
        return
    for idx, node_id in enumerate(d.get("order", []), start=1):
        console.print(f"  {idx:>3}. [arch.id]{node_id}[/arch.id]")
    console.print(f"\n{len(d.get('order', []))} components")


def _render_node_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render dependents and next-implementable lists."""
    items = result.data.get("items", [])
    extra = ["progress", "total_steps"] if result.op == "next_implementable" else None
    console.print(_node_table(items, extra_columns=extra))
    console.print(f"\n{result.data.get('count', len(items))} items")


# ── Layer and status renderers ────────────────────────────────────────


def _render_layers(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="arch.id", no_wrap=True)
    table.add_column("Name", style="arch.title")
    table.add_column("Order", justify="right")
    table.add_column("Components", justify="right")
    for item in result.data.get("items", []):
        table.add_row(
            item["id"],
            item["name"],
            str(item.get("sort_order", 0)),
            str(item.get("component_count", 0)),
        )
    console.print(table)
    console.print(f"\n{result.data.get('count', 0)} layers")


def _render_layer(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    title = f"{d['id']}: {d['name']}"
    children = d.get("children", [])
    body = d.get("description") or ""
    console.print(Panel(body or "(no description)", title=title, border_style="arch.type.layer"))
    if children:
        console.print(_node_table(children, extra_columns=["current_version"]))


def _render_overview(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render per-layer progress for ``archmap status``."""
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Layer", style="arch.id", no_wrap=True)
    table.add_column("Name", style="arch.title")
    table.add_column("Components", justify="right")
    table.add_column("MVP done", justify="right")
    table.add_column("v1 done", justify="right")
    table.add_column("Progress", justify="right")
    for item in result.data.get("items", []):
        table.add_row(
            item["layer_id"],
            item["layer_name"],
            str(item["total_components"]),
            str(item["completed_mvp"]),
            str(item["completed_v1"]),
            _progress_text(item["overall_progress"]),
        )
    console.print(table)


def _render_by_status(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    console.print(Text(f"Components by status for {d['version']}", style="arch.title"))
    for bucket in ("complete", "in_progress", "planned"):
        items = d.get(bucket, [])
        console.print(f"\n[arch.key]{bucket}[/arch.key] ({len(items)})")
        for item in items:
            console.print(
                f"  [arch.id]{item['id']}[/arch.id]  {item['name']}  "
                f"[dim]{item['total_steps']} steps / {item['feature_count']} features[/dim]"
            )


def _render_context(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a component's full working context."""
    d = result.data
    comp = d["component"]
    lines = [
        f"type: {comp['type']}",
        f"layer: {comp.get('layer') or '-'}",
        f"state: {comp['display_state']}",
    ]
    if comp.get("current_version"):
        lines.append(f"current_version: {comp['current_version']}")
    if comp.get("tags"):
        lines.append(f"tags: {', '.join(comp['tags'])}")
    if comp.get("description"):
        lines.append(f"\n{comp['description']}")
    style = style_for_type(str(comp["type"]))
    console.print(
        Panel(
            "\n".join(lines),
            title=f"{comp['id']}: {comp['name']}",
            border_style=style or "dim",
            expand=False,
        )
    )

    if d.get("versions"):
        table = Table(show_header=True, pad_edge=False, expand=False)
        table.add_column("Version")
        table.add_column("Status")
        table.add_column("Progress", justify="right")
        table.add_column("Steps", justify="right")
        table.add_column("Features", justify="right")
        for row in d["versions"]:
            table.add_row(
                row["version"],
                row["status"],
                _progress_text(row["progress"]),
                str(row["total_steps"]),
                str(row["feature_count"]),
            )
        console.print(table)

    for label in ("dependencies", "dependents", "siblings"):
        refs = d.get(label) or []
        if refs:
            ids = ", ".join(f"[arch.id]{r['id']}[/arch.id]" for r in refs)
            console.print(f"  [arch.key]{label}:[/arch.key] {ids}")


def _render_architecture(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    for key, value in result.data.get("stats", {}).items():
        _field(console, key, value)
    if "path" in result.data:
        _field(console, "path", result.data["path"])
    if verbose:
        _render_meta(console, result)


# ── Version and feature renderers ─────────────────────────────────────


def _render_version(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    head = Text.assemble(
        (d["version"], "arch.title"),
        "  ",
        _progress_text(d.get("progress", 0)),
        f"  {d.get('status', '')}",
    )
    console.print(head)
    if "total_steps" in d:
        console.print(f"  steps: {d['passing_steps']}/{d['total_steps']} passing")
    if d.get("content"):
        console.print()
        console.print(d["content"].strip())


def _render_versions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Version", style="arch.title")
    table.add_column("Status")
    table.add_column("Progress", justify="right")
    table.add_column("Steps", justify="right")
    table.add_column("Updated", style="dim")
    for item in result.data.get("items", []):
        table.add_row(
            item["version"],
            str(item.get("status", "")),
            _progress_text(item.get("progress", 0)),
            str(item.get("total_steps", "-")),
            str(item.get("updated_at") or ""),
        )
    console.print(table)


def _render_features(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Version")
    table.add_column("Filename", style="arch.id")
    table.add_column("Title", style="arch.title")
    table.add_column("Scenarios", justify="right")
    table.add_column("Steps", justify="right")
    for item in result.data.get("items", []):
        table.add_row(
            item["version"],
            item["filename"],
            item["title"],
            str(item["scenario_count"]),
            str(item["step_count"]),
        )
    console.print(table)
    t = result.data.get("totals", {})
    if t:
        console.print(
            f"\n{t['total_features']} features, {t['total_scenarios']} scenarios, "
            f"{t['total_steps']} steps (given {t['total_given_steps']}, "
            f"when {t['total_when_steps']}, then {t['total_then_steps']})"
        )


def _render_feature(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    title = f"{d['node_id']}@{d['version']}: {d['filename']}"
    console.print(Panel(d.get("content") or "", title=title, border_style="dim", expand=False))
    console.print(f"  {d['step_count']} steps")


def _render_search(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    for item in items:
        console.print(
            f"[arch.id]{item['node_id']}[/arch.id] [dim]{item['version']}[/dim] "
            f"{item['filename']}  [arch.title]{item['title']}[/arch.title]"
        )
        console.print(Text(f"    {item['snippet']}", style="dim"))
    console.print(f"\n{result.data.get('count', len(items))} matches for '{result.data['query']}'")


# ── Key renderers ─────────────────────────────────────────────────────


def _render_keys(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", justify="right", style="arch.id")
    table.add_column("Name", style="arch.title")
    table.add_column("Scopes")
    table.add_column("Active")
    table.add_column("Expires", style="dim")
    table.add_column("Last used", style="dim")
    for item in result.data.get("items", []):
        table.add_row(
            str(item["id"]),
            item["name"],
            ", ".join(item.get("scopes", [])),
            "yes" if item.get("is_active") else "revoked",
            str(item.get("expires_at") or "never"),
            str(item.get("last_used_at") or "-"),
        )
    console.print(table)


def _render_key_generated(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    _status_line(console, result)
    record = result.data["record"]
    _field(console, "name", record["name"])
    _field(console, "scopes", ", ".join(record["scopes"]))
    console.print(Text(f"  key: {result.data['plaintext']}", style="arch.warning"))


def _render_key_check(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    status = result.data["status"]
    style = "arch.ok" if status == "valid" else "arch.error"
    console.print(Text(status, style=style))
    key = result.data.get("key")
    if key:
        _field(console, "name", key["name"])
        _field(console, "scopes", ", ".join(key["scopes"]))


# ── Export and upgrade renderers ─────────────────────────────────────


def _render_export(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render export results with output path and counts."""
    _status_line(console, result)
    d = result.data
    for key in ("output_dir", "component", "exported"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    if verbose:
        _render_meta(console, result)


def _render_init(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render init_project results with the files created."""
    _status_line(console, result)
    d = result.data
    for key in ("project_root", "db_path", "config_path", "revision"):
        if d.get(key) is not None:
            _field(console, key, d[key])
    for layer in d.get("layers", []):
        console.print(f"    [arch.id]{layer}[/arch.id]")


def _render_upgrade(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render upgrade/migration results."""
    _status_line(console, result)
    d = result.data
    for key in (
        "applied_count",
        "pending_count",
        "current",
        "head",
        "stamped",
        "backup_path",
        "message",
    ):
        if key in d:
            _field(console, key, d[key])
    if verbose and d.get("pending"):
        console.print()
        for p in d["pending"]:
            console.print(f"  {p['revision']}: {p['description']}")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Mutations
    "create_component": _render_mutation,
    "update_component": _render_mutation,
    "move_component": _render_mutation,
    "delete_component": _render_mutation,
    "create_layer": _render_mutation,
    "create_edge": _render_mutation,
    "delete_edge": _render_mutation,
    "update_version": _render_mutation,
    "delete_all_versions": _render_mutation,
    "upload_feature": _render_mutation,
    "delete_feature": _render_mutation,
    "delete_version_features": _render_mutation,
    "revoke_api_key": _render_mutation,
    "batch_upload": _render_batch,
    "batch_upload_cross_component": _render_batch,
    # Graph
    "shortest_path": _render_path,
    "dependency_tree": _render_tree,
    "neighbourhood": _render_neighbourhood,
    "implementation_order": _render_order,
    "dependents": _render_node_list,
    "next_implementable": _render_node_list,
    # Layers and status
    "list_layers": _render_layers,
    "get_layer": _render_layer,
    "layer_overview": _render_overview,
    "components_by_status": _render_by_status,
    "component_context": _render_context,
    "get_architecture": _render_architecture,
    "export_architecture": _render_architecture,
    # Versions and features
    "get_version": _render_version,
    "list_versions": _render_versions,
    "list_features": _render_features,
    "get_feature": _render_feature,
    "search_features": _render_search,
    "step_totals": _render_generic,
    # Keys
    "generate_api_key": _render_key_generated,
    "validate_api_key": _render_key_check,
    "list_api_keys": _render_keys,
    # Lifecycle
    "export_features": _render_export,
    "init_project": _render_init,
    "upgrade": _render_upgrade,
}
