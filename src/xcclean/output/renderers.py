"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table
from rich.text import Text

from xcclean.domain.sizes import format_bytes
from xcclean.output.console import create_console, get_output, style_for_risk

if TYPE_CHECKING:
    from rich.console import Console

    from xcclean.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(
    result: ServiceResult,
    *,
    verbose: bool = False,
    no_color: bool = False,
) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console(no_color=no_color)

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

    categories = result.data.get("categories")
    if result.op in ("scan", "status") and isinstance(categories, list):
        return "\n".join(f"{c['key']}\t{c['size']}" for c in categories if c.get("size"))

    if result.op == "clean":
        return str(result.data.get("bytes_freed", 0))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _size(n: Any) -> str:
    return format_bytes(int(n or 0))


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="xc.ok")
    op = Text(f"  {result.op}", style="xc.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="xc.key")
    if key == "path" or key.endswith("_dir"):
        v = Text(str(value), style="xc.path")
    else:
        v = Text(str(value))
    console.print(k, v, end="")
    console.print()


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _risk_text(risk: str) -> Text:
    return Text(risk, style=style_for_risk(risk))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="xc.error")
    op = Text(f"  {result.op}", style="xc.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if err and err.detail.get("available") and not verbose:
        console.print(f"  available: {', '.join(err.detail['available'])}")
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {escape(str(v))}")


# ── Status renderer ───────────────────────────────────────────────────


def _render_status(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the Mac Storage Overview."""
    d = result.data
    disk = d.get("disk", {})
    xc = d.get("xcode", {})

    console.print(Text(d.get("title", "Mac Storage Overview"), style="xc.title"))
    console.print()

    console.print(
        f"  Disk:       {_size(disk.get('used'))} used of {_size(disk.get('total'))} "
        f"({disk.get('percent_used', 0)}%), {_size(disk.get('free'))} free"
    )
    version = xc.get("version") or "not installed"
    running = " (running)" if xc.get("running") else ""
    console.print(f"  Xcode:      {version}{running}")
    if xc.get("developer_dir"):
        console.print(f"  Developer:  [xc.path]{escape(xc['developer_dir'])}[/xc.path]")
    console.print()

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Category", style="xc.title", no_wrap=True)
    table.add_column("Size", style="xc.size", justify="right", no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Risk", no_wrap=True)
    if verbose:
        table.add_column("Key", style="dim", no_wrap=True)

    for cat in d.get("categories", []):
        if not cat.get("exists") and not verbose:
            continue
        row: list[Any] = [
            Text(str(cat.get("name", ""))),
            _size(cat.get("size")),
            str(cat.get("item_count", 0)),
            _risk_text(str(cat.get("risk", ""))),
        ]
        if verbose:
            row.append(Text(str(cat.get("key", ""))))
        table.add_row(*row)

    if table.row_count:
        console.print(table)
    else:
        console.print("  No developer caches found.")
    console.print()
    console.print(f"  Developer caches: [xc.size]{_size(d.get('developer_total'))}[/xc.size]")
    console.print(f"  Safe to reclaim:  [xc.ok]{_size(d.get('reclaimable'))}[/xc.ok]")
    if verbose:
        _render_meta(console, result)


# ── Scan renderer ─────────────────────────────────────────────────────


def _render_scan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render per-category scan results; verbose adds the item breakdown."""
    d = result.data
    categories = d.get("categories", [])

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="dim", no_wrap=True)
    table.add_column("Category", style="xc.title", no_wrap=True)
    table.add_column("Size", style="xc.size", justify="right", no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Risk", no_wrap=True)

    for cat in categories:
        table.add_row(
            Text(str(cat.get("key", ""))),
            Text(str(cat.get("name", ""))),
            _size(cat.get("size")) if cat.get("exists") else "—",
            str(cat.get("item_count", 0)),
            _risk_text(str(cat.get("risk", ""))),
        )
    console.print(table)

    if verbose:
        for cat in categories:
            items = cat.get("items") or []
            if not items:
                continue
            console.print(f"\n[bold]{escape(str(cat.get('name')))}[/bold]")
            for item in items:
                age = item.get("age_days")
                age_txt = f"  {age}d old" if age is not None else ""
                console.print(
                    f"  [xc.size]{_size(item.get('size')):>10}[/xc.size]  {escape(str(item.get('name')))}{age_txt}"
                )

    filters = d.get("filters") or {}
    notes: list[str] = []
    if filters.get("older_than_days"):
        notes.append(f"older than {filters['older_than_days']} days")
    if filters.get("min_size"):
        notes.append(f"at least {_size(filters['min_size'])}")
    console.print()
    suffix = f" ({', '.join(notes)})" if notes else ""
    console.print(
        f"Total: [xc.size]{_size(d.get('total_size'))}[/xc.size] in "
        f"{d.get('total_items', 0)} items{suffix}"
    )
    console.print(f"Safe to reclaim: [xc.ok]{_size(d.get('reclaimable'))}[/xc.ok]")
    if verbose:
        _render_meta(console, result)


# ── Clean renderer ────────────────────────────────────────────────────


def _render_clean(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    dry_run = bool(d.get("dry_run"))
    if dry_run:
        console.print(Text("DRY RUN", style="xc.dry"), Text("  nothing was removed"))
    else:
        _status_line(console, result)

    for cat in d.get("categories", []):
        if not cat.get("items_removed") and not verbose:
            continue
        console.print(
            f"  {escape(str(cat.get('name')))}: [xc.size]{_size(cat.get('bytes_freed'))}[/xc.size] "
            f"({cat.get('items_removed', 0)} items)"
        )
        if verbose:
            for path in cat.get("items", []):
                console.print(f"    [xc.path]{escape(path)}[/xc.path]")

    verb = "Would free" if dry_run else "Freed"
    if not dry_run and d.get("mode") == "trash":
        verb = "Moved to Trash"
    console.print()
    console.print(
        f"{verb}: [xc.ok]{_size(d.get('bytes_freed'))}[/xc.ok] "
        f"from {d.get('items_removed', 0)} items"
    )

    failed = d.get("failed") or []
    if failed:
        console.print(f"[xc.warning]{len(failed)} items could not be removed[/xc.warning]")
        if verbose:
            for f in failed:
                console.print(f"  {escape(str(f.get('path')))}: {escape(str(f.get('error')))}")
    if verbose:
        if d.get("run_id") is not None:
            _field(console, "run_id", d["run_id"])
        _render_meta(console, result)


# ── Category list renderer ────────────────────────────────────────────


def _render_categories(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", no_wrap=True)
    table.add_column("Name", style="xc.title", no_wrap=True)
    table.add_column("Risk", no_wrap=True)
    table.add_column("Description" if not verbose else "Paths")

    for item in result.data.get("items", []):
        name = str(item.get("name", ""))
        if item.get("excluded"):
            name += " (excluded)"
        detail = (
            "\n".join(item.get("paths", [])) if verbose else str(item.get("description", ""))
        )
        table.add_row(
            Text(str(item.get("key", ""))),
            Text(name),
            _risk_text(str(item.get("risk", ""))),
            Text(detail),
        )
    console.print(table)


# ── History renderers ─────────────────────────────────────────────────


def _render_history(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    runs = d.get("runs", [])
    if not runs:
        console.print("No cleanups recorded yet.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Run", justify="right", no_wrap=True)
    table.add_column("Finished", no_wrap=True)
    table.add_column("Mode", no_wrap=True)
    table.add_column("Freed", style="xc.size", justify="right", no_wrap=True)
    table.add_column("Items", justify="right")
    table.add_column("Categories")

    for run in runs:
        table.add_row(
            str(run.get("id", "")),
            str(run.get("finished", "")),
            str(run.get("mode", "")),
            _size(run.get("bytes_freed")),
            str(run.get("items_removed", 0)),
            Text(", ".join(run.get("categories", []))),
        )
    console.print(table)

    totals = d.get("totals") or {}
    console.print()
    console.print(
        f"All time: [xc.ok]{_size(totals.get('bytes_freed'))}[/xc.ok] freed "
        f"in {totals.get('runs', 0)} runs"
    )


def _render_history_run(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    for key in ("id", "started", "finished", "mode"):
        _field(console, key, d.get(key, ""))
    _field(console, "freed", _size(d.get("bytes_freed")))
    console.print()
    for item in d.get("items", []):
        console.print(
            f"  [xc.size]{_size(item.get('bytes')):>10}[/xc.size]  "
            f"[dim]{escape(str(item.get('category')))}[/dim]  {escape(str(item.get('path')))}"
        )


def _render_history_clear(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "runs_removed", result.data.get("runs_removed", 0))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
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
    "status": _render_status,
    "scan": _render_scan,
    "clean": _render_clean,
    "list_categories": _render_categories,
    "history": _render_history,
    "history_run": _render_history_run,
    "history_clear": _render_history_clear,
}
