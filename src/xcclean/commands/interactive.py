"""Command: interactive menu (also what bare ``xcclean`` runs in a terminal)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext

PROMPT = "Select categories to clean (e.g. 1,3 or 2-5; a = all safe; q = quit)"


def run_interactive(app: AppContext) -> None:
    """Overview → pick categories → preview → confirm → clean, until quit."""
    from xcclean.domain.selection import parse_selection
    from xcclean.domain.sizes import format_bytes
    from xcclean.services.clean import CleanService
    from xcclean.services.status import StatusService

    cleaner = CleanService(app.env)

    while True:
        overview = StatusService(app.env).status()
        click.echo(app.render(overview))

        rows = overview.data["categories"]
        click.echo("\nCategories:")
        for i, row in enumerate(rows, start=1):
            risk = "" if row["risk"] == "safe" else f"  ({row['risk']})"
            click.echo(f"  {i:>2}. {row['name']:<26} {format_bytes(row['size']):>10}{risk}")
        click.echo()

        raw = click.prompt(PROMPT, default="q", show_default=False)
        try:
            selection = parse_selection(
                raw,
                len(rows),
                safe=[i for i, row in enumerate(rows) if row["risk"] == "safe"],
            )
        except ValueError as exc:
            click.echo(f"ERROR: {exc}", err=True)
            continue
        if selection.quit:
            return
        if not selection.indices:
            continue

        keys = [rows[i]["key"] for i in selection.indices]
        preview = cleaner.clean(keys, dry_run=True)
        click.echo(app.render(preview))
        if not preview.data.get("items_removed"):
            click.echo("Nothing to clean.")
            continue
        if not click.confirm("Proceed?", default=False):
            continue

        result = cleaner.clean(keys)
        click.echo(app.render(result))
        for warning in result.warnings:
            click.echo(f"WARNING: {warning}", err=True)
        if not click.confirm("Clean something else?", default=False):
            return


@click.command(cls=XcCommand)
@click.pass_obj
def interactive(app: AppContext) -> None:
    """Pick categories to clean from a menu."""
    if not app.can_prompt:
        raise click.UsageError("Interactive mode is unavailable with --json or --no-interact.")
    run_interactive(app)
