"""Command: remove cleanable items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import SIZE, XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext


@click.command(
    cls=XcCommand,
    examples="""\
  xcclean clean derived_data
  xcclean clean --all --dry-run
  xcclean clean --all --older-than 30 --yes
  xcclean clean archives --trash
  xcclean clean ios_device_support --min-size 1GB""",
)
@click.argument("categories", nargs=-1, metavar="[CATEGORY]...")
@click.option("--all", "all_safe", is_flag=True, help="Clean every safe category.")
@click.option("--dry-run", is_flag=True, help="Show what would be removed without removing it.")
@click.option(
    "--older-than",
    type=click.IntRange(min=0),
    default=None,
    metavar="DAYS",
    help="Only remove items not modified for DAYS days.",
)
@click.option("--min-size", type=SIZE, default=None, help="Only remove items at least this big.")
@click.option(
    "--trash/--delete",
    "trash",
    default=None,
    help="Move items to the Trash instead of deleting them (default from config).",
)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def clean(
    app: AppContext,
    categories: tuple[str, ...],
    all_safe: bool,
    dry_run: bool,
    older_than: int | None,
    min_size: int | None,
    trash: bool | None,
    yes: bool,
) -> None:
    """Remove items in the given categories (or --all safe categories).

    Caution categories such as archives are only cleaned when named.
    """
    from xcclean.domain.sizes import format_bytes
    from xcclean.services.clean import CleanService

    svc = CleanService(app.env)
    keys = list(categories) or None
    options = {
        "all_safe": all_safe,
        "older_than_days": older_than,
        "min_size": min_size,
        "trash": trash,
    }

    if dry_run:
        app.emit(svc.clean(keys, dry_run=True, **options))
        return

    if app.settings.clean.confirm and not yes:
        preview = svc.clean(keys, dry_run=True, **options)
        if not preview.ok:
            app.emit(preview)
        count = preview.data["items_removed"]
        if count:
            if app.can_prompt:
                click.echo(app.render(preview))
            verb = "Move" if preview.data["mode"] == "trash" else "Remove"
            app.require_confirmation(
                "clean",
                f"{verb} {count} items ({format_bytes(preview.data['bytes_freed'])})?",
                yes=False,
            )

    app.emit(svc.clean(keys, **options))
