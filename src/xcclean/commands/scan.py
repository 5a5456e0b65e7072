"""Command: scan for cleanable items."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import SIZE, XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext


@click.command(
    cls=XcCommand,
    examples="""\
  xcclean scan
  xcclean scan -c derived_data -c archives
  xcclean scan --older-than 30
  xcclean scan --min-size 100MB
  xcclean -v scan                 # per-item breakdown
  xcclean --json scan""",
)
@click.option(
    "-c",
    "--category",
    "categories",
    multiple=True,
    metavar="KEY",
    help="Limit to a category (repeatable). See 'xcclean list'.",
)
@click.option(
    "--older-than",
    type=click.IntRange(min=0),
    default=None,
    metavar="DAYS",
    help="Only count items not modified for DAYS days.",
)
@click.option("--min-size", type=SIZE, default=None, help="Only count items at least this big.")
@click.pass_obj
def scan(
    app: AppContext,
    categories: tuple[str, ...],
    older_than: int | None,
    min_size: int | None,
) -> None:
    """Scan developer caches and report what can be cleaned."""
    from xcclean.services.scan import ScanService

    app.emit(
        ScanService(app.env).scan(
            list(categories) or None,
            older_than_days=older_than,
            min_size=min_size,
        )
    )
