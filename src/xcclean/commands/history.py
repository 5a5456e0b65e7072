"""Command: browse or clear cleanup history."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext


@click.command(
    cls=XcCommand,
    examples="""\
  xcclean history
  xcclean history --limit 50
  xcclean history --run 12
  xcclean history --clear --yes""",
)
@click.option("--limit", type=click.IntRange(min=1), default=10, help="Number of runs to show.")
@click.option("--run", "run_id", type=int, default=None, help="Show the items removed by one run.")
@click.option("--clear", is_flag=True, help="Delete all recorded history.")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def history(app: AppContext, limit: int, run_id: int | None, clear: bool, yes: bool) -> None:
    """Show past cleanups and the space they freed."""
    from xcclean.services.history import HistoryService

    svc = HistoryService(app.env)
    if clear:
        app.require_confirmation("history_clear", "Delete all cleanup history?", yes=yes)
        app.emit(svc.clear())
    elif run_id is not None:
        app.emit(svc.show(run_id))
    else:
        app.emit(svc.history(limit=limit))
