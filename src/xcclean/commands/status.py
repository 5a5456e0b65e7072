"""Command: the Mac Storage Overview."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext


@click.command(
    cls=XcCommand,
    examples="""\
  xcclean status
  xcclean -v status
  xcclean --json status""",
)
@click.pass_obj
def status(app: AppContext) -> None:
    """Show disk capacity and developer-cache usage."""
    from xcclean.services.status import StatusService

    app.emit(StatusService(app.env).status())
