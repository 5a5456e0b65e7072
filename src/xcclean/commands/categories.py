"""Command: list cleanable categories."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.commands._base import XcCommand

if TYPE_CHECKING:
    from xcclean.commands._context import AppContext


@click.command(
    "list",
    cls=XcCommand,
    examples="""\
  xcclean list
  xcclean -v list                 # show resolved paths""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List the categories xcclean can clean."""
    from xcclean.services.categories import CategoryService

    app.emit(CategoryService(app.env).list_categories())
