"""Subcommand modules for xcclean.

Provides register_commands() which uses deferred imports to keep
``xcclean --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all commands on the root CLI group."""
    from xcclean.commands.categories import list_cmd
    from xcclean.commands.clean import clean
    from xcclean.commands.completions import completions
    from xcclean.commands.history import history
    from xcclean.commands.interactive import interactive
    from xcclean.commands.scan import scan
    from xcclean.commands.status import status

    cli.add_command(status)
    cli.add_command(scan)
    cli.add_command(clean)
    cli.add_command(list_cmd)
    cli.add_command(history)
    cli.add_command(interactive)
    cli.add_command(completions)
