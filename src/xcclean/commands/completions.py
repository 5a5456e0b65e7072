"""Command: print shell completion scripts."""

from __future__ import annotations

import click
from click.shell_completion import get_completion_class

from xcclean.commands._base import XcCommand

PROG_NAME = "xcclean"
COMPLETE_VAR = "_XCCLEAN_COMPLETE"
SHELLS = ("bash", "zsh", "fish")


def completion_source(cli: click.Command, shell: str) -> str:
    """Return the completion script for *shell*."""
    comp_cls = get_completion_class(shell)
    if comp_cls is None:
        msg = f"Unsupported shell: {shell}"
        raise click.BadParameter(msg)
    return comp_cls(cli, {}, PROG_NAME, COMPLETE_VAR).source()


@click.command(
    cls=XcCommand,
    examples="""\
  xcclean completions bash > $(brew --prefix)/etc/bash_completion.d/xcclean
  xcclean completions zsh > "${fpath[1]}/_xcclean"
  xcclean completions fish > ~/.config/fish/completions/xcclean.fish""",
)
@click.argument("shell", type=click.Choice(SHELLS))
@click.pass_context
def completions(ctx: click.Context, shell: str) -> None:
    """Print the completion script for SHELL."""
    click.echo(completion_source(ctx.find_root().command, shell))
