"""Root CLI group for xcclean with global flags and command registration."""

from __future__ import annotations

import sys

import click

from xcclean import __version__
from xcclean.commands import register_commands
from xcclean.commands._base import XcGroup
from xcclean.commands._context import AppContext
from xcclean.config.settings import XcSettings


def _stdin_is_tty() -> bool:
    return sys.stdin.isatty()


@click.group(
    cls=XcGroup,
    invoke_without_command=True,
    examples="""\
  xcclean                         # interactive mode
  xcclean status
  xcclean scan
  xcclean clean --all --dry-run
  xcclean clean derived_data --yes""",
)
@click.version_option(
    version=__version__,
    prog_name="xcclean",
    message="%(prog)s version %(version)s",
)
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("--no-interact", is_flag=True, help="Non-interactive mode (no prompts).")
@click.option("--no-color", is_flag=True, help="Disable colored output.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    no_interact: bool,
    no_color: bool,
    config_path: str | None,
) -> None:
    """xcclean — Xcode Storage Cleaner.

    Clean DerivedData, Archives, Device Support, simulators, and more.
    Run without a command for interactive mode.
    """
    settings = XcSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
        no_interact=no_interact,
        no_color=no_color,
    )
    app = AppContext(settings)
    ctx.obj = app
    ctx.call_on_close(app.close)

    if ctx.invoked_subcommand is None:
        if app.can_prompt and _stdin_is_tty():
            from xcclean.commands.interactive import run_interactive

            run_interactive(app)
        else:
            click.echo(ctx.get_help())


register_commands(cli)


def main() -> None:
    cli(prog_name="xcclean")
