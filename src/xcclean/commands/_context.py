"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy Environment initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from xcclean.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from xcclean.config.settings import XcSettings
    from xcclean.infrastructure.environment import Environment
    from xcclean.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The environment is created on first use so ``--help`` and
    ``--version`` never load plugins or open the history database.
    """

    def __init__(self, settings: XcSettings) -> None:
        self.settings = settings
        self._env: Environment | None = None

        from xcclean.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def env(self) -> Environment:
        """The environment (created lazily on first access)."""
        if self._env is None:
            from xcclean.infrastructure.environment import Environment

            self._env = Environment(self.settings)
        return self._env

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            no_color=self.settings.no_color,
        )

    @property
    def can_prompt(self) -> bool:
        """Whether interactive prompts are allowed."""
        return not self.settings.no_interact and not self.settings.json_output

    def render(self, result: ServiceResult) -> str:
        return format_result(result, settings=self.output_settings)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = self.render(result)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def require_confirmation(self, op: str, question: str, *, yes: bool) -> None:
        """Ask *question* unless *yes*; fail with CONFIRMATION_REQUIRED if prompts are off.

        Declining aborts the command (exit code 1).
        """
        if yes:
            return
        if not self.can_prompt:
            from xcclean.services.result import CONFIRMATION_REQUIRED, ServiceResult

            self.emit(
                ServiceResult.failure(
                    op,
                    CONFIRMATION_REQUIRED,
                    "Confirmation required in non-interactive mode; re-run with --yes",
                )
            )
        click.confirm(question, abort=True, err=True)

    def close(self) -> None:
        if self._env is not None:
            self._env.close()
