"""Click building blocks shared by every xcclean command.

* ``--examples``: commands declared with ``examples=...`` grow an eager
  flag that prints them and exits, so ``--help`` stays short. Their help
  text ends with a pointer to the flag.
* ``SIZE``: parameter type for ``--min-size`` style options.
"""

from __future__ import annotations

from typing import Any

import click

_EXAMPLES_HINT = "Run with --examples to see usage examples."


class _ExamplesMixin:
    """Adds the ``examples`` keyword to a Click command class."""

    params: list[click.Parameter]
    examples: str | None

    def _install_examples(self, examples: str | None) -> None:
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or not self.examples:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(self.examples)
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(_EXAMPLES_HINT)


class XcCommand(_ExamplesMixin, click.Command):
    """A command that may carry ``examples``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class XcGroup(_ExamplesMixin, click.Group):
    """The root group. Subcommands default to :class:`XcCommand`."""

    command_class = XcCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._install_examples(examples)


class SizeParamType(click.ParamType):
    """Sizes like ``500MB`` or ``1.5G``, converted to bytes."""

    name = "size"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> int:
        if isinstance(value, int):
            return value
        from xcclean.domain.sizes import parse_size

        try:
            return parse_size(str(value))
        except ValueError as exc:
            self.fail(str(exc), param, ctx)


SIZE = SizeParamType()
