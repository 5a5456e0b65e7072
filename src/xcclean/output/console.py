"""Rich Console factory and theme for xcclean output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

XC_THEME = Theme(
    {
        "xc.ok": "bold green",
        "xc.error": "bold red",
        "xc.warning": "bold yellow",
        "xc.op": "bold cyan",
        "xc.key": "dim",
        "xc.title": "bold",
        "xc.path": "dim",
        "xc.size": "magenta",
        "xc.risk.safe": "green",
        "xc.risk.caution": "yellow",
        "xc.dry": "bold yellow",
    }
)

_RISK_STYLES: dict[str, str] = {
    "safe": "xc.risk.safe",
    "caution": "xc.risk.caution",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=XC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 100,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_risk(risk: str) -> str:
    return _RISK_STYLES.get(risk, "")
