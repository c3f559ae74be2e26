"""Rich Console factory and theme for almanac output.

Consoles render to a StringIO buffer so formatters keep returning ``str``.
In non-TTY environments (tests, pipes) Rich disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

ALMANAC_THEME = Theme(
    {
        "almanac.ok": "bold green",
        "almanac.error": "bold red",
        "almanac.op": "bold cyan",
        "almanac.key": "dim",
        "almanac.answer": "bold",
        "almanac.stage": "cyan",
        "almanac.value": "magenta",
        "almanac.line": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=ALMANAC_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
