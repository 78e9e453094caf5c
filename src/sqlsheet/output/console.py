"""Rich Console factory and theme for sqlsheet output.

Consoles render into a StringIO buffer so formatters can keep returning
plain strings. Outside a terminal (tests, pipes) Rich drops color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SHEET_THEME = Theme(
    {
        "sheet.ok": "bold green",
        "sheet.error": "bold red",
        "sheet.warning": "bold yellow",
        "sheet.op": "bold cyan",
        "sheet.key": "dim",
        "sheet.path": "dim",
        "sheet.title": "bold",
        "sheet.line": "magenta",
        "sheet.lang": "blue",
    }
)

_LEVEL_STYLES: dict[int, str] = {1: "bold", 2: "bold cyan", 3: "cyan"}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=SHEET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_level(level: int) -> str:
    """Rich style for a heading level in section listings."""
    return _LEVEL_STYLES.get(level, "")
