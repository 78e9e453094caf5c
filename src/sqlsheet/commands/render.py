"""Command: render the document as markdown, text, HTML or terminal output."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from sqlsheet.commands._base import SheetCommand, document_argument

if TYPE_CHECKING:
    from sqlsheet.commands._context import AppContext


@click.command(
    cls=SheetCommand,
    examples="""\
  sqlsheet render --format text
  sqlsheet render --format html --output site/index.html
  sqlsheet render docs/sql.md --format terminal --color""",
)
@document_argument
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(["markdown", "text", "html", "terminal"], case_sensitive=False),
    default=None,
    help="Output format (default: [render] format, else markdown).",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)
@click.option(
    "--color/--no-color",
    default=None,
    help="ANSI styles for terminal format (default: when stdout is a TTY).",
)
@click.pass_obj
def render(
    app: AppContext,
    path: str | None,
    fmt: str | None,
    output: Path | None,
    color: bool | None,
) -> None:
    """Render the document in a display format."""
    from sqlsheet.services.render import RenderService

    if color is None:
        color = output is None and click.get_text_stream("stdout").isatty()
    result = RenderService(app.source(path)).render(
        fmt.lower() if fmt else None,
        output=output,
        color=color,
    )
    app.emit_text(result)
