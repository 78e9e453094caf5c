"""Command: list section boundaries in source order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sqlsheet.commands._base import SheetCommand, document_argument

if TYPE_CHECKING:
    from sqlsheet.commands._context import AppContext


@click.command(
    cls=SheetCommand,
    examples="""\
  sqlsheet sections
  sqlsheet sections --level 2
  sqlsheet --json sections docs/sql.md""",
)
@document_argument
@click.option(
    "-l",
    "--level",
    type=click.IntRange(1, 6),
    default=None,
    help="Only headings at this depth or shallower.",
)
@click.pass_obj
def sections(app: AppContext, path: str | None, level: int | None) -> None:
    """List the document's sections."""
    from sqlsheet.services.document import DocumentService

    app.emit(DocumentService(app.source(path)).sections(level=level))
