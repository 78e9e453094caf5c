"""Command: list fenced code blocks verbatim."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sqlsheet.commands._base import SheetCommand, document_argument

if TYPE_CHECKING:
    from sqlsheet.commands._context import AppContext


@click.command(
    cls=SheetCommand,
    examples="""\
  sqlsheet snippets
  sqlsheet snippets --section Joins
  sqlsheet snippets --section 3 --language sql""",
)
@document_argument
@click.option("-s", "--section", default=None, help="Section title or 0-based index.")
@click.option("--language", default=None, help="Only blocks tagged with this language.")
@click.pass_obj
def snippets(
    app: AppContext,
    path: str | None,
    section: str | None,
    language: str | None,
) -> None:
    """List the document's code blocks."""
    from sqlsheet.services.document import DocumentService

    app.emit(DocumentService(app.source(path)).snippets(section=section, language=language))
