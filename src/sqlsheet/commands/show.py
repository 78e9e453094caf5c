"""Command: write the artifact to stdout unchanged."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sqlsheet.commands._base import SheetCommand, document_argument

if TYPE_CHECKING:
    from sqlsheet.commands._context import AppContext


@click.command(
    cls=SheetCommand,
    examples="""\
  sqlsheet show
  sqlsheet show docs/sql.md
  cat sql.md | sqlsheet show -
  sqlsheet --json show""",
)
@document_argument
@click.pass_obj
def show(app: AppContext, path: str | None) -> None:
    """Print the document exactly as stored."""
    from sqlsheet.services.document import DocumentService

    app.emit_text(DocumentService(app.source(path)).show())
