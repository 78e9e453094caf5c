"""Command: check the document against cheat-sheet conventions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sqlsheet.commands._base import SheetCommand, document_argument

if TYPE_CHECKING:
    from sqlsheet.commands._context import AppContext


@click.command(
    cls=SheetCommand,
    examples="""\
  sqlsheet check
  sqlsheet check docs/sql.md --strict
  sqlsheet --json check""",
)
@document_argument
@click.option("--strict", is_flag=True, help="Fail on warnings as well as errors.")
@click.pass_obj
def check(app: AppContext, path: str | None, strict: bool) -> None:
    """Report structural problems; exit 1 when any error is found."""
    from sqlsheet.services.check import CheckService

    result = CheckService(app.source(path)).check()
    app.emit(result)
    failing = result.data.get("error_count", 0)
    if strict:
        failing += result.data.get("warning_count", 0)
    if failing:
        raise SystemExit(1)
