"""AppContext — shared Click context for all commands.

Created once by the root CLI group and handed to subcommands via
``@click.pass_obj``. Builds document sources and centralizes result
emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sqlsheet.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from sqlsheet.config.settings import SheetSettings
    from sqlsheet.infrastructure.source import DocumentSource
    from sqlsheet.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: SheetSettings) -> None:
        self.settings = settings

        from sqlsheet.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    def source(self, path: str | None = None) -> DocumentSource:
        """A :class:`DocumentSource` for *path* (``-`` reads stdin)."""
        from sqlsheet.infrastructure.source import STDIN_MARKER, DocumentSource

        stdin = click.get_binary_stream("stdin") if path == STDIN_MARKER else None
        return DocumentSource(self.settings, path, stdin=stdin)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout. Warnings go to stderr outside JSON mode, where
          they are already part of the payload.
        * Failure: stderr, then exit with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def emit_text(self, result: ServiceResult) -> None:
        """Write a text payload to stdout byte-for-byte.

        Used by ``show`` and ``render``: no trailing newline is added. When
        the result carries the artifact's ``raw`` bytes they are written
        untouched, so a BOM or a UTF-16 byte order survives; other text is
        encoded with the document's encoding. JSON mode, failures and results
        without text fall back to :meth:`emit`.
        """
        if not result.ok or self.settings.json_output or "text" not in result.data:
            self.emit(result)
            return
        if result.raw is not None:
            click.echo(result.raw, nl=False)
            return
        encoding = result.data.get("encoding") or self.settings.document.encoding
        click.echo(str(result.data["text"]).encode(encoding, errors="replace"), nl=False)
