"""DocumentSource — where the artifact is read from.

The source is the single dependency injected into every service. It names
the document (explicit path, configured path, standard input, or the cheat
sheet bundled with the package) and performs the read on demand. File
sources are re-read on every call; nothing is cached, since the artifact
is immutable and concurrent readers need no coordination.
"""

from __future__ import annotations

import logging
import sys
from importlib.resources import as_file, files
from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO

from sqlsheet.domain.document import Document, parse_document
from sqlsheet.infrastructure.loader import decode, load_bytes, load_stream

if TYPE_CHECKING:
    from sqlsheet.config.settings import SheetSettings

logger = logging.getLogger(__name__)

STDIN_MARKER = "-"
BUILTIN_DOCUMENT = "sql-cheatsheet.md"


class DocumentSource:
    """Handle on one artifact.

    Resolution order for the document location:

    1. *path* passed by the caller (``-`` means standard input).
    2. ``[document] path`` from settings, relative to the project root.
    3. The cheat sheet bundled in ``sqlsheet/data``.
    """

    def __init__(
        self,
        settings: SheetSettings,
        path: str | Path | None = None,
        *,
        stdin: BinaryIO | None = None,
    ) -> None:
        self.settings = settings
        self._stdin = stdin
        self._stream_data: bytes | None = None

        if path is None and settings.document.path:
            path = settings.project_root / Path(settings.document.path).expanduser()

        self._is_stream = str(path) == STDIN_MARKER
        self._path: Path | None = None
        if path is not None and not self._is_stream:
            self._path = Path(path)

    @property
    def is_stream(self) -> bool:
        return self._is_stream

    @property
    def is_builtin(self) -> bool:
        return not self._is_stream and self._path is None

    @property
    def path(self) -> Path | None:
        """Filesystem path, or None for stdin and the bundled document."""
        return self._path

    @property
    def name(self) -> str:
        """Display name used in results and error messages."""
        if self._is_stream:
            return "<stdin>"
        if self._path is None:
            return f"builtin:{BUILTIN_DOCUMENT}"
        return str(self._path)

    @property
    def encoding(self) -> str:
        return self.settings.document.encoding

    def read_bytes(self) -> bytes:
        """Read the artifact's bytes. Raises ``DocumentLoadError`` subclasses."""
        if self._is_stream:
            # A stream can only be consumed once; keep what it gave us.
            if self._stream_data is None:
                stream = self._stdin if self._stdin is not None else sys.stdin.buffer
                self._stream_data = load_stream(stream, name=self.name)
            return self._stream_data
        if self._path is not None:
            return load_bytes(self._path)
        resource = files("sqlsheet").joinpath("data", BUILTIN_DOCUMENT)
        with as_file(resource) as builtin_path:
            return load_bytes(builtin_path)

    def read_text(self) -> str:
        return decode(self.read_bytes(), encoding=self.encoding, name=self.name)

    def load(self) -> Document:
        """Read and parse the artifact into a :class:`Document`."""
        return self.load_raw()[1]

    def load_raw(self) -> tuple[bytes, Document]:
        """Read once, returning the exact bytes alongside the parsed document."""
        raw = self.read_bytes()
        document = parse_document(decode(raw, encoding=self.encoding, name=self.name))
        logger.debug(
            "Parsed %s: %d sections, %d code blocks",
            self.name,
            len(document.sections),
            len(document.code_blocks),
        )
        return raw, document
