"""Byte-level loading of the artifact from a path or a stream.

INVARIANT: a load either returns every byte of the source or raises.
A partial buffer is never handed back as if it were the document.

Only two failure modes exist: the source is absent
(:class:`DocumentNotFoundError`) or it cannot be fully consumed
(:class:`DocumentReadError`). There are no retries; reading an immutable
file twice gives the same answer.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path
from typing import BinaryIO

from sqlsheet.domain.document import Document, parse_document

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024


class DocumentLoadError(Exception):
    """Base for load failures. ``code`` is the service-level error code."""

    code = "LOAD_FAILED"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class DocumentNotFoundError(DocumentLoadError):
    """The source path does not exist."""

    code = "NOT_FOUND"


class DocumentReadError(DocumentLoadError):
    """The source exists but could not be read completely."""

    code = "READ_ERROR"


def load_bytes(path: Path) -> bytes:
    """Read *path* completely.

    Raises:
        DocumentNotFoundError: *path* does not exist.
        DocumentReadError: *path* is not a regular file, permission is
            denied, or fewer bytes arrive than the file held when opened.
    """
    display = str(path)
    try:
        fh = path.open("rb")
    except FileNotFoundError as exc:
        msg = f"Document not found: {display}"
        raise DocumentNotFoundError(msg, path=display) from exc
    except IsADirectoryError as exc:
        msg = f"Not a file: {display}"
        raise DocumentReadError(msg, path=display) from exc
    except OSError as exc:
        msg = f"Cannot open {display}: {exc.strerror or exc}"
        raise DocumentReadError(msg, path=display) from exc

    with fh:
        try:
            info = os.fstat(fh.fileno())
            if stat.S_ISDIR(info.st_mode):
                msg = f"Not a file: {display}"
                raise DocumentReadError(msg, path=display)
            data = _read_all(fh)
        except OSError as exc:
            msg = f"Read failed for {display}: {exc.strerror or exc}"
            raise DocumentReadError(msg, path=display) from exc

    if stat.S_ISREG(info.st_mode) and len(data) < info.st_size:
        msg = f"Truncated read of {display}: got {len(data)} of {info.st_size} bytes"
        raise DocumentReadError(msg, path=display)

    logger.debug("Loaded %d bytes from %s", len(data), display)
    return data


def load_stream(stream: BinaryIO, *, name: str = "<stream>") -> bytes:
    """Read a binary stream to EOF.

    Raises:
        DocumentReadError: the stream raised an I/O error before EOF.
    """
    try:
        data = _read_all(stream)
    except OSError as exc:
        msg = f"Read failed for {name}: {exc.strerror or exc}"
        raise DocumentReadError(msg, path=name) from exc
    logger.debug("Loaded %d bytes from %s", len(data), name)
    return data


def decode(data: bytes, *, encoding: str = "utf-8", name: str | None = None) -> str:
    """Decode loaded bytes. Undecodable input is a :class:`DocumentReadError`."""
    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        msg = f"Cannot decode {name or 'document'} as {encoding}: {exc.reason} at byte {exc.start}"
        raise DocumentReadError(msg, path=name) from exc
    except LookupError as exc:
        msg = f"Unknown encoding: {encoding}"
        raise DocumentReadError(msg, path=name) from exc


def load_document(path: Path, *, encoding: str = "utf-8") -> Document:
    """Load, decode and parse the document at *path*."""
    return parse_document(decode(load_bytes(path), encoding=encoding, name=str(path)))


def _read_all(fh: BinaryIO) -> bytes:
    chunks: list[bytes] = []
    while True:
        chunk = fh.read(_CHUNK_SIZE)
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)
