"""DocumentService — the artifact as written, its outline and its snippets."""

from __future__ import annotations

import hashlib
from typing import Any

from sqlsheet.infrastructure.loader import DocumentLoadError, decode
from sqlsheet.services.base import BaseService
from sqlsheet.services.result import ServiceError, ServiceResult


class DocumentService(BaseService):
    """Read-only views over one document."""

    def show(self) -> ServiceResult:
        """Return the artifact's text exactly as stored.

        ``sha256`` and ``bytes`` describe the raw bytes read, so a consumer
        can confirm the text it writes back out is unaltered. The bytes
        themselves ride along in ``raw`` for writers that must not re-encode.
        """
        try:
            raw = self._source.read_bytes()
            text = decode(raw, encoding=self._source.encoding, name=self._source.name)
        except DocumentLoadError as exc:
            return self._load_failure("show", exc)

        return ServiceResult(
            ok=True,
            op="show",
            data={
                "source": self._source.name,
                "encoding": self._source.encoding,
                "bytes": len(raw),
                "sha256": hashlib.sha256(raw).hexdigest(),
                "text": text,
            },
            meta=self._meta(),
            raw=raw,
        )

    def sections(self, *, level: int | None = None) -> ServiceResult:
        """List section boundaries in source order.

        Args:
            level: Only include headings at this depth or shallower.
        """
        try:
            document = self._source.load()
        except DocumentLoadError as exc:
            return self._load_failure("sections", exc)

        items: list[dict[str, Any]] = [
            {
                "index": s.index,
                "level": s.level,
                "line": s.line,
                "title": s.title,
                "code_blocks": len(s.code_blocks),
            }
            for s in document.sections
            if level is None or s.level <= level
        ]
        return ServiceResult(
            ok=True,
            op="sections",
            data={
                "source": self._source.name,
                "title": document.title,
                "items": items,
                "count": len(items),
                "total": len(document.sections),
            },
            meta=self._meta(),
        )

    def snippets(
        self,
        *,
        section: str | None = None,
        language: str | None = None,
    ) -> ServiceResult:
        """List fenced code blocks verbatim, optionally narrowed.

        Args:
            section: Section index or title; only its code blocks are listed.
            language: Keep blocks whose info-string language matches.
        """
        try:
            document = self._source.load()
        except DocumentLoadError as exc:
            return self._load_failure("snippets", exc)

        wanted = None
        if section is not None:
            wanted = document.find_section(section)
            if wanted is None:
                return ServiceResult(
                    ok=False,
                    op="snippets",
                    error=ServiceError(
                        code="NOT_FOUND",
                        message=f"No section matches {section!r}",
                        detail={"section": section, "sections": len(document.sections)},
                    ),
                    meta=self._meta(),
                )

        lang = language.lower() if language else None
        items: list[dict[str, Any]] = []
        for owner, block in document.iter_code_blocks():
            if wanted is not None and (owner is None or owner.index != wanted.index):
                continue
            if lang is not None and block.language != lang:
                continue
            items.append(
                {
                    "section": owner.title if owner else None,
                    "section_index": owner.index if owner else None,
                    "language": block.language,
                    "line": block.line,
                    "text": block.text,
                }
            )

        warnings: list[str] = []
        if not items:
            warnings.append("No code blocks matched")
        return ServiceResult(
            ok=True,
            op="snippets",
            data={"source": self._source.name, "items": items, "count": len(items)},
            warnings=warnings,
            meta=self._meta(),
        )

