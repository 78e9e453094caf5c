"""RenderService — emit the document in a display format.

``markdown`` is the identity: the loaded text comes back untouched and the
artifact's bytes, not a re-encoding of them, are what get written.
The other formats change presentation only. Code blocks are copied
through as opaque text in every format, and no format embeds timestamps,
so rendering the same document twice gives the same output.
"""

from __future__ import annotations

import logging
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, get_args

from markupsafe import Markup
from rich.console import Console
from rich.markdown import Markdown

from sqlsheet.config.models import RenderFormat
from sqlsheet.domain.document import Block, CodeBlock, Document, anchor_for, split_lines
from sqlsheet.domain.markup import inline_to_html, inline_to_plain, prose_to_html
from sqlsheet.infrastructure.loader import DocumentLoadError
from sqlsheet.infrastructure.templates import build_template_environment
from sqlsheet.services.base import BaseService
from sqlsheet.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

FORMATS: tuple[str, ...] = get_args(RenderFormat)
HTML_TEMPLATE = "document.html.j2"

_UNDERLINES = {1: "=", 2: "-"}


# ---------------------------------------------------------------------------
# Format renderers
# ---------------------------------------------------------------------------


def render_markdown(document: Document) -> str:
    return document.text


def _text_block(block: Block) -> str:
    if isinstance(block, CodeBlock):
        return "\n".join(f"    {line}" if line else "" for line in block.text.split("\n"))
    return "\n".join(inline_to_plain(line) for line in block.text.split("\n"))


def render_text(document: Document) -> str:
    """Plain text: underlined headings, inline markup removed, code indented."""
    chunks = [_text_block(block) for block in document.preamble]
    for section in document.sections:
        heading = inline_to_plain(section.title)
        underline = _UNDERLINES.get(section.level)
        if underline:
            heading = f"{heading}\n{underline * max(len(heading), 3)}"
        chunks.append(heading)
        chunks.extend(_text_block(block) for block in section.blocks)
    return "\n\n".join(chunks) + "\n" if chunks else ""


def _html_blocks(blocks: Iterable[Block]) -> Markup:
    parts: list[Markup] = []
    for block in blocks:
        if isinstance(block, CodeBlock):
            cls = Markup(' class="language-{}"').format(block.language) if block.language else ""
            parts.append(Markup("<pre><code{}>{}</code></pre>").format(cls, block.text))
        else:
            parts.append(prose_to_html(block.text))
    return Markup("\n").join(parts)


def _unique_anchors(titles: Iterable[str]) -> list[str]:
    seen: dict[str, int] = {}
    anchors: list[str] = []
    for title in titles:
        base = anchor_for(title)
        n = seen.get(base, 0)
        anchors.append(base if n == 0 else f"{base}-{n}")
        seen[base] = n + 1
    return anchors


def render_html(
    document: Document,
    *,
    title: str,
    toc: bool = True,
    charset: str = "utf-8",
    project_root: Path | None = None,
) -> str:
    """A standalone HTML page from the ``html`` template group."""
    anchors = _unique_anchors(s.title for s in document.sections)
    sections = [
        {
            "anchor": anchor,
            "level": section.level,
            "title": inline_to_html(section.title),
            "body": _html_blocks(section.blocks),
        }
        for anchor, section in zip(anchors, document.sections, strict=True)
    ]
    env = build_template_environment("html", project_root=project_root)
    return env.get_template(HTML_TEMPLATE).render(
        title=title,
        charset=charset,
        toc=toc and len(sections) > 1,
        preamble=_html_blocks(document.preamble),
        sections=sections,
    )


def render_terminal(document: Document, *, width: int = 100, color: bool = False) -> str:
    """Rich's markdown rendering, captured as a string.

    With *color* the output uses the 16-color ANSI palette regardless of
    ``TERM``, so the same document always renders to the same bytes.
    """
    body = "\n".join(split_lines(document.text)[document.body_line - 1 :])
    buffer = StringIO()
    console = Console(
        file=buffer,
        width=width,
        force_terminal=color,
        color_system="standard" if color else None,
        no_color=not color,
        highlight=False,
    )
    console.print(Markdown(body, hyperlinks=False))
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# RenderService
# ---------------------------------------------------------------------------


class RenderService(BaseService):
    """Render the source document to markdown, text, HTML or terminal output."""

    def render(
        self,
        fmt: str | None = None,
        *,
        output: Path | None = None,
        color: bool = False,
    ) -> ServiceResult:
        """Render in *fmt* (default: ``[render] format``).

        Args:
            fmt: One of :data:`FORMATS`.
            output: Write the rendering here instead of returning it.
            color: Emit ANSI styles for the ``terminal`` format.
        """
        cfg = self.settings.render
        fmt = fmt or cfg.format
        if fmt not in FORMATS:
            return ServiceResult(
                ok=False,
                op="render",
                error=ServiceError(
                    code="UNKNOWN_FORMAT",
                    message=f"Unknown format {fmt!r}; expected one of {', '.join(FORMATS)}",
                    detail={"format": fmt},
                ),
            )

        try:
            raw, document = self._source.load_raw()
        except DocumentLoadError as exc:
            return self._load_failure("render", exc)

        if fmt == "markdown":
            rendered = render_markdown(document)
        elif fmt == "text":
            rendered = render_text(document)
        elif fmt == "html":
            rendered = render_html(
                document,
                title=cfg.html_title or document.title or self._source.name,
                toc=cfg.toc,
                charset=self._source.encoding,
                project_root=self.settings.project_root,
            )
        else:
            rendered = render_terminal(document, width=cfg.width, color=color)
        logger.debug("Rendered %s as %s (%d chars)", self._source.name, fmt, len(rendered))

        # markdown is the identity: the artifact's own bytes, never re-encoded
        verbatim = raw if fmt == "markdown" else None
        data: dict[str, object] = {"source": self._source.name, "format": fmt}
        if output is None:
            data["text"] = rendered
            return ServiceResult(ok=True, op="render", data=data, meta=self._meta(), raw=verbatim)

        encoded = verbatim
        if encoded is None:
            encoded = rendered.encode(self._source.encoding, errors="replace")
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_bytes(encoded)
        except OSError as exc:
            return ServiceResult(
                ok=False,
                op="render",
                error=ServiceError(
                    code="WRITE_FAILED",
                    message=f"Cannot write {output}: {exc.strerror or exc}",
                    detail={"path": str(output)},
                ),
                meta=self._meta(),
            )
        data.update({"output_file": str(output), "bytes": len(encoded)})
        return ServiceResult(ok=True, op="render", data=data, meta=self._meta())
