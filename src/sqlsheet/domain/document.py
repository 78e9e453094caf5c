"""Document model — the cheat sheet as an ordered sequence of sections.

Parsing is structural only. Section boundaries come from ATX heading
markers (``#`` to ``######``), fenced code blocks are delimited by runs of
three or more backticks or tildes, and everything else is prose. The SQL
inside code blocks is opaque text: nothing here looks at it.

The untouched source is kept on :attr:`Document.text` so that callers who
want the artifact as written never see a re-serialized copy.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from sqlsheet.domain.frontmatter import DocumentMeta, parse_meta, split_frontmatter

_HEADING_RE = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?[ \t]*$")
_CLOSING_HASHES_RE = re.compile(r"(?:^|[ \t]+)#+[ \t]*$")
_FENCE_OPEN_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")
_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")
_ANCHOR_STRIP_RE = re.compile(r"[^\w\- ]+")

DEFAULT_LICENSE_PATTERN = r"\blicen[cs]e[ds]?\b"
DEFAULT_CREDITS_PATTERN = r"\b(credits?|acknowledg(e)?ments?|thanks)\b"


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class Prose(BaseModel):
    """A run of non-blank prose lines, kept verbatim."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["prose"] = "prose"
    text: str
    line: int


class CodeBlock(BaseModel):
    """A fenced code block. ``text`` excludes the fence lines."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["code"] = "code"
    info: str = ""
    text: str
    line: int
    fence: str = "```"
    closed: bool = True

    @property
    def language(self) -> str:
        """First word of the info string, lowercased (``""`` if none)."""
        return self.info.split()[0].lower() if self.info.strip() else ""


Block = Annotated[Prose | CodeBlock, Field(discriminator="kind")]


class Section(BaseModel):
    """A titled block of prose and code, identified by its position."""

    model_config = ConfigDict(frozen=True)

    index: int
    title: str
    level: int
    line: int
    blocks: list[Block] = Field(default_factory=list)

    @property
    def code_blocks(self) -> list[CodeBlock]:
        return [b for b in self.blocks if isinstance(b, CodeBlock)]

    @property
    def is_empty(self) -> bool:
        return not self.blocks


class Document(BaseModel):
    """A parsed cheat sheet.

    Attributes:
        text: The decoded source exactly as loaded.
        body_line: First source line after any frontmatter block (1-based).
        meta: Frontmatter metadata (empty when the document has none).
        preamble: Blocks that appear before the first heading.
        sections: Every heading-delimited section, in source order.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    body_line: int = 1
    meta: DocumentMeta = Field(default_factory=DocumentMeta)
    preamble: list[Block] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)

    @property
    def title(self) -> str | None:
        """Frontmatter ``title``, else the first level-1 heading."""
        if self.meta.title:
            return self.meta.title
        for section in self.sections:
            if section.level == 1:
                return section.title
        return None

    def iter_blocks(self) -> Iterator[tuple[Section | None, Block]]:
        """Yield ``(owning_section, block)`` pairs in source order."""
        for block in self.preamble:
            yield None, block
        for section in self.sections:
            for block in section.blocks:
                yield section, block

    def iter_code_blocks(self) -> Iterator[tuple[Section | None, CodeBlock]]:
        for section, block in self.iter_blocks():
            if isinstance(block, CodeBlock):
                yield section, block

    @property
    def code_blocks(self) -> list[CodeBlock]:
        return [block for _, block in self.iter_code_blocks()]

    def find_line(self, pattern: str) -> str | None:
        """Return the first prose line matching *pattern* (case-insensitive)."""
        regex = re.compile(pattern, re.IGNORECASE)
        for _, block in self.iter_blocks():
            if not isinstance(block, Prose):
                continue
            for line in block.text.split("\n"):
                if regex.search(line):
                    return line.strip()
        return None

    def license_line(self, pattern: str = DEFAULT_LICENSE_PATTERN) -> str | None:
        return self.meta.license or self.find_line(pattern)

    def credits_line(self, pattern: str = DEFAULT_CREDITS_PATTERN) -> str | None:
        return self.meta.credits or self.find_line(pattern)

    def find_section(self, key: str) -> Section | None:
        """Look a section up by 0-based index or by title (case-insensitive)."""
        if key.isdecimal():
            idx = int(key)
            return self.sections[idx] if idx < len(self.sections) else None
        wanted = key.strip().casefold()
        for section in self.sections:
            if section.title.casefold() == wanted:
                return section
        return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def split_lines(text: str) -> list[str]:
    """Split on ``\\n``, ``\\r\\n`` and ``\\r`` only.

    ``str.splitlines`` also breaks on form feeds and Unicode separators,
    which would shift reported line numbers.
    """
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def heading_title(raw: str | None) -> str:
    """Strip an optional closing ``#`` run from a heading's text."""
    if not raw:
        return ""
    return _CLOSING_HASHES_RE.sub("", raw).strip()


def anchor_for(title: str) -> str:
    """GitHub-style anchor slug for a heading title."""
    slug = _ANCHOR_STRIP_RE.sub("", title.strip().lower())
    return slug.replace(" ", "-") or "section"


def _strip_indent(line: str, width: int) -> str:
    n = 0
    while n < width and n < len(line) and line[n] == " ":
        n += 1
    return line[n:]


def _is_fence_close(line: str, marker: str) -> bool:
    m = _FENCE_CLOSE_RE.match(line)
    if m is None:
        return False
    run = m.group(1)
    return run[0] == marker[0] and len(run) >= len(marker)


class _SectionDraft:
    """Mutable accumulator for one section while the parser walks lines."""

    def __init__(self, title: str, level: int, line: int) -> None:
        self.title = title
        self.level = level
        self.line = line
        self.blocks: list[Any] = []


def parse_document(text: str) -> Document:
    """Parse decoded markup into a :class:`Document`.

    Never fails: any text is a valid document, possibly with no sections
    and no code blocks.
    """
    lines = split_lines(text)
    raw_meta, consumed = split_frontmatter(lines)

    preamble: list[Any] = []
    drafts: list[_SectionDraft] = []
    prose: list[str] = []
    prose_start = 0

    def target() -> list[Any]:
        return drafts[-1].blocks if drafts else preamble

    def flush_prose() -> None:
        if prose:
            target().append(Prose(text="\n".join(prose), line=prose_start))
            prose.clear()

    i = consumed
    while i < len(lines):
        line = lines[i]
        lineno = i + 1

        fence = _FENCE_OPEN_RE.match(line)
        if fence and not (fence.group(2)[0] == "`" and "`" in fence.group(3)):
            flush_prose()
            indent, marker, info = fence.groups()
            body: list[str] = []
            closed = False
            j = i + 1
            while j < len(lines):
                if _is_fence_close(lines[j], marker):
                    closed = True
                    break
                body.append(_strip_indent(lines[j], len(indent)))
                j += 1
            target().append(
                CodeBlock(
                    info=info.strip(),
                    text="\n".join(body),
                    line=lineno,
                    fence=marker,
                    closed=closed,
                )
            )
            i = j + 1
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            flush_prose()
            drafts.append(
                _SectionDraft(heading_title(heading.group(2)), len(heading.group(1)), lineno)
            )
        elif line.strip():
            if not prose:
                prose_start = lineno
            prose.append(line)
        else:
            flush_prose()
        i += 1

    flush_prose()

    sections = [
        Section(index=idx, title=d.title, level=d.level, line=d.line, blocks=d.blocks)
        for idx, d in enumerate(drafts)
    ]
    return Document(
        text=text,
        body_line=consumed + 1,
        meta=parse_meta(raw_meta),
        preamble=preamble,
        sections=sections,
    )
