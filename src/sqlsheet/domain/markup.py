"""Display-level markup of prose blocks.

Prose is split into paragraphs, lists, quotes, pipe tables and rules, and
inline spans (code, links, emphasis) can be reduced to plain text or
converted to escaped HTML. Code blocks never come through here.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from markupsafe import Markup, escape

if TYPE_CHECKING:
    from collections.abc import Callable

_LIST_ITEM_RE = re.compile(r"^ {0,3}([-*+]|\d{1,9}[.)])[ \t]+(.*)$")
_QUOTE_RE = re.compile(r"^ {0,3}>[ ]?(.*)$")
_RULE_RE = re.compile(r"^ {0,3}([-*_])(?:[ \t]*\1){2,}[ \t]*$")
_TABLE_DELIM_RE = re.compile(r"^[ \t]*\|?[ \t]*:?-+:?[ \t]*(\|[ \t]*:?-+:?[ \t]*)*\|?[ \t]*$")

_CODE_SPAN_RE = re.compile(r"(`+)(.+?)\1")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)\s]+)(?:\s+\"[^\"]*\")?\)|<(https?://[^>\s]+)>")
_LINK_TOKEN_RE = re.compile(r"\x00(\d+)\x00")
_STRONG_RE = re.compile(r"\*\*(.+?)\*\*|(?<!\w)__(.+?)__(?!\w)")
_EM_RE = re.compile(r"\*(?!\s)(.+?)(?<!\s)\*|(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)")

BlockKind = Literal["paragraph", "bullets", "numbered", "quote", "table", "rule"]


@dataclass
class ProsePart:
    """One display block inside a prose run."""

    kind: BlockKind
    lines: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)


def _split_row(line: str) -> list[str]:
    stripped = line.strip()
    if stripped.startswith("|"):
        stripped = stripped[1:]
    if stripped.endswith("|") and not stripped.endswith("\\|"):
        stripped = stripped[:-1]
    return [cell.strip().replace("\\|", "|") for cell in re.split(r"(?<!\\)\|", stripped)]


def split_prose(text: str) -> list[ProsePart]:
    """Classify the lines of one prose block into display parts."""
    lines = text.split("\n")
    parts: list[ProsePart] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        current = parts[-1] if parts else None

        if _RULE_RE.match(line):
            parts.append(ProsePart("rule"))
            i += 1
            continue

        if "|" in line and i + 1 < len(lines) and _TABLE_DELIM_RE.match(lines[i + 1]):
            table = ProsePart("table", rows=[_split_row(line)])
            i += 2
            while i < len(lines) and "|" in lines[i]:
                table.rows.append(_split_row(lines[i]))
                i += 1
            parts.append(table)
            continue

        item = _LIST_ITEM_RE.match(line)
        if item:
            kind: BlockKind = "bullets" if item.group(1) in "-*+" else "numbered"
            if current is None or current.kind != kind:
                current = ProsePart(kind)
                parts.append(current)
            current.lines.append(item.group(2))
            i += 1
            continue

        quote = _QUOTE_RE.match(line)
        if quote:
            if current is None or current.kind != "quote":
                current = ProsePart("quote")
                parts.append(current)
            current.lines.append(quote.group(1))
            i += 1
            continue

        if current is not None and current.kind in ("bullets", "numbered") and line[:1] in " \t":
            # Lazy continuation of the previous list item.
            current.lines[-1] = f"{current.lines[-1]} {line.strip()}"
        elif current is not None and current.kind == "paragraph":
            current.lines.append(line)
        else:
            parts.append(ProsePart("paragraph", lines=[line]))
        i += 1
    return parts


# ---------------------------------------------------------------------------
# Inline spans
# ---------------------------------------------------------------------------


def _split_code_spans(text: str) -> list[tuple[bool, str]]:
    """Split *text* into ``(is_code, chunk)`` pairs."""
    chunks: list[tuple[bool, str]] = []
    pos = 0
    for m in _CODE_SPAN_RE.finditer(text):
        if m.start() > pos:
            chunks.append((False, text[pos : m.start()]))
        chunks.append((True, m.group(2).strip() or m.group(2)))
        pos = m.end()
    if pos < len(text):
        chunks.append((False, text[pos:]))
    return chunks


def _stash_links(text: str) -> tuple[str, list[tuple[str, str]]]:
    """Swap links for ``\\x00N\\x00`` tokens so emphasis never sees a URL.

    Returns the tokenized text and the ``(label, url)`` pair behind each
    token. An autolink's label is its URL.
    """
    links: list[tuple[str, str]] = []

    def stash(m: re.Match[str]) -> str:
        url = m.group(2) or m.group(3)
        links.append((m.group(1) or url, url))
        return f"\x00{len(links) - 1}\x00"

    return _LINK_RE.sub(stash, text), links


def _plain_emphasis(text: str) -> str:
    text = _STRONG_RE.sub(lambda m: m.group(1) or m.group(2), text)
    return _EM_RE.sub(lambda m: m.group(1) or m.group(2), text)


def _html_emphasis(html: str) -> str:
    html = _STRONG_RE.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", html)
    return _EM_RE.sub(lambda m: f"<em>{m.group(1) or m.group(2)}</em>", html)


def _restore_links(
    text: str, links: list[tuple[str, str]], render: Callable[[str, str], str]
) -> str:
    return _LINK_TOKEN_RE.sub(lambda m: render(*links[int(m.group(1))]), text)


def _plain_link(label: str, url: str) -> str:
    return url if label == url else f"{_plain_emphasis(label)} ({url})"


def _html_link(label: str, url: str) -> str:
    body = escape(url) if label == url else Markup(_html_emphasis(str(escape(label))))
    return str(Markup('<a href="{}">{}</a>').format(url, body))


def inline_to_plain(text: str) -> str:
    """Reduce inline markup to readable text.

    Code spans keep their content verbatim; links become ``label (url)``.
    """
    out: list[str] = []
    for is_code, chunk in _split_code_spans(text):
        if is_code:
            out.append(chunk)
            continue
        chunk, links = _stash_links(chunk)
        chunk = _plain_emphasis(chunk)
        out.append(_restore_links(chunk, links, _plain_link))
    return "".join(out)


def inline_to_html(text: str) -> Markup:
    """Convert inline markup to HTML, escaping everything else."""
    out: list[str] = []
    for is_code, chunk in _split_code_spans(text):
        if is_code:
            out.append(str(Markup("<code>{}</code>").format(chunk)))
            continue
        chunk, links = _stash_links(chunk)
        html = _html_emphasis(str(escape(chunk)))
        out.append(_restore_links(html, links, _html_link))
    return Markup("".join(out))


def prose_to_html(text: str) -> Markup:
    """Render one prose block as HTML block elements."""
    html: list[Markup] = []
    for part in split_prose(text):
        if part.kind == "rule":
            html.append(Markup("<hr>"))
        elif part.kind == "paragraph":
            body = Markup("\n").join(inline_to_html(line.strip()) for line in part.lines)
            html.append(Markup("<p>{}</p>").format(body))
        elif part.kind == "quote":
            body = Markup("\n").join(inline_to_html(line) for line in part.lines)
            html.append(Markup("<blockquote><p>{}</p></blockquote>").format(body))
        elif part.kind == "table":
            head, *rows = part.rows
            cells = Markup("").join(Markup("<th>{}</th>").format(inline_to_html(c)) for c in head)
            body_rows = Markup("\n").join(
                Markup("<tr>{}</tr>").format(
                    Markup("").join(Markup("<td>{}</td>").format(inline_to_html(c)) for c in row)
                )
                for row in rows
            )
            html.append(
                Markup("<table>\n<thead><tr>{}</tr></thead>\n<tbody>\n{}\n</tbody>\n</table>").format(
                    cells, body_rows
                )
            )
        else:
            tag = "ul" if part.kind == "bullets" else "ol"
            items = Markup("\n").join(
                Markup("<li>{}</li>").format(inline_to_html(line)) for line in part.lines
            )
            html.append(Markup(f"<{tag}>\n") + items + Markup(f"\n</{tag}>"))
    return Markup("\n").join(html)
