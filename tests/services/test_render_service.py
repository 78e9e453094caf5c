"""Tests for RenderService and the per-format renderers."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from sqlsheet.config.settings import SheetSettings
from sqlsheet.domain.document import parse_document
from sqlsheet.infrastructure.source import DocumentSource
from sqlsheet.services.render import (
    FORMATS,
    RenderService,
    _unique_anchors,
    render_html,
    render_terminal,
    render_text,
)


class TestMarkdown:
    def test_identity(self, source: DocumentSource, sample_text: str) -> None:
        result = RenderService(source).render("markdown")
        assert result.ok
        assert result.data["text"] == sample_text
        assert result.data["format"] == "markdown"

    def test_raw_bytes_only_for_markdown(self, source: DocumentSource, sheet_path: Path) -> None:
        service = RenderService(source)
        assert service.render("markdown").raw == sheet_path.read_bytes()
        assert service.render("text").raw is None

    def test_default_format_from_config(self, tmp_path: Path, sheet_path: Path) -> None:
        (tmp_path / "sqlsheet.toml").write_text('[render]\nformat = "text"\n')
        settings = SheetSettings.from_cli(project_root=tmp_path)
        result = RenderService(DocumentSource(settings, sheet_path)).render()
        assert result.data["format"] == "text"


@pytest.mark.parametrize("fmt", FORMATS)
def test_rendering_is_idempotent(source: DocumentSource, fmt: str) -> None:
    service = RenderService(source)
    first = service.render(fmt)
    second = service.render(fmt)
    assert first.ok
    assert first.data["text"] == second.data["text"]


class TestText:
    def test_layout(self, sample_text: str) -> None:
        text = render_text(parse_document(sample_text))
        assert text.startswith(
            "Mini SQL\n========\n\nIntro line.\n\n1. Select\n---------\n\n    SELECT * FROM t;\n\n"
        )
        assert "Use WHERE." in text
        assert "2.1 Null checks\n\n    # not a heading\n    SELECT 1;" in text
        assert text.endswith("License: MIT.\nCredits: the docs team.\n")

    def test_empty_document(self) -> None:
        assert render_text(parse_document("")) == ""

    def test_code_kept_verbatim(self) -> None:
        text = render_text(parse_document("# T\n\n```sql\nSELECT `**x**`\n\nFROM t;\n```\n"))
        assert "    SELECT `**x**`\n\n    FROM t;" in text


class TestHtml:
    def test_page(self, sample_text: str) -> None:
        html = render_html(parse_document(sample_text), title="Mini SQL")
        assert "<title>Mini SQL</title>" in html
        assert '<section id="1-select">' in html
        assert "<h2>1. Select</h2>" in html
        assert '<pre><code class="language-sql">SELECT * FROM t WHERE x = 1;</code></pre>' in html
        assert "<pre><code># not a heading\nSELECT 1;</code></pre>" in html
        assert '<nav class="toc">' in html
        assert '<a href="#21-null-checks">2.1 Null checks</a>' in html

    def test_code_escaped(self) -> None:
        html = render_html(parse_document("# T\n\n```sql\nSELECT 1 WHERE a < b;\n```\n"), title="T")
        assert "SELECT 1 WHERE a &lt; b;" in html

    def test_single_section_has_no_toc(self) -> None:
        html = render_html(parse_document("# Only\n\ntext\n"), title="Only")
        assert '<nav class="toc">' not in html

    def test_toc_disabled(self, sample_text: str) -> None:
        html = render_html(parse_document(sample_text), title="T", toc=False)
        assert '<nav class="toc">' not in html

    def test_title_setting(self, tmp_path: Path, sheet_path: Path) -> None:
        (tmp_path / "sqlsheet.toml").write_text('[render]\nhtml_title = "Pocket SQL"\n')
        settings = SheetSettings.from_cli(project_root=tmp_path)
        result = RenderService(DocumentSource(settings, sheet_path)).render("html")
        assert "<title>Pocket SQL</title>" in result.data["text"]

    def test_title_falls_back_to_source(
        self, settings: SheetSettings, make_sheet: Callable[..., Path]
    ) -> None:
        path = make_sheet("## Sub\n\ntext\n", name="untitled.md")
        result = RenderService(DocumentSource(settings, path)).render("html")
        assert f"<title>{path}</title>" in result.data["text"]

    def test_project_template_override(self, source: DocumentSource, tmp_path: Path) -> None:
        override = tmp_path / ".sqlsheet" / "templates" / "html" / "document.html.j2"
        override.parent.mkdir(parents=True)
        override.write_text("{{ title }}|{{ sections | length }}\n")
        result = RenderService(source).render("html")
        assert result.data["text"] == "Mini SQL|5\n"

    def test_unique_anchors(self) -> None:
        assert _unique_anchors(["A", "A", "B", "a"]) == ["a", "a-1", "b", "a-2"]


class TestTerminal:
    def test_plain(self, sample_text: str) -> None:
        out = render_terminal(parse_document(sample_text), width=60, color=False)
        assert "SELECT * FROM t;" in out
        assert "Mini SQL" in out
        assert "\x1b[" not in out

    def test_color(self, sample_text: str) -> None:
        out = render_terminal(parse_document(sample_text), width=60, color=True)
        assert "\x1b[" in out

    def test_frontmatter_not_rendered(self) -> None:
        doc = parse_document("---\nsecret_key: hidden\n---\n# Body\n")
        out = render_terminal(doc, width=60)
        assert "secret_key" not in out
        assert "Body" in out


class TestRenderService:
    def test_unknown_format(self, source: DocumentSource) -> None:
        result = RenderService(source).render("pdf")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_FORMAT"

    def test_missing_document(self, settings: SheetSettings, tmp_path: Path) -> None:
        result = RenderService(DocumentSource(settings, tmp_path / "nope.md")).render("text")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_write_output(self, source: DocumentSource, tmp_path: Path) -> None:
        out = tmp_path / "site" / "index.html"
        result = RenderService(source).render("html", output=out)
        assert result.ok
        assert "text" not in result.data
        assert result.data["output_file"] == str(out)
        assert result.data["bytes"] == len(out.read_bytes())

    def test_markdown_output_matches_source(
        self, source: DocumentSource, sheet_path: Path, tmp_path: Path
    ) -> None:
        out = tmp_path / "copy.md"
        RenderService(source).render("markdown", output=out)
        assert out.read_bytes() == sheet_path.read_bytes()

    def test_write_failure(self, source: DocumentSource, sheet_path: Path) -> None:
        result = RenderService(source).render("text", output=sheet_path / "x.txt")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "WRITE_FAILED"
