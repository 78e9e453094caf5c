"""Tests for CheckService — structural convention checks."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from sqlsheet.config.settings import SheetSettings
from sqlsheet.infrastructure.source import DocumentSource
from sqlsheet.services.check import CheckService
from sqlsheet.services.result import ServiceResult

FOOTER = "\nLicense: MIT\n\nCredits: us\n"


def _check(settings: SheetSettings, make_sheet: Callable[..., Path], text: str) -> ServiceResult:
    return CheckService(DocumentSource(settings, make_sheet(text))).check()


def _codes(result: ServiceResult) -> list[str]:
    return [issue["code"] for issue in result.data["issues"]]


def _issue(result: ServiceResult, code: str) -> dict[str, Any]:
    return next(i for i in result.data["issues"] if i["code"] == code)


class TestCleanDocuments:
    def test_sample_is_clean(self, source: DocumentSource) -> None:
        result = CheckService(source).check()
        assert result.ok
        data = result.data
        assert data["issues"] == []
        assert data["error_count"] == 0
        assert data["warning_count"] == 0
        assert data["sections"] == 5
        assert data["code_blocks"] == 3
        assert data["title"] == "Mini SQL"
        assert data["license"] == "License: MIT."
        assert data["credits"] == "Credits: the docs team."

    def test_builtin_is_clean(self, settings: SheetSettings) -> None:
        result = CheckService(DocumentSource(settings)).check()
        assert result.ok
        assert result.data["issues"] == []
        assert result.data["sections"] == 13


class TestStructure:
    def test_no_sections(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        result = _check(settings, make_sheet, "plain text" + FOOTER)
        assert result.ok
        assert _codes(result) == ["NO_TITLE", "NO_SECTIONS"]
        assert result.data["error_count"] == 2

    def test_skipped_level(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        result = _check(settings, make_sheet, "# T\n\n#### Deep\n\ntext\n" + FOOTER)
        assert _codes(result) == ["SKIPPED_LEVEL"]
        assert _issue(result, "SKIPPED_LEVEL")["line"] == 3
        assert result.data["warning_count"] == 1

    def test_empty_section(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        text = "# T\n\n## Empty\n\n## Full\n\ntext\n" + FOOTER
        result = _check(settings, make_sheet, text)
        assert _codes(result) == ["EMPTY_SECTION"]
        assert _issue(result, "EMPTY_SECTION")["line"] == 3

    def test_parent_heading_is_not_empty(
        self, settings: SheetSettings, make_sheet: Callable[..., Path]
    ) -> None:
        result = _check(settings, make_sheet, "# T\n## Child\n\ntext\n" + FOOTER)
        assert _codes(result) == []

    def test_duplicate_title(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        text = "# T\n\n## Joins\n\na\n\n## joins\n\nb\n" + FOOTER
        result = _check(settings, make_sheet, text)
        assert _codes(result) == ["DUPLICATE_TITLE"]
        assert _issue(result, "DUPLICATE_TITLE")["line"] == 7

    def test_empty_heading_text(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        result = _check(settings, make_sheet, "# T\n\n##\n\ntext\n" + FOOTER)
        assert "EMPTY_TITLE" in _codes(result)

    def test_title_not_required(
        self, tmp_path: Path, make_sheet: Callable[..., Path]
    ) -> None:
        (tmp_path / "sqlsheet.toml").write_text("[check]\nrequire_title = false\n")
        settings = SheetSettings.from_cli(project_root=tmp_path)
        result = _check(settings, make_sheet, "## A\n\ntext\n" + FOOTER)
        assert _codes(result) == []


class TestFences:
    def test_unclosed_fence(self, settings: SheetSettings, make_sheet: Callable[..., Path]) -> None:
        result = _check(settings, make_sheet, "# T\n\nLicense: MIT\nCredits: us\n\n```sql\nSELECT 1;\n")
        assert result.ok
        assert _codes(result) == ["UNCLOSED_FENCE"]
        issue = _issue(result, "UNCLOSED_FENCE")
        assert issue["severity"] == "error"
        assert issue["category"] == "fences"
        assert issue["line"] == 6
        assert result.data["error_count"] == 1


class TestConventions:
    def test_missing_license_and_credits(
        self, settings: SheetSettings, make_sheet: Callable[..., Path]
    ) -> None:
        result = _check(settings, make_sheet, "# T\n\ntext\n")
        assert _codes(result) == ["NO_LICENSE", "NO_CREDITS"]
        assert result.data["warning_count"] == 2
        assert result.data["license"] is None

    def test_frontmatter_metadata_counts(
        self, settings: SheetSettings, make_sheet: Callable[..., Path]
    ) -> None:
        text = "---\nlicense: CC-BY-4.0\ncredits: The SQL club\n---\n# T\n\ntext\n"
        result = _check(settings, make_sheet, text)
        assert _codes(result) == []
        assert result.data["license"] == "CC-BY-4.0"

    def test_custom_pattern(self, tmp_path: Path, make_sheet: Callable[..., Path]) -> None:
        (tmp_path / "sqlsheet.toml").write_text(
            '[check]\ncredits_pattern = "\\\\bauthors?\\\\b"\n'
        )
        settings = SheetSettings.from_cli(project_root=tmp_path)
        result = _check(settings, make_sheet, "# T\n\nLicense: MIT\n\nAuthors: me\n")
        assert _codes(result) == []
        assert result.data["credits"] == "Authors: me"

    def test_requirements_disabled(self, tmp_path: Path, make_sheet: Callable[..., Path]) -> None:
        (tmp_path / "sqlsheet.toml").write_text(
            "[check]\nrequire_license = false\nrequire_credits = false\n"
        )
        settings = SheetSettings.from_cli(project_root=tmp_path)
        assert _codes(_check(settings, make_sheet, "# T\n\ntext\n")) == []


class TestLoadFailure:
    def test_missing(self, settings: SheetSettings, tmp_path: Path) -> None:
        result = CheckService(DocumentSource(settings, tmp_path / "nope.md")).check()
        assert not result.ok
        assert result.op == "check"
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"
