"""Tests for output mode selection."""

from __future__ import annotations

import json

from sqlsheet.output.formatters import OutputSettings, format_result
from sqlsheet.services.result import ServiceResult


def _result() -> ServiceResult:
    return ServiceResult(
        ok=True,
        op="sections",
        data={
            "title": "T",
            "items": [{"index": 0, "level": 1, "line": 1, "title": "T", "code_blocks": 0}],
            "count": 1,
            "total": 1,
        },
        meta={"source": "sheet.md"},
    )


class TestFormatResult:
    def test_json(self) -> None:
        out = format_result(_result(), settings=OutputSettings(json_output=True))
        payload = json.loads(out)
        assert payload["op"] == "sections"
        assert payload["data"]["count"] == 1
        assert payload["meta"] == {"source": "sheet.md"}

    def test_json_wins_over_quiet(self) -> None:
        out = format_result(_result(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["ok"] is True

    def test_quiet(self) -> None:
        assert format_result(_result(), settings=OutputSettings(quiet=True)) == "T"

    def test_default_is_rich(self) -> None:
        out = format_result(_result())
        assert out.endswith("1 sections")
        assert "meta:" not in out

    def test_verbose_adds_meta(self) -> None:
        out = format_result(_result(), settings=OutputSettings(verbose=True))
        assert "meta:" in out
