"""Shared pytest fixtures for sqlsheet tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from sqlsheet.config.settings import SheetSettings
from sqlsheet.infrastructure.source import DocumentSource

SAMPLE_SHEET = """\
# Mini SQL

Intro line.

## 1. Select

```sql
SELECT * FROM t;
```

## 2. Filter

Use `WHERE`.

```sql
SELECT * FROM t WHERE x = 1;
```

### 2.1 Null checks

```
# not a heading
SELECT 1;
```

## 3. Notes

Plain text only.

License: MIT.
Credits: the docs team.
"""


@pytest.fixture(autouse=True)
def _isolated_env(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[None]:
    """Run every test in an empty CWD with no SQLSHEET_* env and clean logging."""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("SQLSHEET_"):
            monkeypatch.delenv(name)

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_SHEET


@pytest.fixture
def make_sheet(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a sheet under ``tmp_path``; returns its path."""

    def _make(text: str = SAMPLE_SHEET, name: str = "sheet.md") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(text.encode("utf-8"))
        return path

    return _make


@pytest.fixture
def sheet_path(make_sheet: Callable[..., Path]) -> Path:
    """The sample sheet written to disk."""
    return make_sheet()


@pytest.fixture
def settings(tmp_path: Path) -> SheetSettings:
    return SheetSettings.from_cli(project_root=tmp_path)


@pytest.fixture
def source(settings: SheetSettings, sheet_path: Path) -> DocumentSource:
    """A DocumentSource over the sample sheet."""
    return DocumentSource(settings, sheet_path)
