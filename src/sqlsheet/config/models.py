"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, ``sqlsheet.toml`` only carries
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from sqlsheet.domain.document import DEFAULT_CREDITS_PATTERN, DEFAULT_LICENSE_PATTERN

RenderFormat = Literal["markdown", "text", "html", "terminal"]


class DocumentConfig(BaseModel):
    """[document] section."""

    model_config = {"frozen": True}

    path: str | None = None
    encoding: str = "utf-8"


class RenderConfig(BaseModel):
    """[render] section."""

    model_config = {"frozen": True}

    format: RenderFormat = "markdown"
    width: int = Field(default=100, ge=20)
    html_title: str | None = None
    toc: bool = True


class CheckConfig(BaseModel):
    """[check] section."""

    model_config = {"frozen": True}

    require_title: bool = True
    require_license: bool = True
    require_credits: bool = True
    license_pattern: str = DEFAULT_LICENSE_PATTERN
    credits_pattern: str = DEFAULT_CREDITS_PATTERN

    @field_validator("license_pattern", "credits_pattern")
    @classmethod
    def _compiles(cls, value: str) -> str:
        try:
            re.compile(value)
        except re.error as exc:
            msg = f"invalid regular expression {value!r}: {exc}"
            raise ValueError(msg) from exc
        return value
