"""Optional YAML frontmatter at the head of a cheat sheet.

A document may open with a ``---`` delimited YAML block carrying metadata
(``title``, ``license``, ``credits``, anything else). The block is metadata
only: it is excluded from sections, and the source text is never rewritten.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

_FRONTMATTER_DELIMITER = "---"


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel's YAML object keeps emitter/parser state, so every call gets
    its own instance.
    """
    y = YAML()
    y.preserve_quotes = True
    return y


class DocumentMeta(BaseModel):
    """Frontmatter metadata. Unknown keys are kept as extras."""

    model_config = ConfigDict(frozen=True, extra="allow")

    title: str | None = None
    license: str | None = None
    credits: str | None = None


def split_frontmatter(lines: list[str]) -> tuple[dict[str, Any], int]:
    """Split a frontmatter block off the head of *lines*.

    *lines* must already be split with line endings removed.

    Returns:
        A ``(frontmatter_dict, consumed)`` tuple where *consumed* is the
        number of leading lines that belong to the frontmatter block,
        delimiters included. Without valid delimiters, or when the block
        is not a YAML mapping, returns ``({}, 0)``. A block holding nothing
        but comments counts as no mapping, since ``# Title`` lines between
        two rules are headings. A blank block is an empty mapping.
    """
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        return {}, 0

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        return {}, 0

    yaml_block = "\n".join(lines[1:end_idx])
    try:
        data = _new_yaml().load(yaml_block)
    except YAMLError:
        return {}, 0
    if data is None:
        if yaml_block.strip():
            return {}, 0
        data = {}
    if not isinstance(data, dict):
        return {}, 0
    return {str(k): v for k, v in data.items()}, end_idx + 1


def parse_meta(data: dict[str, Any]) -> DocumentMeta:
    """Coerce raw frontmatter into :class:`DocumentMeta`.

    Scalar fields are stringified so a YAML year or number does not
    fail validation.
    """
    cleaned: dict[str, Any] = dict(data)
    for key in ("title", "license", "credits"):
        value = cleaned.get(key)
        if value is not None and not isinstance(value, str):
            cleaned[key] = str(value)
    return DocumentMeta.model_validate(cleaned)
