"""CheckService — does the artifact follow cheat-sheet conventions?

A conventional cheat sheet has a title, at least one section, balanced code
fences, a license line and a credits line. Checks are structural only;
the SQL inside code blocks is never examined.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlsheet.infrastructure.loader import DocumentLoadError
from sqlsheet.services.base import BaseService
from sqlsheet.services.result import ServiceResult

if TYPE_CHECKING:
    from sqlsheet.domain.document import Document

# ---------------------------------------------------------------------------
# Issue severity and category constants
# ---------------------------------------------------------------------------

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"

CAT_STRUCTURE = "structure"
CAT_FENCES = "fences"
CAT_CONVENTIONS = "conventions"


def _issue(
    category: str,
    severity: str,
    code: str,
    message: str,
    *,
    line: int | None = None,
) -> dict[str, Any]:
    issue: dict[str, Any] = {
        "category": category,
        "severity": severity,
        "code": code,
        "message": message,
    }
    if line is not None:
        issue["line"] = line
    return issue


class CheckService(BaseService):
    """Structural report on one document."""

    def check(self) -> ServiceResult:
        """Report convention issues without modifying anything.

        The result is ``ok`` whenever the document loaded; callers decide
        what to do with ``error_count``.
        """
        try:
            document = self._source.load()
        except DocumentLoadError as exc:
            return self._load_failure("check", exc)

        issues: list[dict[str, Any]] = []
        issues.extend(self._check_structure(document))
        issues.extend(self._check_fences(document))
        issues.extend(self._check_conventions(document))

        cfg = self.settings.check
        errors = sum(1 for i in issues if i["severity"] == SEVERITY_ERROR)
        return ServiceResult(
            ok=True,
            op="check",
            data={
                "source": self._source.name,
                "title": document.title,
                "sections": len(document.sections),
                "code_blocks": len(document.code_blocks),
                "license": document.license_line(cfg.license_pattern),
                "credits": document.credits_line(cfg.credits_pattern),
                "issues": issues,
                "count": len(issues),
                "error_count": errors,
                "warning_count": len(issues) - errors,
            },
            meta=self._meta(),
        )

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def _check_structure(self, document: Document) -> list[dict[str, Any]]:
        issues: list[dict[str, Any]] = []
        if self.settings.check.require_title and not document.title:
            issues.append(
                _issue(CAT_STRUCTURE, SEVERITY_ERROR, "NO_TITLE", "No level-1 title heading")
            )
        if not document.sections:
            issues.append(
                _issue(CAT_STRUCTURE, SEVERITY_ERROR, "NO_SECTIONS", "Document has no sections")
            )
            return issues

        seen: dict[tuple[int, str], int] = {}
        previous_level = 0
        for i, section in enumerate(document.sections):
            if not section.title:
                issues.append(
                    _issue(
                        CAT_STRUCTURE,
                        SEVERITY_WARNING,
                        "EMPTY_TITLE",
                        "Heading has no text",
                        line=section.line,
                    )
                )

            if previous_level and section.level > previous_level + 1:
                issues.append(
                    _issue(
                        CAT_STRUCTURE,
                        SEVERITY_WARNING,
                        "SKIPPED_LEVEL",
                        f"Heading jumps from level {previous_level} to {section.level}: "
                        f"{section.title!r}",
                        line=section.line,
                    )
                )
            previous_level = section.level

            following = document.sections[i + 1] if i + 1 < len(document.sections) else None
            is_parent = following is not None and following.level > section.level
            if section.is_empty and not is_parent:
                issues.append(
                    _issue(
                        CAT_STRUCTURE,
                        SEVERITY_WARNING,
                        "EMPTY_SECTION",
                        f"Section {section.title!r} has no content",
                        line=section.line,
                    )
                )

            key = (section.level, section.title.casefold())
            if section.title and key in seen:
                issues.append(
                    _issue(
                        CAT_STRUCTURE,
                        SEVERITY_WARNING,
                        "DUPLICATE_TITLE",
                        f"Section {section.title!r} repeats the heading on line {seen[key]}",
                        line=section.line,
                    )
                )
            else:
                seen.setdefault(key, section.line)
        return issues

    def _check_fences(self, document: Document) -> list[dict[str, Any]]:
        return [
            _issue(
                CAT_FENCES,
                SEVERITY_ERROR,
                "UNCLOSED_FENCE",
                f"Code fence {block.fence!r} is never closed",
                line=block.line,
            )
            for block in document.code_blocks
            if not block.closed
        ]

    def _check_conventions(self, document: Document) -> list[dict[str, Any]]:
        cfg = self.settings.check
        issues: list[dict[str, Any]] = []
        checks = (
            ("license", cfg.require_license, document.license_line(cfg.license_pattern)),
            ("credits", cfg.require_credits, document.credits_line(cfg.credits_pattern)),
        )
        for what, required, found in checks:
            if required and not found:
                issues.append(
                    _issue(
                        CAT_CONVENTIONS,
                        SEVERITY_WARNING,
                        f"NO_{what.upper()}",
                        f"No {what} line found",
                    )
                )
        return issues
