"""BaseService — shared foundation for sqlsheet services.

Every service receives a :class:`DocumentSource` at construction time and
loads the artifact through it on each call. Load failures never escape a
service: they come back as a failed :class:`ServiceResult`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlsheet.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from sqlsheet.config.settings import SheetSettings
    from sqlsheet.infrastructure.loader import DocumentLoadError
    from sqlsheet.infrastructure.source import DocumentSource

logger = logging.getLogger(__name__)


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class RenderService(BaseService):
            def render(self, fmt: str) -> ServiceResult:
                try:
                    document = self._source.load()
                except DocumentLoadError as exc:
                    return self._load_failure("render", exc)
                ...
    """

    def __init__(self, source: DocumentSource) -> None:
        self._source = source

    @property
    def settings(self) -> SheetSettings:
        return self._source.settings

    def _meta(self) -> dict[str, str]:
        return {"source": self._source.name}

    def _load_failure(self, op: str, exc: DocumentLoadError) -> ServiceResult:
        """Convert a load error into a failed result, keeping the path."""
        logger.debug("Load failed for %s: %s", self._source.name, exc.message)
        detail = {"path": exc.path or self._source.name}
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=exc.code, message=exc.message, detail=detail),
            meta=self._meta(),
        )
