"""structlog configuration for sqlsheet.

stdout belongs to the document (``show``, ``render``) or to the formatted
result, so every log record goes to stderr:

- Console (default): structlog's dev renderer, colored only on a TTY and
  without timestamps, since a human reads it right away.
- JSON lines (``--log-json``): ISO timestamps included, for log shippers.

Levels for the ``sqlsheet`` logger follow the global flags: ``-v`` gives
DEBUG, ``-q`` gives ERROR, neither gives WARNING. ``-v`` wins when both
are passed, since ``-q`` only trims the result output.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from typing import TextIO

# Pulled in by rich's markdown renderer and the HTML template layer.
_QUIET_LIBRARIES = ("markdown_it", "jinja2")


def _sheet_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def _processors(log_json: bool) -> list[structlog.types.Processor]:
    chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
    ]
    if log_json:
        chain.append(structlog.processors.TimeStamper(fmt="iso"))
    chain += [
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route stdlib and structlog records through one handler.

    Safe to call again: the root handler is replaced, not stacked.

    Args:
        verbose: ``sqlsheet`` loggers emit DEBUG.
        quiet: ``sqlsheet`` loggers emit ERROR only (ignored with *verbose*).
        log_json: Render JSON lines instead of the console format.
        stream: Where records go; stderr when omitted.
    """
    out = stream if stream is not None else sys.stderr
    shared = _processors(log_json)

    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("sqlsheet").setLevel(_sheet_level(verbose, quiet))
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(logging.WARNING)
