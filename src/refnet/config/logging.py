"""structlog configuration for refnet.

Library modules log through stdlib ``logging.getLogger(__name__)``; telemetry
logs through structlog. Both end up in one stderr handler whose formatter is
a structlog ``ProcessorFormatter``:

- Human (default): console renderer, colored when stderr is a TTY
- JSON (``--log-json``): one JSON object per line

Levels for the ``refnet`` logger tree:

- ``--verbose``: DEBUG (graph loading, cache fills, telemetry spans)
- default: WARNING (rejected parameters)
- ``--quiet``: ERROR; the failed result already carries the reason
"""

from __future__ import annotations

import logging
import sys

import structlog

_PACKAGE_LOGGER = "refnet"


def _shared_processors() -> list[structlog.types.Processor]:
    """Processors applied to structlog events and foreign stdlib records alike."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _package_level(*, verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    log_json: bool = False,
) -> None:
    """Route all refnet logging to stderr through structlog.

    Safe to call repeatedly: the root handler is replaced, not stacked.

    Args:
        verbose: DEBUG for the ``refnet`` loggers. Wins over *quiet*.
        quiet: ERROR for the ``refnet`` loggers.
        log_json: JSON lines instead of the console renderer.
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(_PACKAGE_LOGGER).setLevel(_package_level(verbose=verbose, quiet=quiet))
