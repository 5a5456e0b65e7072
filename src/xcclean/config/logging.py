"""Diagnostics for xcclean, routed to stderr.

stdout carries command results (rich tables, ``--json`` payloads, ``-q``
lines), so every log record goes to stderr. Modules log through the
stdlib (``logging.getLogger(__name__)``); structlog's ProcessorFormatter
gives those records the same fields as native structlog events.

The ``xcclean`` logger tree sits at WARNING unless ``-v`` is given.
``--log-json`` switches the console renderer for JSON lines.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Third-party loggers that stay at WARNING even with -v.
_QUIET_LOGGERS = ("sqlalchemy", "pluggy")


class _StderrHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """The one root handler xcclean installs; replaced on reconfiguration."""


def _pre_chain(*, log_json: bool) -> list[structlog.types.Processor]:
    # Terminal output only needs the wall-clock time of a run.
    stamp = structlog.processors.TimeStamper(fmt="iso" if log_json else "%H:%M:%S", utc=log_json)
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        stamp,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _stderr_handler(pre_chain: list[structlog.types.Processor], *, log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = _StderrHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set the xcclean log level.

    Safe to call more than once per process: a previously installed
    xcclean handler is replaced, other root handlers are left alone.
    """
    pre_chain = _pre_chain(log_json=log_json)
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _StderrHandler)]:
        root.removeHandler(existing)
    root.addHandler(_stderr_handler(pre_chain, log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("xcclean").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
