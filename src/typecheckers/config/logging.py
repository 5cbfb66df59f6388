"""Log routing for typecheckers.

Two streams share one structlog processor chain but not one handler:

- ``typecheckers.diagnostics`` carries check-mode mismatches and context
  messages (``ctx.warn``, ``ctx.log``, ...). It has its own threshold and
  its own stderr handler, renders ``LEVEL: message`` lines (JSON lines with
  ``log_json``), and never propagates to the root logger.
- Every other logger (module loggers, pluggy) goes through the root handler
  with the console or JSON renderer, at WARNING unless ``verbose``.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any, Literal

import structlog

PACKAGE_LOGGER = "typecheckers"
DIAGNOSTICS_LOGGER = "typecheckers.diagnostics"

DiagnosticsLevel = Literal["debug", "info", "warning", "error"]

_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

# Keys added by the shared chain that a diagnostic line does not show.
_CHAIN_KEYS = frozenset({"logger", "timestamp", "level"})


def render_diagnostic(
    _logger: Any,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> str:
    """Render ``WARNING: <message>``, with any bound fields as ``key=value``."""
    level = str(event_dict.get("level", "info")).upper()
    line = f"{level}: {event_dict.get('event', '')}"
    extras = [
        f"{key}={value}"
        for key, value in event_dict.items()
        if key != "event" and key not in _CHAIN_KEYS
    ]
    if extras:
        line = f"{line} {' '.join(extras)}"
    return line


def _stderr_handler(
    renderer: structlog.types.Processor,
    pre_chain: list[structlog.types.Processor],
) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    diagnostics_level: DiagnosticsLevel = "warning",
) -> None:
    """Configure structlog and install the root and diagnostics handlers.

    Safe to call repeatedly; each call replaces the handlers it installed.

    Args:
        verbose: DEBUG for the package loggers and for diagnostics.
        log_json: JSON lines on both streams instead of human output.
        diagnostics_level: Threshold for the diagnostics stream when not
            verbose. ``"error"`` silences check-mode warnings.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if log_json:
        library_renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        diagnostic_renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        library_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        diagnostic_renderer = render_diagnostic

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(_stderr_handler(library_renderer, shared_processors))
    root_logger.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.getLogger("pluggy").setLevel(logging.WARNING)

    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
    diagnostics.handlers.clear()
    diagnostics.addHandler(_stderr_handler(diagnostic_renderer, shared_processors))
    diagnostics.setLevel(logging.DEBUG if verbose else _LEVELS[diagnostics_level])
    diagnostics.propagate = False
