"""Diagnostic sinks: where check-mode warnings and context logs go.

A sink is anything with ``debug/info/warning/error(message)`` methods. The
default is a structlog logger on the diagnostics stream, so its threshold
and rendering are whatever
:func:`typecheckers.config.logging.configure_logging` installed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import structlog

from typecheckers.config.logging import DIAGNOSTICS_LOGGER


@runtime_checkable
class DiagnosticSink(Protocol):
    """Line-oriented diagnostic channel."""

    def debug(self, message: str) -> Any: ...

    def info(self, message: str) -> Any: ...

    def warning(self, message: str) -> Any: ...

    def error(self, message: str) -> Any: ...


def default_sink() -> DiagnosticSink:
    """Structlog-backed sink used when no sink is injected."""
    return structlog.get_logger(DIAGNOSTICS_LOGGER)


@dataclass
class CollectingSink:
    """In-memory sink that records ``(level, message)`` pairs."""

    records: list[tuple[str, str]] = field(default_factory=list)

    def debug(self, message: str) -> None:
        self.records.append(("debug", message))

    def info(self, message: str) -> None:
        self.records.append(("info", message))

    def warning(self, message: str) -> None:
        self.records.append(("warning", message))

    def error(self, message: str) -> None:
        self.records.append(("error", message))

    def messages(self, level: str | None = None) -> list[str]:
        return [msg for lvl, msg in self.records if level is None or lvl == level]

    def clear(self) -> None:
        self.records.clear()
