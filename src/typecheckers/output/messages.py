"""Diagnostic message formatting.

Messages read ``<prefix> <path> expected <type> but got <value>``, e.g.::

    Invoice #42 items.0.price expected number but got [string "9.99"]

Prefixes come from a provider callable that is re-evaluated for every
message, so instance labels always reflect the instance's current state.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Hashable, Iterable, Sequence
from enum import Enum
from typing import Any

from typecheckers.domain.checkers import MAX_SAFE_INTEGER, is_sequence
from typecheckers.domain.types import MISSING

PrefixProvider = Callable[[], Sequence[Any]]

MAX_STRING_LENGTH = 32
TRUNCATED_LENGTH = 29


def format_value(value: Any) -> str:
    """Render *value* as a short, bounded, deterministic tag."""
    if value is None:
        return "[null]"
    if value is MISSING:
        return "[undefined]"
    if isinstance(value, Enum):
        return f"[symbol ({type(value).__name__}.{value.name})]"
    if isinstance(value, bool):
        return f"[boolean {'true' if value else 'false'}]"
    if isinstance(value, int):
        kind = "bigint" if abs(value) > MAX_SAFE_INTEGER else "number"
        return f"[{kind} {value}]"
    if isinstance(value, float):
        return f"[number {_format_float(value)}]"
    if isinstance(value, str):
        if len(value) <= MAX_STRING_LENGTH:
            return f'[string "{value}"]'
        return f'[string "{value[:TRUNCATED_LENGTH]}..." ({len(value)})]'
    if callable(value):
        name = getattr(value, "__name__", "")
        if not name or name == "<lambda>":
            name = "<anonymous>"
        return f"[function {name}]"
    if is_sequence(value):
        return f"[array ({len(value)})]"
    return f"[object {type(value).__name__}]"


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if value.is_integer() and abs(value) <= MAX_SAFE_INTEGER:
        return str(int(value))
    return repr(value)


def format_prefix(*parts: Any) -> str:
    """Join non-empty parts (flattening nested sequences), each followed by a space."""
    return "".join(f"{part} " for part in _flatten(parts) if part not in (None, ""))


def format_path(path: Iterable[Hashable]) -> str:
    """Dotted description of a path; empty segments are dropped."""
    return ".".join(str(part) for part in path if part not in (None, ""))


def _flatten(parts: Iterable[Any]) -> Iterable[Any]:
    for part in parts:
        if isinstance(part, (list, tuple)):
            yield from _flatten(part)
        else:
            yield part


class MessageFormatter:
    """Formatter bound to one prefix provider."""

    def __init__(self, prefix: PrefixProvider | None = None) -> None:
        self._prefix = prefix or (lambda: ())

    def prefix(self) -> list[Any]:
        return list(self._prefix())

    def format_message(self, message: Any = "") -> str:
        return f"{format_prefix(self.prefix())}{message}"

    def format_expected(self, *, path: Iterable[Hashable], type: str, value: Any) -> str:
        return format_expected(prefix=self.prefix(), path=path, type=type, value=value)


def format_expected(
    *,
    prefix: Sequence[Any],
    path: Iterable[Hashable],
    type: str,
    value: Any,
) -> str:
    """Compose ``<prefix><path> expected <type> but got <rendered value>``."""
    head = format_prefix(prefix, format_path(path))
    return f"{head}expected {type} but got {format_value(value)}"
