"""Dotted-key expansion for shape matching against flattened mappings.

``{"a.b": 1, "c": 2}`` expands to ``{"a": {"b": 1}, "c": 2}``. Only plain
``dict`` instances are expanded; other values pass through untouched.

INVARIANT: The input is never mutated. Nested dicts that receive merged
keys are copied before they are written to.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from typecheckers.domain.types import UndotMode


def undot_shallow(value: Any) -> Any:
    """Expand dotted keys at the top level only."""
    return _undot(value, deep=False)


def undot_deep(value: Any) -> Any:
    """Expand dotted keys at every nesting level."""
    return _undot(value, deep=True)


def _identity(value: Any) -> Any:
    return value


def get_undot(mode: UndotMode | str | None) -> Callable[[Any], Any]:
    """Resolve an undot mode to its transform (identity when *mode* is None)."""
    if mode is None:
        return _identity
    resolved = UndotMode(mode)
    if resolved is UndotMode.DEEP:
        return undot_deep
    return undot_shallow


def _undot(value: Any, *, deep: bool) -> Any:
    if type(value) is not dict:
        return value

    out: dict[Any, Any] = {}
    owned: set[int] = {id(out)}
    for key, item in value.items():
        if deep:
            item = _undot(item, deep=True)
        if not isinstance(key, str) or "." not in key:
            _assign(out, key, item, owned)
            continue
        *parents, last = key.split(".")
        target = out
        for part in parents:
            target = _descend(target, part, owned)
        _assign(target, last, item, owned)
    return out


def _descend(target: dict[Any, Any], key: str, owned: set[int]) -> dict[Any, Any]:
    node = target.get(key)
    if isinstance(node, dict) and id(node) in owned:
        return node
    # Copy foreign dicts before writing into them; replace non-dict leaves.
    fresh: dict[Any, Any] = dict(node) if isinstance(node, dict) else {}
    owned.add(id(fresh))
    target[key] = fresh
    return fresh


def _assign(target: dict[Any, Any], key: Any, item: Any, owned: set[int]) -> None:
    existing = target.get(key)
    if isinstance(existing, dict) and id(existing) in owned and isinstance(item, dict):
        # "a.b" was seen before "a": keep the expanded keys, let explicit ones win.
        existing.update(item)
        return
    target[key] = item
