"""Checker registry: named leaf predicates.

Every default checker is total (never raises) and side-effect free.
Custom tables are merged over the defaults in order at construction time,
so lookups are a single mapping access with no fallback chain.

INVARIANT: Names are unique; on collision the last merged table wins.
"""

from __future__ import annotations

import datetime
import inspect
import logging
import math
import numbers
import re
import weakref
from collections.abc import Callable, Iterable, Iterator, Mapping
from enum import Enum
from typing import Any

from typecheckers.domain.types import MISSING

logger = logging.getLogger(__name__)

Checker = Callable[[Any], bool]

# Largest integer a float represents exactly; larger ints render as bigint.
MAX_SAFE_INTEGER = 2**53 - 1

_SEQUENCE_TYPES = (list, tuple)
_PRIMITIVE_TYPES = (str, bytes, bool, int, float, complex, Enum)


# ---------------------------------------------------------------------------
# Shared predicates (also used by the matcher and formatter)
# ---------------------------------------------------------------------------


def is_sequence(value: Any) -> bool:
    """Sequences for matching purposes: lists and tuples, never strings."""
    return isinstance(value, _SEQUENCE_TYPES)


def is_primitive(value: Any) -> bool:
    return value is None or value is MISSING or isinstance(value, _PRIMITIVE_TYPES)


def is_number(value: Any) -> bool:
    """Real numbers other than bools, NaN and enum members (those are symbols)."""
    if isinstance(value, (bool, Enum)) or not isinstance(value, numbers.Real):
        return False
    return not (isinstance(value, float) and math.isnan(value))


def is_composite(value: Any) -> bool:
    """A non-null value that can carry named fields."""
    return not is_primitive(value)


def is_object(value: Any) -> bool:
    return is_composite(value) and not is_sequence(value) and not callable(value)


def _is_numeric_string(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parsed = float(value)
    except ValueError:
        return False
    return math.isfinite(parsed)


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, (bool, Enum))


def _is_finite(value: Any) -> bool:
    if _is_integer(value):
        return True
    if not is_number(value):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # Rationals too large for a float are still finite.
        return True
    except (TypeError, ValueError):
        return False


def _truth(value: Any) -> bool | None:
    # Objects such as arrays may refuse bool(); they are neither truthy nor falsy.
    try:
        return bool(value)
    except Exception:
        return None


def _is_sync_function(value: Any) -> bool:
    return callable(value) and not inspect.iscoroutinefunction(value)


DEFAULT_CHECKERS: dict[str, Checker] = {
    "any": lambda v: v is not MISSING,
    "object": is_object,
    "plain_object": lambda v: type(v) is dict,
    "string": lambda v: isinstance(v, str),
    "bytes": lambda v: isinstance(v, (bytes, bytearray)),
    "number": is_number,
    "integer": _is_integer,
    "bigint": lambda v: _is_integer(v) and abs(v) > MAX_SAFE_INTEGER,
    "finite": _is_finite,
    "boolean": lambda v: isinstance(v, bool),
    "function": callable,
    "array": is_sequence,
    "list": lambda v: isinstance(v, list),
    "tuple": lambda v: isinstance(v, tuple),
    "null": lambda v: v is None,
    "undefined": lambda v: v is MISSING,
    "nullish": lambda v: v is None or v is MISSING,
    "symbol": lambda v: isinstance(v, Enum),
    "date": lambda v: isinstance(v, datetime.date),
    "regexp": lambda v: isinstance(v, re.Pattern),
    "error": lambda v: isinstance(v, BaseException),
    "promise": inspect.isawaitable,
    "set": lambda v: isinstance(v, (set, frozenset)),
    "map": lambda v: isinstance(v, Mapping),
    "weakset": lambda v: isinstance(v, weakref.WeakSet),
    "weakmap": lambda v: isinstance(v, (weakref.WeakKeyDictionary, weakref.WeakValueDictionary)),
    "iterable": lambda v: isinstance(v, Iterable),
    "iterator": lambda v: isinstance(v, Iterator),
    "numeric": _is_numeric_string,
    "empty_string": lambda v: isinstance(v, str) and v == "",
    "not_empty_string": lambda v: isinstance(v, str) and v != "",
    "empty_array": lambda v: is_sequence(v) and len(v) == 0,
    "not_empty_array": lambda v: is_sequence(v) and len(v) > 0,
    "empty_object": lambda v: isinstance(v, Mapping) and len(v) == 0,
    "not_empty_object": lambda v: isinstance(v, Mapping) and len(v) > 0,
    "falsy": lambda v: _truth(v) is False,
    "truthy": lambda v: _truth(v) is True,
    "primitive": is_primitive,
    "async_function": inspect.iscoroutinefunction,
    "sync_function": _is_sync_function,
}


class CheckerRegistry(Mapping[str, Checker]):
    """Name → predicate table used for leaf specs.

    Build one with :meth:`merged` to layer custom tables over the defaults::

        registry = CheckerRegistry.merged(DEFAULT_CHECKERS, {"even": is_even})
    """

    def __init__(self, checkers: Mapping[str, Checker] | None = None) -> None:
        self._checkers: dict[str, Checker] = {}
        for name, checker in (checkers or {}).items():
            self.register(name, checker)

    @classmethod
    def merged(cls, *tables: Mapping[str, Checker] | None) -> CheckerRegistry:
        """Merge *tables* left to right; later entries override earlier ones."""
        registry = cls()
        for table in tables:
            if not table:
                continue
            for name, checker in table.items():
                if name in registry._checkers:
                    logger.debug("Checker %r overridden", name)
                registry.register(name, checker)
        return registry

    @classmethod
    def default(cls) -> CheckerRegistry:
        return cls(DEFAULT_CHECKERS)

    def register(self, name: str, checker: Checker) -> None:
        """Install or overwrite the checker for *name*."""
        if not isinstance(name, str) or not name.strip():
            msg = "Checker name must be a non-empty string"
            raise ValueError(msg)
        if "|" in name:
            msg = f"Checker name {name!r} must not contain '|'"
            raise ValueError(msg)
        if not callable(checker):
            msg = f"Checker {name!r} must be callable"
            raise TypeError(msg)
        self._checkers[name] = checker

    def lookup(self, name: str) -> Checker | None:
        return self._checkers.get(name)

    def names(self) -> list[str]:
        return sorted(self._checkers)

    def __getitem__(self, name: str) -> Checker:
        return self._checkers[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._checkers)

    def __len__(self) -> int:
        return len(self._checkers)

    def __repr__(self) -> str:
        return f"CheckerRegistry({len(self._checkers)} checkers)"
