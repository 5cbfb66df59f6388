"""Shared vocabulary types for the type-spec domain.

``MISSING`` marks an absent value (a shape field the target does not
carry); it is distinct from ``None``, which is a present null value.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Final


class _Missing:
    """Singleton marker for an absent value."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Final[Any] = _Missing()


class UndotMode(StrEnum):
    """How dotted keys on a target mapping are expanded before shape lookup."""

    SHALLOW = "shallow"
    DEEP = "deep"


class OperatorKind(StrEnum):
    """Canonical logical combinators."""

    ALL = "all"
    ANY = "any"
    NOT = "not"
    TUPLE = "tuple"


OPERATOR_KEYWORDS: dict[str, OperatorKind] = {
    "$all": OperatorKind.ALL,
    "$every": OperatorKind.ALL,
    "$and": OperatorKind.ALL,
    "$any": OperatorKind.ANY,
    "$some": OperatorKind.ANY,
    "$or": OperatorKind.ANY,
    "$not": OperatorKind.NOT,
    "$tuple": OperatorKind.TUPLE,
}

OPERATOR_PREFIX = "$"
