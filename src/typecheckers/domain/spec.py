"""Type-spec sum type and the parser that builds it.

Callers write specs as plain nested data::

    "string|number"                     # Leaf (union)
    ["number"]                          # Homogeneous
    ["$any", "even", "odd"]             # Operator, list spelling
    {"$tuple": ["string", "number"]}    # TupleSpec, mapping spelling
    {"id": "integer", "tags": ["string"]}  # Shape
    lambda v: v > 0                     # Predicate

:func:`parse_spec` turns that data into immutable nodes once per check so
the matcher never has to re-sniff "is this mapping an operator?" while it
recurses. Already-parsed nodes pass through unchanged, which lets callers
parse a spec once and reuse it across many values.

INVARIANT: Malformed specs raise :class:`SpecError` here, before any value
is inspected.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from typecheckers.domain.types import OPERATOR_KEYWORDS, OPERATOR_PREFIX, OperatorKind
from typecheckers.errors import SpecError


class TypeSpec:
    """Base class of every parsed spec node."""

    __slots__ = ()

    def label(self) -> str:
        """Human-readable type label used in diagnostics."""
        raise NotImplementedError

    def __str__(self) -> str:
        return self.label()


@dataclass(frozen=True, slots=True)
class Leaf(TypeSpec):
    name: str

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self.name.split("|"))

    def label(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Homogeneous(TypeSpec):
    inner: TypeSpec

    def label(self) -> str:
        return f"[{self.inner.label()}]"


@dataclass(frozen=True, slots=True)
class Operator(TypeSpec):
    kind: OperatorKind
    keyword: str
    operands: tuple[TypeSpec, ...]

    def label(self) -> str:
        inner = ", ".join(op.label() for op in self.operands)
        return f"{self.keyword}[{inner}]"


@dataclass(frozen=True, slots=True)
class TupleSpec(TypeSpec):
    items: tuple[TypeSpec, ...]
    keyword: str = "$tuple"

    def label(self) -> str:
        inner = ", ".join(item.label() for item in self.items)
        return f"{self.keyword}[{inner}]"


@dataclass(frozen=True, slots=True)
class Shape(TypeSpec):
    fields: tuple[tuple[Hashable, TypeSpec], ...]

    def label(self) -> str:
        inner = ", ".join(f"{key}: {spec.label()}" for key, spec in self.fields)
        return f"{{{inner}}}"


@dataclass(frozen=True, slots=True)
class Predicate(TypeSpec):
    fn: Callable[[Any], Any]

    def label(self) -> str:
        name = getattr(self.fn, "__name__", None)
        if not name or name == "<lambda>":
            return "<anonymous predicate>"
        return name


def parse_spec(raw: Any) -> TypeSpec:
    """Parse caller-supplied spec data into a :class:`TypeSpec` tree."""
    if isinstance(raw, TypeSpec):
        return raw
    if isinstance(raw, str):
        return Leaf(raw)
    if isinstance(raw, (list, tuple)):
        return _parse_list(list(raw))
    if isinstance(raw, Mapping):
        return _parse_mapping(raw)
    if callable(raw):
        return Predicate(raw)
    msg = f"Unsupported type spec {raw!r} ({type(raw).__name__})"
    raise SpecError(msg)


def _parse_list(raw: list[Any]) -> TypeSpec:
    if not raw:
        msg = "Sequence type specs must not be empty"
        raise SpecError(msg)
    if len(raw) == 1:
        return Homogeneous(parse_spec(raw[0]))
    keyword, *operands = raw
    return _build_operator(keyword, operands)


def _parse_mapping(raw: Mapping[Any, Any]) -> TypeSpec:
    if len(raw) == 1:
        ((key, operands),) = raw.items()
        if isinstance(key, str) and key.startswith(OPERATOR_PREFIX):
            if not isinstance(operands, (list, tuple)):
                operands = [operands]
            return _build_operator(key, list(operands))
    return Shape(tuple((key, parse_spec(value)) for key, value in raw.items()))


def _build_operator(keyword: Any, operands: list[Any]) -> TypeSpec:
    kind = OPERATOR_KEYWORDS.get(keyword) if isinstance(keyword, str) else None
    if kind is None:
        known = ", ".join(sorted(OPERATOR_KEYWORDS))
        msg = f"Unknown type spec operator {keyword!r} (expected one of: {known})"
        raise SpecError(msg)
    parsed = tuple(parse_spec(op) for op in operands)
    if kind is OperatorKind.TUPLE:
        return TupleSpec(parsed, keyword=keyword)
    if not parsed:
        msg = f"Operator {keyword!r} requires at least one operand"
        raise SpecError(msg)
    return Operator(kind, keyword, parsed)
