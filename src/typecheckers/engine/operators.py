"""Logical combinators over sub-specs.

``$all`` is a plain conjunction: each operand's leaves are reported one by
one. ``$any`` and ``$not`` probe their operands silently and report only the
aggregate, so a rejected alternative never surfaces as its own diagnostic.
``$tuple`` matches operand *i* against element *i*.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Any

from typecheckers.domain.checkers import is_sequence
from typecheckers.domain.spec import Operator, TupleSpec
from typecheckers.domain.types import OperatorKind

if TYPE_CHECKING:
    from typecheckers.engine.matcher import Traversal

Path = tuple[Hashable, ...]
OperatorHandler = Callable[["Traversal", Operator, Any, Path], bool]


def apply_all(traversal: Traversal, spec: Operator, value: Any, path: Path) -> bool:
    return traversal.conjunction((operand, value, path) for operand in spec.operands)


def apply_any(traversal: Traversal, spec: Operator, value: Any, path: Path) -> bool:
    ok = any(traversal.probe(operand, value, path) for operand in spec.operands)
    return traversal.settle(ok, spec, value, path)


def apply_not(traversal: Traversal, spec: Operator, value: Any, path: Path) -> bool:
    ok = not any(traversal.probe(operand, value, path) for operand in spec.operands)
    return traversal.settle(ok, spec, value, path)


def apply_tuple(traversal: Traversal, spec: TupleSpec, value: Any, path: Path) -> bool:
    if not is_sequence(value) or len(value) != len(spec.items):
        return traversal.settle(False, spec, value, path)
    return traversal.conjunction(
        (item_spec, item, (*path, index))
        for index, (item_spec, item) in enumerate(zip(spec.items, value, strict=True))
    )


OPERATOR_HANDLERS: dict[OperatorKind, OperatorHandler] = {
    OperatorKind.ALL: apply_all,
    OperatorKind.ANY: apply_any,
    OperatorKind.NOT: apply_not,
}
