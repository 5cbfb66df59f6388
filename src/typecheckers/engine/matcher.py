"""Spec matcher: the recursive walker shared by every dispatch mode.

The matcher never decides what a failure *means*. Each leaf test (and each
combinator aggregate) is reported as an :class:`Outcome` to a callback; the
callback's return value says whether traversal may continue into sibling
branches. Query mode stops at the first failure, assert mode raises from
the callback, check mode records and keeps going.

INVARIANT: Matching never mutates the spec or the value.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from typecheckers.domain.checkers import CheckerRegistry, is_composite, is_sequence
from typecheckers.domain.spec import (
    Homogeneous,
    Leaf,
    Operator,
    Predicate,
    Shape,
    TupleSpec,
    TypeSpec,
    parse_spec,
)
from typecheckers.domain.types import MISSING, UndotMode
from typecheckers.domain.undot import get_undot
from typecheckers.engine.operators import OPERATOR_HANDLERS, apply_tuple

Path = tuple[Hashable, ...]


@dataclass(frozen=True)
class Outcome:
    """Result of one leaf test or one combinator aggregate."""

    ok: bool
    spec: TypeSpec
    value: Any
    path: Path = ()
    negated: bool = False

    @property
    def type(self) -> str:
        label = self.spec.label()
        return f"not {label}" if self.negated else label


OutcomeCallback = Callable[[Outcome], bool]


def silent(outcome: Outcome) -> bool:
    """Query callback: no side effect, continue only while passing."""
    return outcome.ok


class Matcher:
    """Walks parsed type-specs against values using a checker registry."""

    def __init__(
        self,
        registry: CheckerRegistry,
        *,
        undot: UndotMode | str | None = None,
    ) -> None:
        self.registry = registry
        self.undot_mode = UndotMode(undot) if undot is not None else None
        self._undot = get_undot(self.undot_mode)

    def match(
        self,
        spec: Any,
        value: Any,
        callback: OutcomeCallback = silent,
        path: Iterable[Hashable] = (),
    ) -> bool:
        """Parse *spec* and walk it against *value*, reporting to *callback*."""
        node = parse_spec(spec)
        return Traversal(self, callback).walk(node, value, tuple(path))

    def matches(self, spec: Any, value: Any) -> bool:
        return self.match(spec, value, silent)

    def undot(self, value: Any) -> Any:
        return self._undot(value)


class Traversal:
    """State of a single matching call.

    Each call gets its own traversal, so concurrent checks sharing one
    matcher never see each other's halt flag.
    """

    def __init__(self, matcher: Matcher, callback: OutcomeCallback) -> None:
        self.matcher = matcher
        self.callback = callback
        self.halted = False

    def walk(self, spec: TypeSpec, value: Any, path: Path) -> bool:
        if isinstance(spec, Leaf):
            return self._walk_leaf(spec, value, path)
        if isinstance(spec, Homogeneous):
            return self._walk_homogeneous(spec, value, path)
        if isinstance(spec, Operator):
            return OPERATOR_HANDLERS[spec.kind](self, spec, value, path)
        if isinstance(spec, TupleSpec):
            return apply_tuple(self, spec, value, path)
        if isinstance(spec, Shape):
            return self._walk_shape(spec, value, path)
        if isinstance(spec, Predicate):
            return self.settle(bool(spec.fn(value)), spec, value, path)
        msg = f"Cannot match unparsed spec node {spec!r}"
        raise TypeError(msg)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def report(self, ok: bool, spec: TypeSpec, value: Any, path: Path) -> bool:
        """Send one outcome to the callback; remember a stop signal."""
        keep_going = self.callback(Outcome(ok, spec, value, path))
        if not keep_going:
            self.halted = True
        return keep_going

    def settle(self, ok: bool, spec: TypeSpec, value: Any, path: Path) -> bool:
        """Report *ok* and return it, or False when the callback said stop."""
        if not self.report(ok, spec, value, path):
            return False
        return ok

    def conjunction(self, branches: Iterable[tuple[TypeSpec, Any, Path]]) -> bool:
        """Every branch must match; stop early only on a halt signal."""
        ok = True
        for spec, value, path in branches:
            if not self.walk(spec, value, path):
                ok = False
                if self.halted:
                    break
        return ok

    def probe(self, spec: TypeSpec, value: Any, path: Path) -> bool:
        """Evaluate *spec* as a silent boolean query, outside this traversal."""
        return Traversal(self.matcher, silent).walk(spec, value, path)

    # ------------------------------------------------------------------
    # Node kinds
    # ------------------------------------------------------------------

    def _walk_leaf(self, spec: Leaf, value: Any, path: Path) -> bool:
        registry = self.matcher.registry
        ok = False
        for name in spec.names:
            checker = registry.lookup(name)
            if checker is not None and checker(value):
                ok = True
                break
        return self.settle(ok, spec, value, path)

    def _walk_homogeneous(self, spec: Homogeneous, value: Any, path: Path) -> bool:
        if not is_sequence(value):
            return self.settle(False, spec, value, path)
        return self.conjunction(
            (spec.inner, item, (*path, index)) for index, item in enumerate(value)
        )

    def _walk_shape(self, spec: Shape, value: Any, path: Path) -> bool:
        if not is_composite(value):
            return self.settle(False, spec, value, path)
        target = self.matcher.undot(value)
        return self.conjunction(
            (field_spec, lookup_field(target, key), (*path, key)) for key, field_spec in spec.fields
        )


def lookup_field(container: Any, key: Hashable) -> Any:
    """Read *key* from a mapping, sequence index, or attribute; MISSING if absent."""
    if isinstance(container, Mapping):
        return container.get(key, MISSING)
    if is_sequence(container):
        if isinstance(key, int) and -len(container) <= key < len(container):
            return container[key]
        return MISSING
    if isinstance(key, str):
        return getattr(container, key, MISSING)
    return MISSING
