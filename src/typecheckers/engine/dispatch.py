"""Outcome dispatchers — query, assert and check over one shared matcher.

The three modes differ only in the outcome callback:

- Query: returns the boolean, nothing else.
- Assert: raises :class:`ExpectedTypeError` on the first failing outcome.
- Check: sends the formatted failure to the diagnostic sink and continues.

Negated variants evaluate the spec as a silent query and apply the negation
once to the final result, never per leaf.

Every dispatcher also answers registry names as attributes::

    ctx.assert_is.number(x, "x")   # same as ctx.assert_is("number", x, "x")
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any

from typecheckers.domain.spec import Leaf, parse_spec
from typecheckers.engine.matcher import Matcher, Outcome, silent
from typecheckers.errors import ExpectedTypeError
from typecheckers.output.messages import MessageFormatter, format_path, format_value
from typecheckers.output.sinks import DiagnosticSink


class OutcomePolicy:
    """Decides what a failing outcome does. Base policy is the silent query."""

    def __call__(self, outcome: Outcome) -> bool:
        return outcome.ok


class AssertPolicy(OutcomePolicy):
    def __init__(self, formatter: MessageFormatter) -> None:
        self.formatter = formatter

    def __call__(self, outcome: Outcome) -> bool:
        if not outcome.ok:
            raise ExpectedTypeError(
                self.formatter.format_expected(
                    path=outcome.path, type=outcome.type, value=outcome.value
                ),
                path=outcome.path,
                description=format_path(outcome.path),
                expected=outcome.type,
                rendered=format_value(outcome.value),
                value=outcome.value,
            )
        return True


class CheckPolicy(OutcomePolicy):
    def __init__(self, formatter: MessageFormatter, sink: DiagnosticSink) -> None:
        self.formatter = formatter
        self.sink = sink

    def __call__(self, outcome: Outcome) -> bool:
        if not outcome.ok:
            self.sink.warning(
                self.formatter.format_expected(
                    path=outcome.path, type=outcome.type, value=outcome.value
                )
            )
        return True


class Dispatcher:
    """Callable entry point binding a matcher to one outcome policy."""

    def __init__(
        self,
        matcher: Matcher,
        policy: OutcomePolicy,
        *,
        negated: bool = False,
    ) -> None:
        self._matcher = matcher
        self._policy = policy
        self._negated = negated
        self._inverse: Dispatcher | None = None

    @property
    def negated(self) -> bool:
        return self._negated

    @property
    def not_(self) -> Dispatcher:
        """The negated twin of this dispatcher."""
        if self._inverse is None:
            self._inverse = Dispatcher(self._matcher, self._policy, negated=not self._negated)
            self._inverse._inverse = self
        return self._inverse

    def __call__(self, spec: Any, value: Any, description: Hashable | None = None) -> bool:
        node = parse_spec(spec)
        path: tuple[Hashable, ...] = () if description in (None, "") else (description,)
        if not self._negated:
            return self._matcher.match(node, value, self._policy, path)
        matched = self._matcher.match(node, value, silent, path)
        outcome = Outcome(not matched, node, value, path, negated=True)
        self._policy(outcome)
        return outcome.ok

    def __getattr__(self, name: str) -> Callable[..., bool]:
        if name.startswith("_"):
            raise AttributeError(name)
        if self._matcher.registry.lookup(name) is None:
            msg = f"{type(self).__name__} has no checker named {name!r}"
            raise AttributeError(msg)
        leaf = Leaf(name)

        def shortcut(value: Any, description: Hashable | None = None) -> bool:
            return self(leaf, value, description)

        shortcut.__name__ = name
        return shortcut

    def __dir__(self) -> list[str]:
        return sorted({*super().__dir__(), *self._matcher.registry.names()})

    def __repr__(self) -> str:
        mode = type(self._policy).__name__
        return f"<Dispatcher {mode}{' negated' if self._negated else ''}>"


# Public dispatcher attributes shadow checker shortcuts of the same name.
RESERVED_NAMES = frozenset(name for name in dir(Dispatcher) if not name.startswith("_"))


def make_query(matcher: Matcher) -> Dispatcher:
    return Dispatcher(matcher, OutcomePolicy())


def make_assert(matcher: Matcher, formatter: MessageFormatter) -> Dispatcher:
    return Dispatcher(matcher, AssertPolicy(formatter))


def make_check(matcher: Matcher, formatter: MessageFormatter, sink: DiagnosticSink) -> Dispatcher:
    return Dispatcher(matcher, CheckPolicy(formatter, sink))
