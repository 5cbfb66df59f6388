"""Context installer — binds dispatchers and formatters to a prefix.

Host classes hold a :class:`TypeChecks` descriptor instead of inheriting a
mixin. Reading it from the class yields a class-level context; reading it
from an instance yields an instance-level context whose prefix also carries
the instance label::

    class Invoice:
        types = with_type_checkers.attach(instance_prefix=lambda inv: f"#{inv.number}")

        def __init__(self, number: int) -> None:
            self.number = number

        def add_line(self, price: object) -> None:
            self.types.assert_is.number(price, "price")

    Invoice(42).add_line("9.99")
    # ExpectedTypeError: Invoice #42 price expected number but got [string "9.99"]

Prefixes are provider callables evaluated per message, never cached across
installations.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from typecheckers.config.models import ContextOptions
from typecheckers.config.settings import TypeCheckSettings
from typecheckers.domain.checkers import DEFAULT_CHECKERS, Checker, CheckerRegistry
from typecheckers.domain.types import UndotMode
from typecheckers.engine.dispatch import (
    RESERVED_NAMES,
    Dispatcher,
    make_assert,
    make_check,
    make_query,
)
from typecheckers.engine.matcher import Matcher
from typecheckers.errors import TypeCheckError
from typecheckers.output.messages import MessageFormatter, PrefixProvider, format_expected
from typecheckers.output.sinks import DiagnosticSink, default_sink
from typecheckers.plugins.manager import PluginManager

ClassPrefix = str | Callable[[], str] | None
InstancePrefix = str | Callable[[Any], Any] | None


# ---------------------------------------------------------------------------
# Install entry points
# ---------------------------------------------------------------------------


def install_query_api(matcher: Matcher) -> Dispatcher:
    """Silent boolean query dispatcher (``is_``)."""
    return make_query(matcher)


def install_assert_api(matcher: Matcher, prefix: PrefixProvider) -> Dispatcher:
    """Raising dispatcher (``assert_is``) bound to *prefix*."""
    return make_assert(matcher, MessageFormatter(prefix))


def install_check_api(matcher: Matcher, prefix: PrefixProvider, sink: DiagnosticSink) -> Dispatcher:
    """Warning dispatcher (``check_is``) bound to *prefix* and *sink*."""
    return make_check(matcher, MessageFormatter(prefix), sink)


def class_prefix_provider(class_label: str | None) -> PrefixProvider:
    return lambda: [class_label]


def instance_prefix_provider(
    class_label: str | None,
    instance_label: InstancePrefix,
    instance: Any,
) -> PrefixProvider:
    """Prefix ``[class_label, instance_label(instance)]``, evaluated per message."""
    if instance_label is None:
        return lambda: [class_label]
    if isinstance(instance_label, str):
        attr = instance_label
        return lambda: [class_label, getattr(instance, attr, None)]
    label_fn = instance_label
    return lambda: [class_label, label_fn(instance)]


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


class TypeCheckContext:
    """The full checking API bound to one prefix.

    Attributes:
        is_: Boolean query; ``is_.not_`` negates it.
        assert_is: Raises :class:`ExpectedTypeError` on failure.
        check_is: Warns to the sink on failure and returns the result.
    """

    def __init__(self, matcher: Matcher, prefix: PrefixProvider, sink: DiagnosticSink) -> None:
        self.matcher = matcher
        self.sink = sink
        self.formatter = MessageFormatter(prefix)
        self.is_ = install_query_api(matcher)
        self.assert_is = install_assert_api(matcher, prefix)
        self.check_is = install_check_api(matcher, prefix, sink)

    @property
    def registry(self) -> CheckerRegistry:
        return self.matcher.registry

    def prefix(self) -> list[Any]:
        return self.formatter.prefix()

    # --- generic assertions ---

    def assert_(self, ok: Any, message: str = "") -> None:
        if not ok:
            self.throw(message)

    def assert_not(self, ok: Any, message: str = "") -> None:
        if ok:
            self.throw(message)

    def check(self, ok: Any, message: str = "") -> bool:
        if not ok:
            self.sink.warning(self.format_message(message))
        return bool(ok)

    def check_not(self, ok: Any, message: str = "") -> bool:
        if ok:
            self.sink.warning(self.format_message(message))
        return not ok

    # --- prefixed logging ---

    def log(self, *args: Any) -> None:
        self.sink.info(self.format_message(_join(args)))

    def warn(self, *args: Any) -> None:
        self.sink.warning(self.format_message(_join(args)))

    def error(self, message: Any) -> None:
        self.sink.error(self.format_message(message))

    def debug(self, message: Any) -> None:
        self.sink.debug(self.format_message(message))

    def throw(self, message: Any = "") -> None:
        raise TypeCheckError(self.format_message(message))

    # --- formatting ---

    def format_message(self, message: Any = "") -> str:
        return self.formatter.format_message(message)

    def format_expected(self, *, type: str, value: Any, path: Sequence[Any] = ()) -> str:
        return format_expected(prefix=self.prefix(), path=path, type=type, value=value)

    def __repr__(self) -> str:
        return f"<TypeCheckContext prefix={self.prefix()!r}>"


def _join(args: Sequence[Any]) -> str:
    return " ".join(str(arg) for arg in args)


# ---------------------------------------------------------------------------
# Class attachment
# ---------------------------------------------------------------------------


class TypeChecks:
    """Descriptor exposing a class context on the class and an instance
    context on each instance.

    The instance context is built on first access and stored in the
    instance ``__dict__`` under the same name, so later reads skip the
    descriptor entirely.
    """

    def __init__(
        self,
        factory: WithTypeCheckers,
        *,
        class_prefix: ClassPrefix = None,
        instance_prefix: InstancePrefix = None,
        undot: UndotMode | str | None = None,
    ) -> None:
        self._factory = factory
        self._class_prefix = class_prefix
        self._instance_prefix = instance_prefix
        self._matcher = factory.matcher(undot=undot)
        self._name: str | None = None
        self._class_contexts: weakref.WeakKeyDictionary[type, TypeCheckContext] = (
            weakref.WeakKeyDictionary()
        )

    def __set_name__(self, owner: type, name: str) -> None:
        self._name = name

    def class_label(self, owner: type) -> str | None:
        label = self._class_prefix
        if callable(label):
            return label()
        return label if label is not None else owner.__name__

    def __get__(self, instance: Any, owner: type | None = None) -> TypeCheckContext:
        if owner is None:
            owner = type(instance)
        if instance is None:
            ctx = self._class_contexts.get(owner)
            if ctx is None:
                prefix = class_prefix_provider(self.class_label(owner))
                ctx = self._factory.build_context(self._matcher, prefix)
                self._class_contexts[owner] = ctx
            return ctx

        prefix = instance_prefix_provider(self.class_label(owner), self._instance_prefix, instance)
        ctx = self._factory.build_context(self._matcher, prefix)
        if self._name is not None and hasattr(instance, "__dict__"):
            instance.__dict__[self._name] = ctx
        return ctx


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------


class WithTypeCheckers:
    """Factory holding one merged checker registry.

    Merge order: default checkers, plugin checkers, then *extra_checkers*;
    later entries win on name collision.
    """

    def __init__(
        self,
        extra_checkers: Mapping[str, Checker] | None = None,
        *,
        settings: TypeCheckSettings | None = None,
        sink: DiagnosticSink | None = None,
        plugins: PluginManager | None = None,
    ) -> None:
        clashes = sorted(RESERVED_NAMES.intersection(extra_checkers or {}))
        if clashes:
            msg = f"Checker names {clashes} clash with dispatcher attributes"
            raise ValueError(msg)
        if plugins is None and settings is not None and settings.plugins.enabled:
            plugins = PluginManager()
            plugins.discover_and_load(settings.plugins.entry_point_group)
        plugin_tables = plugins.collect_checkers() if plugins is not None else []

        self.registry = CheckerRegistry.merged(DEFAULT_CHECKERS, *plugin_tables, extra_checkers)
        self.options = settings.context_options() if settings is not None else ContextOptions()
        self.sink = sink if sink is not None else default_sink()

    def matcher(self, *, undot: UndotMode | str | None = None) -> Matcher:
        return Matcher(self.registry, undot=undot if undot is not None else self.options.undot)

    def build_context(self, matcher: Matcher, prefix: PrefixProvider) -> TypeCheckContext:
        return TypeCheckContext(matcher, prefix, self.sink)

    def context(
        self,
        prefix: str | Sequence[str] | PrefixProvider | None = None,
        *,
        undot: UndotMode | str | None = None,
    ) -> TypeCheckContext:
        """Free-standing context; *prefix* may be a label, labels, or a provider."""
        if callable(prefix):
            provider: PrefixProvider = prefix
        elif isinstance(prefix, str) or prefix is None:
            provider = class_prefix_provider(prefix)
        else:
            labels = list(prefix)

            def provider() -> list[str]:
                return labels

        return self.build_context(self.matcher(undot=undot), provider)

    def attach(
        self,
        class_prefix: ClassPrefix = None,
        instance_prefix: InstancePrefix = None,
        *,
        undot: UndotMode | str | None = None,
    ) -> TypeChecks:
        """Descriptor to place on a host class."""
        return TypeChecks(
            self,
            class_prefix=class_prefix,
            instance_prefix=instance_prefix,
            undot=undot,
        )


def create_with_type_checkers(
    extra_checkers: Mapping[str, Checker] | None = None,
    *,
    settings: TypeCheckSettings | None = None,
    sink: DiagnosticSink | None = None,
    plugins: PluginManager | None = None,
) -> WithTypeCheckers:
    """Build a factory with *extra_checkers* merged over the defaults."""
    return WithTypeCheckers(extra_checkers, settings=settings, sink=sink, plugins=plugins)
