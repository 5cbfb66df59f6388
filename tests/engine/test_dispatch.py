"""Tests for query/assert/check dispatch and their negated twins."""

from __future__ import annotations

import enum
from typing import Any

import pytest

from typecheckers.context import TypeCheckContext
from typecheckers.errors import ExpectedTypeError, SpecError
from typecheckers.output.sinks import CollectingSink


class Priority(enum.IntEnum):
    HIGH = 1


class TestQuery:
    def test_returns_boolean(self, ctx: TypeCheckContext) -> None:
        assert ctx.is_("string|number", 1) is True
        assert ctx.is_("string|number", True) is False

    def test_is_silent(self, ctx: TypeCheckContext, sink: CollectingSink) -> None:
        ctx.is_({"a": "number"}, {"a": "x"})
        assert sink.records == []

    def test_negated(self, ctx: TypeCheckContext) -> None:
        assert ctx.is_.not_("string", 1) is True
        assert ctx.is_.not_("string", "x") is False

    def test_not_twin_is_cached_and_reversible(self, ctx: TypeCheckContext) -> None:
        assert ctx.is_.not_ is ctx.is_.not_
        assert ctx.is_.not_.not_ is ctx.is_
        assert ctx.is_.not_.negated

    def test_checker_shortcuts(self, ctx: TypeCheckContext) -> None:
        assert ctx.is_.number(3)
        assert ctx.is_.even(4)
        assert ctx.is_.not_.even(3)

    def test_unknown_shortcut_raises_attribute_error(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(AttributeError, match="no_such_checker"):
            ctx.is_.no_such_checker(1)

    def test_dir_lists_checkers(self, ctx: TypeCheckContext) -> None:
        names = dir(ctx.is_)
        assert "number" in names
        assert "even" in names

    def test_invalid_spec_raises(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(SpecError):
            ctx.is_([], [])


class TestAssert:
    def test_passing_returns_true(self, ctx: TypeCheckContext) -> None:
        assert ctx.assert_is({"a": "number"}, {"a": 1}, "payload") is True

    def test_message_format(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is("string|number", True, "flag")
        assert str(exc_info.value) == "Test flag expected string|number but got [boolean true]"

    def test_error_attributes(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is({"items": ["number"]}, {"items": [1, "x"]}, "order")
        err = exc_info.value
        assert err.path == ("order", "items", 1)
        assert err.description == "order.items.1"
        assert err.expected == "number"
        assert err.rendered == '[string "x"]'
        assert err.value == "x"

    def test_fails_fast_on_first_failure(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is({"a": "string", "b": "string"}, {"a": 1, "b": 2})
        assert exc_info.value.description == "a"

    def test_no_description(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError, match=r"^Test expected number but got \[null\]$"):
            ctx.assert_is("number", None)

    def test_empty_description_is_dropped(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError, match=r"^Test expected number but got \[null\]$"):
            ctx.assert_is("number", None, "")

    def test_negated_reports_once(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is.not_(["number"], [1, 2], "xs")
        assert str(exc_info.value) == "Test xs expected not [number] but got [array (2)]"
        assert exc_info.value.expected == "not [number]"

    def test_negated_passes(self, ctx: TypeCheckContext) -> None:
        assert ctx.assert_is.not_("null", 0, "x") is True

    def test_any_alternatives_are_not_reported(self, ctx: TypeCheckContext) -> None:
        assert ctx.assert_is(["$any", "even", "odd"], 2)
        with pytest.raises(ExpectedTypeError, match=r"expected \$any\[even, odd\]"):
            ctx.assert_is(["$any", "even", "odd"], 2.5)

    def test_shortcut(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError, match=r"^Test price expected number"):
            ctx.assert_is.number("9.99", "price")

    def test_expected_type_error_is_type_check_error(self, ctx: TypeCheckContext) -> None:
        from typecheckers.errors import TypeCheckError

        with pytest.raises(TypeCheckError):
            ctx.assert_is("string", 1)


class TestCheck:
    def test_reports_every_failure(self, ctx: TypeCheckContext, sink: CollectingSink) -> None:
        ok = ctx.check_is({"a": "string", "b": ["number"]}, {"a": 1, "b": [1, "x", None]}, "v")
        assert ok is False
        assert sink.messages("warning") == [
            "Test v.a expected string but got [number 1]",
            'Test v.b.1 expected number but got [string "x"]',
            "Test v.b.2 expected number but got [null]",
        ]

    def test_passing_is_quiet(self, ctx: TypeCheckContext, sink: CollectingSink) -> None:
        assert ctx.check_is(["number"], [1, 2]) is True
        assert sink.records == []

    def test_any_rejected_alternative_not_reported(
        self, ctx: TypeCheckContext, sink: CollectingSink
    ) -> None:
        assert ctx.check_is(["$any", "even", "odd"], 3) is True
        assert ctx.check_is(["$any", "even", "odd"], 2) is True
        assert sink.records == []

    def test_negated(self, ctx: TypeCheckContext, sink: CollectingSink) -> None:
        assert ctx.check_is.not_({"a": "number"}, {"a": 1}, "v") is False
        assert sink.messages("warning") == ["Test v expected not {a: number} but got [object dict]"]

    def test_huge_integers_do_not_crash(
        self, ctx: TypeCheckContext, sink: CollectingSink
    ) -> None:
        assert ctx.check_is("finite|string", 10**400, "n") is True
        assert ctx.is_("finite", 10**400) is True
        assert sink.records == []

    def test_negated_pass(self, ctx: TypeCheckContext, sink: CollectingSink) -> None:
        assert ctx.check_is.not_("string", 1) is True
        assert sink.records == []


class TestRendering:
    def test_int_enum_is_a_symbol_not_a_number(self, ctx: TypeCheckContext) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is("number", Priority.HIGH)
        assert str(exc_info.value) == "Test expected number but got [symbol (Priority.HIGH)]"
        assert ctx.is_("symbol", Priority.HIGH)

    @pytest.mark.parametrize(
        ("value", "rendered"),
        [
            (-0.0, "[number -0]"),
            ("x" * 40, '[string "' + "x" * 29 + '..." (40)]'),
            (2**60, f"[bigint {2**60}]"),
        ],
    )
    def test_values_in_messages(self, ctx: TypeCheckContext, value: Any, rendered: str) -> None:
        with pytest.raises(ExpectedTypeError) as exc_info:
            ctx.assert_is("boolean", value)
        assert str(exc_info.value) == f"Test expected boolean but got {rendered}"
