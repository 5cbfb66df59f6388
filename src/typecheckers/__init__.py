"""typecheckers: declarative runtime type checks with prefixed diagnostics.

Quick start::

    from typecheckers import with_type_checkers

    class Sample:
        types = with_type_checkers.attach()

        def double(self, x):
            self.types.assert_is.number(x, "x")
            return x * 2
"""

from typecheckers.context import (
    TypeCheckContext,
    TypeChecks,
    WithTypeCheckers,
    create_with_type_checkers,
    install_assert_api,
    install_check_api,
    install_query_api,
)
from typecheckers.domain.checkers import DEFAULT_CHECKERS, CheckerRegistry
from typecheckers.domain.spec import parse_spec
from typecheckers.domain.types import MISSING, UndotMode
from typecheckers.engine.matcher import Matcher, Outcome
from typecheckers.errors import ExpectedTypeError, SpecError, TypeCheckError
from typecheckers.output.messages import format_expected, format_value
from typecheckers.output.sinks import CollectingSink

__version__ = "0.3.0"

with_type_checkers = create_with_type_checkers()

__all__ = [
    "DEFAULT_CHECKERS",
    "MISSING",
    "CheckerRegistry",
    "CollectingSink",
    "ExpectedTypeError",
    "Matcher",
    "Outcome",
    "SpecError",
    "TypeCheckContext",
    "TypeCheckError",
    "TypeChecks",
    "UndotMode",
    "WithTypeCheckers",
    "__version__",
    "create_with_type_checkers",
    "format_expected",
    "format_value",
    "install_assert_api",
    "install_check_api",
    "install_query_api",
    "parse_spec",
    "with_type_checkers",
]
