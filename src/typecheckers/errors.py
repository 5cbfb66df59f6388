"""Exception hierarchy for typecheckers.

Two failure categories:
- Validation failures raise :class:`ExpectedTypeError` (assert mode only).
- Malformed specs raise :class:`SpecError` in every mode.
"""

from __future__ import annotations

from typing import Any


class TypeCheckError(Exception):
    """Base error; ``str(err)`` is the fully prefixed diagnostic."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ExpectedTypeError(TypeCheckError):
    """A value did not satisfy its type-spec in assert mode."""

    def __init__(
        self,
        message: str,
        *,
        path: tuple[Any, ...] = (),
        description: str = "",
        expected: str = "",
        rendered: str = "",
        value: Any = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.description = description
        self.expected = expected
        self.rendered = rendered
        self.value = value


class SpecError(TypeCheckError, ValueError):
    """A type-spec is malformed (empty sequence spec, unknown operator, ...)."""
