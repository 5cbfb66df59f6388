"""Typed results returned by :class:`ValidationService` to the CLI.

A failing validation carries one :class:`Mismatch` per reported outcome
(one in assert mode, every failure in check mode), so JSON consumers get
the path, the expected label and the rendered value without parsing the
diagnostic text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, Field

Mode = Literal["assert", "check"]


class ErrorCode(StrEnum):
    LOAD_ERROR = "LOAD_ERROR"
    INVALID_SPEC = "INVALID_SPEC"
    TYPE_MISMATCH = "TYPE_MISMATCH"


class Mismatch(BaseModel):
    """One failing outcome.

    Attributes:
        path: Dotted location inside the value (``""`` for the root).
        expected: Spec label, ``not <label>`` for negated checks.
        got: Bounded rendering of the offending value.
        message: The full prefixed diagnostic line.
    """

    model_config = {"frozen": True}

    path: str
    expected: str
    got: str
    message: str


class ValidationTarget(BaseModel):
    """What a ``validate`` call was asked to do."""

    model_config = {"frozen": True}

    spec: str
    value: str
    mode: Mode = "assert"
    negated: bool = False


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: ErrorCode
    message: str


class ServiceResult(BaseModel):
    """Outcome of ``checkers`` or ``validate``.

    INVARIANT: ``ok`` is False exactly when ``error`` is set.
    """

    model_config = {"frozen": True}

    ok: bool
    op: Literal["checkers", "validate"]
    target: ValidationTarget | None = None
    checkers: list[str] = Field(default_factory=list)
    mismatches: list[Mismatch] = Field(default_factory=list)
    error: ServiceError | None = None

    @property
    def diagnostics(self) -> list[str]:
        return [mismatch.message for mismatch in self.mismatches]
