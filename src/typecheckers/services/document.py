"""ValidationService — match JSON/YAML documents against a type-spec file.

Specs loaded from files are plain data (strings, lists, mappings); callable
predicates are only available to Python callers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from typecheckers.context import WithTypeCheckers
from typecheckers.domain.types import UndotMode
from typecheckers.engine.dispatch import Dispatcher, OutcomePolicy
from typecheckers.engine.matcher import Outcome
from typecheckers.errors import SpecError
from typecheckers.output.messages import MessageFormatter, format_path, format_value
from typecheckers.services.result import (
    ErrorCode,
    Mismatch,
    Mode,
    ServiceError,
    ServiceResult,
    ValidationTarget,
)

logger = logging.getLogger(__name__)


class DocumentLoadError(Exception):
    """A spec or value document could not be read or parsed."""


def load_document(path: Path) -> Any:
    """Parse *path* as JSON (``.json``) or YAML (anything else)."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read {path}: {exc}"
        raise DocumentLoadError(msg) from exc

    try:
        if path.suffix.lower() == ".json":
            return json.loads(text)
        return YAML(typ="safe", pure=True).load(text)
    except (json.JSONDecodeError, YAMLError) as exc:
        msg = f"Cannot parse {path}: {exc}"
        raise DocumentLoadError(msg) from exc


class RecordingPolicy(OutcomePolicy):
    """Turns failing outcomes into :class:`Mismatch` entries.

    With ``fail_fast`` the first failure halts the traversal (assert mode);
    otherwise every failure is recorded (check mode).
    """

    def __init__(self, formatter: MessageFormatter, *, fail_fast: bool) -> None:
        self.formatter = formatter
        self.fail_fast = fail_fast
        self.mismatches: list[Mismatch] = []

    def __call__(self, outcome: Outcome) -> bool:
        if outcome.ok:
            return True
        self.mismatches.append(
            Mismatch(
                path=format_path(outcome.path),
                expected=outcome.type,
                got=format_value(outcome.value),
                message=self.formatter.format_expected(
                    path=outcome.path, type=outcome.type, value=outcome.value
                ),
            )
        )
        return not self.fail_fast


class ValidationService:
    """Runs assert/check dispatch over documents loaded from disk."""

    def __init__(self, factory: WithTypeCheckers) -> None:
        self._factory = factory

    def list_checkers(self) -> ServiceResult:
        return ServiceResult(ok=True, op="checkers", checkers=self._factory.registry.names())

    def validate(
        self,
        spec_path: Path,
        value_path: Path,
        *,
        mode: Mode = "assert",
        negate: bool = False,
        undot: UndotMode | None = None,
        label: str | None = None,
    ) -> ServiceResult:
        """Match the document at *value_path* against the spec at *spec_path*."""
        target = ValidationTarget(
            spec=str(spec_path), value=str(value_path), mode=mode, negated=negate
        )
        try:
            spec = load_document(spec_path)
            value = load_document(value_path)
        except DocumentLoadError as exc:
            return _failure(target, ErrorCode.LOAD_ERROR, str(exc))

        prefix = label or value_path.name
        policy = RecordingPolicy(MessageFormatter(lambda: [prefix]), fail_fast=mode == "assert")
        dispatcher = Dispatcher(self._factory.matcher(undot=undot), policy, negated=negate)
        try:
            ok = dispatcher(spec, value)
        except SpecError as exc:
            return _failure(target, ErrorCode.INVALID_SPEC, str(exc))

        if ok:
            return ServiceResult(ok=True, op="validate", target=target)
        logger.debug(
            "Validation of %s failed with %d mismatches", value_path, len(policy.mismatches)
        )
        message = policy.mismatches[0].message if policy.mismatches else "Value does not match spec"
        return _failure(target, ErrorCode.TYPE_MISMATCH, message, mismatches=policy.mismatches)


def _failure(
    target: ValidationTarget,
    code: ErrorCode,
    message: str,
    *,
    mismatches: list[Mismatch] | None = None,
) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op="validate",
        target=target,
        mismatches=mismatches or [],
        error=ServiceError(code=code, message=message),
    )
