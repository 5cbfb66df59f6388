"""Shared pytest fixtures for typecheckers tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from typecheckers.config.logging import DIAGNOSTICS_LOGGER, PACKAGE_LOGGER
from typecheckers.context import TypeCheckContext, WithTypeCheckers, create_with_type_checkers
from typecheckers.output.sinks import CollectingSink


def is_even(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value % 2 == 0


def is_odd(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value % 2 == 1


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo whatever configure_logging installed during a test."""
    root = logging.getLogger()
    package = logging.getLogger(PACKAGE_LOGGER)
    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
    root_state = (root.handlers[:], root.level)
    package_level = package.level
    diagnostics_state = (diagnostics.handlers[:], diagnostics.level, diagnostics.propagate)
    yield
    root.handlers, level = root_state
    root.setLevel(level)
    package.setLevel(package_level)
    diagnostics.handlers, level, diagnostics.propagate = diagnostics_state
    diagnostics.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def sink() -> CollectingSink:
    return CollectingSink()


@pytest.fixture
def factory(sink: CollectingSink) -> WithTypeCheckers:
    """Factory with the default checkers plus ``even``/``odd``."""
    return create_with_type_checkers({"even": is_even, "odd": is_odd}, sink=sink)


@pytest.fixture
def ctx(factory: WithTypeCheckers) -> TypeCheckContext:
    """Free-standing context with the prefix ``Test``."""
    return factory.context("Test")
