"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from typecheckers.config.logging import PACKAGE_LOGGER, configure_logging, render_diagnostic
from typecheckers.output.sinks import DIAGNOSTICS_LOGGER, default_sink


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("typecheckers.test")
        log.warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "typecheckers.test"
        assert "timestamp" in parsed

    def test_diagnostics_reach_stderr(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        default_sink().warning("Test a expected number but got [null]")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Test a expected number but got [null]"
        assert parsed["logger"] == DIAGNOSTICS_LOGGER

    def test_debug_hidden_unless_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("typecheckers.domain.checkers").debug("Checker 'x' overridden")
        assert capfd.readouterr().err == ""

    def test_stdlib_logger_gets_structured_fields(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("typecheckers.plugins.manager").debug("Registered plugin: extras")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Registered plugin: extras"
        assert parsed["level"] == "debug"
        assert parsed["logger"] == "typecheckers.plugins.manager"

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("pluggy").debug("hook noise")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestDiagnosticsStream:
    def test_human_line(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        default_sink().warning("doc id expected integer but got [null]")
        assert capfd.readouterr().err == "WARNING: doc id expected integer but got [null]\n"

    def test_does_not_propagate_to_root(self) -> None:
        configure_logging()
        diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER)
        assert diagnostics.propagate is False
        assert len(diagnostics.handlers) == 1

    def test_default_threshold_hides_info(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        default_sink().info("Test hello")
        assert capfd.readouterr().err == ""

    def test_error_threshold_hides_warnings(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(diagnostics_level="error")
        sink = default_sink()
        sink.warning("doc a expected number but got [null]")
        sink.error("Test broken")
        assert capfd.readouterr().err == "ERROR: Test broken\n"

    def test_info_threshold(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(diagnostics_level="info")
        default_sink().info("Test hello")
        assert capfd.readouterr().err == "INFO: Test hello\n"

    def test_verbose_shows_debug(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, diagnostics_level="error")
        default_sink().debug("Test detail")
        assert capfd.readouterr().err == "DEBUG: Test detail\n"

    def test_library_logs_keep_the_console_renderer(
        self, capfd: pytest.CaptureFixture[str]
    ) -> None:
        configure_logging()
        logging.getLogger("typecheckers.plugins.manager").warning("Failed to load plugins")
        err = capfd.readouterr().err
        assert "Failed to load plugins" in err
        assert not err.startswith("WARNING: ")


class TestRenderDiagnostic:
    def test_drops_chain_keys(self) -> None:
        event = {
            "event": "x expected number but got [null]",
            "level": "warning",
            "logger": DIAGNOSTICS_LOGGER,
            "timestamp": "2026-01-01T00:00:00Z",
        }
        assert render_diagnostic(None, "warning", event) == (
            "WARNING: x expected number but got [null]"
        )

    def test_appends_bound_fields(self) -> None:
        event = {"event": "Test hello", "level": "info", "source": "ctx"}
        assert render_diagnostic(None, "info", event) == "INFO: Test hello source=ctx"
