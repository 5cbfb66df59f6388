"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides a lazily built checker factory and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from typecheckers.output.formatters import format_result
from typecheckers.output.sinks import default_sink

if TYPE_CHECKING:
    from typecheckers.config.settings import TypeCheckSettings
    from typecheckers.context import WithTypeCheckers
    from typecheckers.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The factory (and with it plugin discovery) is created on first use so
    ``--help`` and ``--version`` never load plugins.
    """

    def __init__(self, settings: TypeCheckSettings) -> None:
        self.settings = settings
        self._factory: WithTypeCheckers | None = None

        from typecheckers.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            diagnostics_level=settings.diagnostics_level,
        )

    @property
    def factory(self) -> WithTypeCheckers:
        if self._factory is None:
            from typecheckers.context import create_with_type_checkers

            self._factory = create_with_type_checkers(settings=self.settings)
        return self._factory

    def emit(self, result: ServiceResult, *, fail_exit: bool = True) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: writes to stdout.
        * Failure: writes to stderr, exits with code 1 unless *fail_exit*
          is False.
        * Check mode, human output: each mismatch goes to the diagnostics
          stream instead of the result block, so ``diagnostics_level``
          decides whether it is shown.
        """
        json_output = self.settings.json_output
        warn_only = (
            not json_output and result.target is not None and result.target.mode == "check"
        )
        output = format_result(
            result, json_output=json_output, show_mismatches=not warn_only
        )
        if warn_only:
            sink = default_sink()
            for diagnostic in result.diagnostics:
                sink.warning(diagnostic)
        if result.ok:
            click.echo(output)
        else:
            click.echo(output, err=True)
        if not result.ok and fail_exit:
            raise SystemExit(1)
