"""Root CLI group for typecheckers with global flags and command registration."""

from __future__ import annotations

from typing import Any

import click

from typecheckers import __version__
from typecheckers.commands import register_commands
from typecheckers.commands._context import AppContext
from typecheckers.config.settings import TypeCheckSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="typecheckers")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option(
    "--diagnostics-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Threshold for check-mode warnings (default from config: warning).",
)
@click.option("--no-plugins", is_flag=True, help="Skip checker plugin discovery.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    diagnostics_level: str | None,
    no_plugins: bool,
    config_path: str | None,
) -> None:
    """typecheckers — declarative runtime type checks."""
    overrides: dict[str, Any] = {
        "json_output": json_output,
        "verbose": verbose,
        "log_json": log_json,
    }
    if diagnostics_level is not None:
        overrides["diagnostics_level"] = diagnostics_level
    if no_plugins:
        overrides["plugins"] = {"enabled": False}
    settings = TypeCheckSettings.load(config_path=config_path, **overrides)
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
