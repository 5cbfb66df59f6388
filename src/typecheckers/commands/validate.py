"""Command: validate a JSON/YAML document against a type-spec file."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from typecheckers.commands._context import AppContext


@click.command()
@click.argument("spec_path", type=click.Path(path_type=Path))
@click.argument("value_path", type=click.Path(path_type=Path))
@click.option("--not", "negate", is_flag=True, help="Pass only when the value does NOT match.")
@click.option(
    "--undot",
    type=click.Choice(["shallow", "deep"]),
    default=None,
    help="Expand dotted keys in the value before shape matching.",
)
@click.option(
    "--warn-only",
    is_flag=True,
    help="Report every mismatch as a warning and exit 0.",
)
@click.option("--label", default=None, help="Prefix for diagnostics (default: value file name).")
@click.pass_obj
def validate(
    app: AppContext,
    spec_path: Path,
    value_path: Path,
    negate: bool,
    undot: str | None,
    warn_only: bool,
    label: str | None,
) -> None:
    """Check that VALUE_PATH matches the type-spec in SPEC_PATH."""
    from typecheckers.domain.types import UndotMode
    from typecheckers.services.document import ValidationService

    result = ValidationService(app.factory).validate(
        spec_path,
        value_path,
        mode="check" if warn_only else "assert",
        negate=negate,
        undot=UndotMode(undot) if undot else None,
        label=label,
    )
    app.emit(result, fail_exit=not warn_only)
