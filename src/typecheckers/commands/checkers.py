"""Command: list registered leaf checkers."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from typecheckers.commands._context import AppContext


@click.command()
@click.pass_obj
def checkers(app: AppContext) -> None:
    """List the leaf checker names available to type-specs."""
    from typecheckers.services.document import ValidationService

    app.emit(ValidationService(app.factory).list_checkers())
