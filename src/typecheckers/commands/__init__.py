"""Subcommand modules for the typecheckers CLI.

Provides register_commands() which uses deferred imports to keep
``typecheckers --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from typecheckers.commands.checkers import checkers
    from typecheckers.commands.validate import validate

    cli.add_command(checkers)
    cli.add_command(validate)
