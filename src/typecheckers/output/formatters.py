"""Rich/JSON output helpers for the CLI.

The CLI renders ServiceResult for humans (Rich markup) or machines (--json).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.markup import escape
from rich.table import Table

from typecheckers.output.console import create_console, get_output

if TYPE_CHECKING:
    from typecheckers.services.result import Mismatch, ServiceResult, ValidationTarget


def _format_target_human(target: ValidationTarget) -> list[str]:
    lines = [
        f"  [tc.key]spec:[/tc.key] {escape(target.spec)}",
        f"  [tc.key]value:[/tc.key] {escape(target.value)}",
        f"  [tc.key]mode:[/tc.key] {target.mode}",
    ]
    if target.negated:
        lines.append("  [tc.key]negated:[/tc.key] true")
    return lines


def _format_mismatch_human(mismatch: Mismatch) -> str:
    where = mismatch.path or "<root>"
    return (
        f"  [tc.key]{escape(where)}:[/tc.key] expected {escape(mismatch.expected)}"
        f" but got {escape(mismatch.got)}"
    )


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    no_color: bool = False,
    show_mismatches: bool = True,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
        no_color: Disable ANSI escape codes.
        show_mismatches: List each mismatch under the headline (human mode).
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console(no_color=no_color)
    if result.ok:
        console.print(f"[tc.ok]OK[/tc.ok]: [tc.op]{result.op}[/tc.op]")
    else:
        message = result.error.message if result.error else "Unknown error"
        code = result.error.code if result.error else "ERROR"
        console.print(
            f"[tc.error]{code}[/tc.error]: [tc.op]{result.op}[/tc.op] - {escape(message)}"
        )
    if result.target is not None:
        for line in _format_target_human(result.target):
            console.print(line)
    if result.op == "checkers":
        console.print(f"  [tc.key]count:[/tc.key] {len(result.checkers)}")
        console.print(_checker_table(result.checkers))
    if show_mismatches:
        for mismatch in result.mismatches:
            console.print(_format_mismatch_human(mismatch))
    return get_output(console).rstrip("\n")


def _checker_table(names: list[str]) -> Table:
    table = Table(show_header=True, header_style="tc.op", box=None)
    table.add_column("checker")
    for name in names:
        table.add_row(name)
    return table
