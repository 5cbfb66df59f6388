"""Pluggy hook specifications for typecheckers extensions.

One setup-time hook lets installed plugins contribute leaf checkers.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pluggy

PROJECT_NAME = "typecheckers"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class TypeCheckersHookSpec:
    """Hook specifications for the typecheckers plugin system."""

    @hookspec
    def register_type_checkers(self) -> dict[str, Callable[[Any], bool]] | None:
        """Return name -> predicate entries to merge over the default checkers."""
