"""Plugin discovery and checker collection.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
Each plugin may implement ``register_type_checkers`` to contribute leaf
checkers; tables are returned in registration order so that a later
plugin overrides an earlier one when merged.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any

import pluggy

from typecheckers.engine.dispatch import RESERVED_NAMES
from typecheckers.plugins.hookspecs import PROJECT_NAME, TypeCheckersHookSpec

DEFAULT_ENTRY_POINT_GROUP = "typecheckers.plugins"

logger = logging.getLogger(__name__)

CheckerTable = dict[str, Callable[[Any], bool]]


class PluginManager:
    """Manages plugin discovery, loading, and checker collection."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(TypeCheckersHookSpec)
        self._order: list[object] = []
        self._loaded: bool = False

    def discover_and_load(self, group: str = DEFAULT_ENTRY_POINT_GROUP) -> list[str]:
        """Load plugins advertised under the *group* entry-point group.

        Returns a list of registered plugin names.
        """
        try:
            self._pm.load_setuptools_entrypoints(group)
        except Exception:
            logger.warning("Failed to load plugins from entry point group %s", group, exc_info=True)
        self._normalize_plugin_instances()
        for plugin in self._pm.get_plugins():
            if plugin not in self._order:
                self._order.append(plugin)
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        self._order.append(plugin)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)
        if plugin in self._order:
            self._order.remove(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._order)

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._order]

    def collect_checkers(self) -> list[CheckerTable]:
        """Gather checker tables from every plugin, in registration order.

        A plugin that raises or returns something other than a mapping of
        names to callables is skipped with a warning.
        """
        tables: list[CheckerTable] = []
        for plugin in self._order:
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            table = self._checkers_from(plugin, plugin_name)
            if table:
                tables.append(table)
        return tables

    @staticmethod
    def _checkers_from(plugin: object, plugin_name: str) -> CheckerTable | None:
        hook = getattr(plugin, "register_type_checkers", None)
        if hook is None:
            return None

        try:
            table = hook()
        except Exception:
            logger.warning(
                "Failed to collect type checkers from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return None

        if table is None:
            return None
        if not isinstance(table, dict):
            logger.warning("Plugin %s returned non-dict checker registrations", plugin_name)
            return None

        accepted: CheckerTable = {}
        for name, checker in table.items():
            if (
                not isinstance(name, str)
                or not name
                or "|" in name
                or name in RESERVED_NAMES
                or not callable(checker)
            ):
                logger.warning(
                    "Skipping checker registration %r from plugin %s",
                    name,
                    plugin_name,
                )
                continue
            accepted[name] = checker
        return accepted

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            if plugin in self._order:
                self._order.remove(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)
