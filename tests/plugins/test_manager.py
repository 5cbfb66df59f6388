"""Tests for PluginManager: discovery, registration, and checker collection."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from typecheckers.context import create_with_type_checkers
from typecheckers.plugins import PluginManager, hookimpl


class _EvenPlugin:
    @hookimpl
    def register_type_checkers(self) -> dict[str, Any]:
        return {"even": lambda v: isinstance(v, int) and v % 2 == 0}


class _OverridePlugin:
    @hookimpl
    def register_type_checkers(self) -> dict[str, Any]:
        return {"even": lambda v: v == "even", "string": lambda v: v == "only"}


class _BrokenPlugin:
    @hookimpl
    def register_type_checkers(self) -> dict[str, Any]:
        raise RuntimeError("boom")


class _NotADictPlugin:
    @hookimpl
    def register_type_checkers(self) -> Any:
        return ["even"]


class _BadEntriesPlugin:
    @hookimpl
    def register_type_checkers(self) -> dict[Any, Any]:
        return {"": bool, "a|b": bool, "ok": bool, "not_callable": 3, 7: bool}


class _ShadowingPlugin:
    @hookimpl
    def register_type_checkers(self) -> dict[str, Any]:
        return {"negated": bool, "not_": bool, "even": bool}


class _SilentPlugin:
    """Plugin without the checker hook."""


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "register_type_checkers")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_EvenPlugin(), name="even")
        assert pm.list_plugin_names() == ["even"]

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_EvenPlugin())
        assert "_EvenPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _EvenPlugin()
        pm.register_plugin(plugin, name="even")
        pm.unregister(plugin)
        assert pm.list_plugin_names() == []
        assert pm.collect_checkers() == []

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_without_entry_points(self) -> None:
        pm = PluginManager()
        pm.discover_and_load("typecheckers.tests.no-such-group")
        assert pm.is_loaded is True
        assert pm.collect_checkers() == []

    def test_discover_failure_is_warning(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()

        def explode(group: str) -> int:
            raise ImportError("broken distribution")

        monkeypatch.setattr(pm._pm, "load_setuptools_entrypoints", explode)
        with caplog.at_level(logging.WARNING, logger="typecheckers.plugins.manager"):
            assert pm.discover_and_load() == []
        assert "Failed to load plugins" in caplog.text
        assert pm.is_loaded is True

    def test_plugin_classes_are_instantiated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        pm = PluginManager()

        def load_class(group: str) -> int:
            pm._pm.register(_EvenPlugin, name="even-ep")
            return 1

        monkeypatch.setattr(pm._pm, "load_setuptools_entrypoints", load_class)
        assert pm.discover_and_load() == ["even-ep"]
        (plugin,) = pm.get_plugins()
        assert isinstance(plugin, _EvenPlugin)
        (table,) = pm.collect_checkers()
        assert table["even"](2)


class TestCollectCheckers:
    def test_registration_order(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_EvenPlugin(), name="first")
        pm.register_plugin(_OverridePlugin(), name="second")
        tables = pm.collect_checkers()
        assert [sorted(t) for t in tables] == [["even"], ["even", "string"]]

    def test_plugin_without_hook_is_skipped(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_SilentPlugin())
        assert pm.collect_checkers() == []

    def test_raising_plugin_is_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BrokenPlugin(), name="broken")
        pm.register_plugin(_EvenPlugin(), name="even")
        with caplog.at_level(logging.WARNING, logger="typecheckers.plugins.manager"):
            tables = pm.collect_checkers()
        assert len(tables) == 1
        assert "Failed to collect type checkers from plugin broken" in caplog.text

    def test_non_dict_result_is_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_NotADictPlugin(), name="listy")
        with caplog.at_level(logging.WARNING, logger="typecheckers.plugins.manager"):
            assert pm.collect_checkers() == []
        assert "non-dict" in caplog.text

    def test_bad_entries_are_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        pm = PluginManager()
        pm.register_plugin(_BadEntriesPlugin(), name="messy")
        with caplog.at_level(logging.WARNING, logger="typecheckers.plugins.manager"):
            (table,) = pm.collect_checkers()
        assert list(table) == ["ok"]
        assert caplog.text.count("Skipping checker registration") == 4

    def test_dispatcher_attribute_names_are_skipped(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        pm = PluginManager()
        pm.register_plugin(_ShadowingPlugin(), name="shadow")
        with caplog.at_level(logging.WARNING, logger="typecheckers.plugins.manager"):
            (table,) = pm.collect_checkers()
        assert list(table) == ["even"]
        assert caplog.text.count("Skipping checker registration") == 2


class TestFactoryMerge:
    def test_plugins_merge_between_defaults_and_extra(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_EvenPlugin(), name="first")
        pm.register_plugin(_OverridePlugin(), name="second")
        factory = create_with_type_checkers({"string": lambda v: isinstance(v, str)}, plugins=pm)
        ctx = factory.context()
        assert ctx.is_("even", "even")
        assert not ctx.is_("even", 2)
        assert ctx.is_("string", "anything")
        assert ctx.is_("number", 1)
