"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click, or explicit keyword arguments
  2. Env vars     — ``TYPECHECKERS_*`` prefix
  3. TOML file    — ``typecheckers.toml`` or ``[tool.typecheckers]`` in
     ``pyproject.toml``, discovered via walk-up
  4. Code defaults — baked into the models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from typecheckers.config.discovery import find_config, read_config_table
from typecheckers.config.logging import DiagnosticsLevel
from typecheckers.config.models import ContextOptions, PluginsConfig
from typecheckers.domain.types import UndotMode


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a discovered TOML config file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = read_config_table(toml_path)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise ValueError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class TypeCheckSettings(BaseSettings):
    """Settings shared by the factory and the CLI.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        undot: Default dotted-key expansion for shape matching.
        plugins: Whether and where to discover checker plugins.
        diagnostics_level: Threshold for check-mode warnings and context
            messages on stderr.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "TYPECHECKERS_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    undot: UndotMode | None = None
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    diagnostics_level: DiagnosticsLevel = "warning"

    # --- CLI flags ---
    json_output: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> TypeCheckSettings:
        """Discover the config file (or use *config_path*) and build settings.

        *overrides* take priority over env vars and the file.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None

    def context_options(self) -> ContextOptions:
        return ContextOptions(undot=self.undot)
