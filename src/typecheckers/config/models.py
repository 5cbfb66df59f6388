"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, the config file only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel

from typecheckers.domain.types import UndotMode


class ContextOptions(BaseModel):
    """Options applied to every context a factory installs."""

    model_config = {"frozen": True}

    undot: UndotMode | None = None


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    entry_point_group: str = "typecheckers.plugins"
