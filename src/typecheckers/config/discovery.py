"""Config file discovery.

Walk-up finder locates ``typecheckers.toml`` (or a ``pyproject.toml`` with a
``[tool.typecheckers]`` table), similar to how git finds .git/.
Supports the TYPECHECKERS_CONFIG env var and --config CLI flag overrides.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "typecheckers.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "TYPECHECKERS_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) to the nearest config file.

    In each directory a dedicated ``typecheckers.toml`` beats a
    ``pyproject.toml``; the latter only counts when it carries a
    ``[tool.typecheckers]`` table. TYPECHECKERS_CONFIG short-circuits the walk.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        dedicated = directory / CONFIG_FILENAME
        if dedicated.is_file():
            return dedicated
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """Return the typecheckers settings table stored in *path*.

    Raises:
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    data = tomllib.loads(path.read_text(encoding="utf-8"))
    if path.name == PYPROJECT_FILENAME:
        table = data.get("tool", {}).get("typecheckers", {})
        return table if isinstance(table, dict) else {}
    return data


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return isinstance(data.get("tool", {}).get("typecheckers"), dict)
