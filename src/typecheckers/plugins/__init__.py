"""Extension layer — checker plugins via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from typecheckers.plugins.hookspecs import hookimpl
from typecheckers.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
