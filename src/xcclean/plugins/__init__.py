"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) plus ``~/.xcclean/plugins/*.py``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from xcclean.plugins.hookspecs import hookimpl
from xcclean.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
