"""Extension layer — validation observers via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``.cmsctl/plugins/``.
INVARIANT: Plugin failures are warnings, never errors.
"""

from cmsctl.plugins.hookspecs import hookimpl
from cmsctl.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
