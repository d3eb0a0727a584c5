"""Extension layer - access plugin slot via pluggy.

Discovery: built-in plugins plus entry_points (pip-installed).
INVARIANT: Plugin failures are warnings, never errors.
"""

from domain_access.plugins.manager import PluginManager

__all__ = ["PluginManager"]
