"""Plugin discovery, loading, and the access-plugin registry.

Discovery: the built-in domain plugin, then entry points in the
``domain_access.plugins`` group via pluggy's setuptools loader.
Each plugin may contribute access rule classes through the
``register_access_plugins`` hook; the manager collects them into a
registry keyed by plugin id.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from typing import Any

import pluggy

from domain_access.access.base import AccessPlugin
from domain_access.errors import UnknownAccessPluginError
from domain_access.plugins.hookspecs import PROJECT_NAME, DomainAccessHookSpec

ENTRY_POINT_GROUP = "domain_access.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and access plugin lookup."""

    def __init__(self, *, builtins: bool = True) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(DomainAccessHookSpec)
        self._access_plugins: dict[str, type[AccessPlugin]] = {}
        if builtins:
            from domain_access.plugins.builtins.domain import DomainAccessPlugin

            self.register_plugin(DomainAccessPlugin(), name="domain")

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and collect their access rules.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        for plugin in self._pm.get_plugins():
            self._collect_access_plugins(plugin, self._name_of(plugin))
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        self._collect_access_plugins(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance and drop the rules it contributed."""
        self._pm.unregister(plugin)
        contributed = self._contributions(plugin)
        for plugin_id, cls in contributed.items():
            if self._access_plugins.get(plugin_id) is cls:
                del self._access_plugins[plugin_id]

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._name_of(p) for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Access plugin registry
    # ------------------------------------------------------------------

    def access_plugin_ids(self) -> list[str]:
        """Return the ids of every available access rule."""
        return sorted(self._access_plugins)

    def get_access_plugin(self, plugin_id: str) -> type[AccessPlugin]:
        """Look up an access rule class by id.

        Raises:
            UnknownAccessPluginError: If no rule is registered under *plugin_id*.
        """
        try:
            return self._access_plugins[plugin_id]
        except KeyError:
            raise UnknownAccessPluginError(plugin_id) from None

    def create_access_plugin(
        self,
        plugin_id: str,
        options: Mapping[str, Any] | None,
        services: Mapping[str, Any],
    ) -> AccessPlugin:
        """Instantiate the rule registered as *plugin_id* via its factory."""
        cls = self.get_access_plugin(plugin_id)
        return cls.create(services, options, plugin_id=plugin_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _name_of(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

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

    @staticmethod
    def _contributions(plugin: object) -> dict[str, Any]:
        hook = getattr(plugin, "register_access_plugins", None)
        if hook is None:
            return {}
        try:
            result = hook()
        except Exception:
            logger.warning("Failed to collect access plugins from %r", plugin, exc_info=True)
            return {}
        if result is None:
            return {}
        if not isinstance(result, dict):
            logger.warning("Plugin %r returned non-dict access plugin registrations", plugin)
            return {}
        return result

    def _collect_access_plugins(self, plugin: object, plugin_name: str) -> None:
        """Register access rules exposed by a single plugin instance."""
        for plugin_id, cls in self._contributions(plugin).items():
            if not (inspect.isclass(cls) and issubclass(cls, AccessPlugin)):
                logger.warning(
                    "Skipping access plugin %r from %s: not an AccessPlugin subclass",
                    plugin_id,
                    plugin_name,
                )
                continue
            existing = self._access_plugins.get(plugin_id)
            if existing is not None and existing is not cls:
                logger.warning(
                    "Skipping access plugin %r from %s: id already registered",
                    plugin_id,
                    plugin_name,
                )
                continue
            self._access_plugins[plugin_id] = cls
