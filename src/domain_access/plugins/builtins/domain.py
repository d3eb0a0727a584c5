"""Built-in plugin contributing the ``domain`` access rule."""

from __future__ import annotations

from domain_access.access.base import AccessPlugin
from domain_access.access.rule import DomainAccessRule
from domain_access.plugins.hookspecs import hookimpl


class DomainAccessPlugin:
    """Registers DomainAccessRule under its definition id."""

    @hookimpl
    def register_access_plugins(self) -> dict[str, type[AccessPlugin]]:
        return {DomainAccessRule.DEFINITION.id: DomainAccessRule}
