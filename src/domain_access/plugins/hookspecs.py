"""Pluggy hook specifications for domain-access plugin registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from domain_access.access.base import AccessPlugin

PROJECT_NAME = "domain_access"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class DomainAccessHookSpec:
    """Hook specifications for the domain-access plugin system."""

    @hookspec
    def register_access_plugins(self) -> dict[str, type[AccessPlugin]] | None:
        """Return plugin id -> AccessPlugin class mappings for the access slot."""
