"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, domain_access.toml only
contains overrides. A usable file needs only ``[[domains]]`` entries and
the ``[views.*]`` that should be gated. The root document is assembled
by :class:`domain_access.config.settings.DomainAccessSettings`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    fallback_to_default: bool = True


class AccessConfig(BaseModel):
    """[views.<name>.access] section.

    ``plugin`` selects the access rule; every other key is passed to the
    rule as an option (e.g. ``domain = ["example_com"]``).
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    plugin: str = "domain"

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})


class ViewConfig(BaseModel):
    """[views.<name>] section."""

    model_config = {"frozen": True}

    path: str | None = None
    access: AccessConfig | None = None

