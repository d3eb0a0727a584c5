"""Access layer - pluggable access rules for view displays."""

from domain_access.access.base import (
    CACHE_PERMANENT,
    AccessPlugin,
    CacheableDependency,
    FormState,
    PluginDefinition,
    Route,
)
from domain_access.access.rule import DomainAccessRule

__all__ = [
    "CACHE_PERMANENT",
    "AccessPlugin",
    "CacheableDependency",
    "DomainAccessRule",
    "FormState",
    "PluginDefinition",
    "Route",
]
