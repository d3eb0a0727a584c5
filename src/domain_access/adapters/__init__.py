"""Adapters - concrete implementations of the domain collaborator contracts."""

from domain_access.adapters.memory import HostnameResolver, MemoryDomainDirectory, StaticResolver

__all__ = ["HostnameResolver", "MemoryDomainDirectory", "StaticResolver"]
