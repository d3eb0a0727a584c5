"""Domain layer - domain records and collaborator contracts.

This layer depends only on stdlib and pydantic.
It must never import from services, adapters, commands, or config.
"""

from domain_access.domain.contracts import DomainDirectory, DomainResolver
from domain_access.domain.records import DomainId, DomainRecord, domain_id_from_hostname

__all__ = [
    "DomainDirectory",
    "DomainId",
    "DomainRecord",
    "DomainResolver",
    "domain_id_from_hostname",
]
