"""Collaborator contracts consumed by the domain access rule.

The rule never loads or negotiates domains itself: a DomainDirectory
answers "which domains exist" and a DomainResolver answers "which one is
serving this request".
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain_access.domain.records import DomainId, DomainRecord


class DomainDirectory(abc.ABC):
    """Read access to the configured domain records."""

    @abc.abstractmethod
    def load(self, domain_id: DomainId) -> DomainRecord | None:
        """Return the record for *domain_id*, or None if it does not exist."""

    @abc.abstractmethod
    def load_multiple(self) -> list[DomainRecord]:
        """Return every record, ordered by weight then configuration order."""

    def load_options_list(self) -> dict[DomainId, str]:
        """Return an ``{id: label}`` mapping for administrative selection."""
        return {record.id: record.name for record in self.load_multiple()}

    def load_default(self) -> DomainRecord | None:
        """Return the default domain, or None if none is flagged default."""
        for record in self.load_multiple():
            if record.is_default:
                return record
        return None


class DomainResolver(abc.ABC):
    """Determines the active domain for the current request context."""

    @abc.abstractmethod
    def get_active_id(self) -> DomainId | None:
        """Return the active domain id, or None when no domain applies."""
