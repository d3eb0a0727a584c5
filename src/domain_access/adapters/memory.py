"""In-memory domain directory and request resolvers.

The directory is built once from configuration and is read-only afterwards,
so a single instance can be shared by every request. Resolvers are
request-scoped: construct one per incoming host.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from domain_access.domain.contracts import DomainDirectory, DomainResolver
from domain_access.domain.records import DomainId, DomainRecord
from domain_access.errors import DuplicateDomainError

logger = logging.getLogger(__name__)


class MemoryDomainDirectory(DomainDirectory):
    """Dict-backed directory preserving configuration order."""

    def __init__(self, records: Iterable[DomainRecord] = ()) -> None:
        self._records: dict[DomainId, DomainRecord] = {}
        for record in records:
            if record.id in self._records:
                raise DuplicateDomainError(record.id)
            self._records[record.id] = record

    def load(self, domain_id: DomainId) -> DomainRecord | None:
        return self._records.get(domain_id)

    def load_multiple(self) -> list[DomainRecord]:
        # sorted() is stable, so equal weights keep configuration order
        return sorted(self._records.values(), key=lambda r: r.weight)

    def find_by_hostname(self, hostname: str) -> DomainRecord | None:
        """Return the active record answering on *hostname*, if any."""
        for record in self.load_multiple():
            if record.status and record.matches_host(hostname):
                return record
        return None


class HostnameResolver(DomainResolver):
    """Negotiates the active domain from the request hostname.

    Falls back to the default domain when no active record matches and
    ``fallback_to_default`` is set. A disabled default is never used.
    """

    def __init__(
        self,
        directory: MemoryDomainDirectory,
        hostname: str | None,
        *,
        fallback_to_default: bool = True,
    ) -> None:
        self._directory = directory
        self._hostname = hostname
        self._fallback = fallback_to_default

    def get_active_id(self) -> DomainId | None:
        record = None
        if self._hostname:
            record = self._directory.find_by_hostname(self._hostname)
        if record is None and self._fallback:
            record = self._directory.load_default()
            if record is not None and not record.status:
                record = None
            if record is not None:
                logger.debug("No domain for host %r, using default %s", self._hostname, record.id)
        return record.id if record is not None else None


class StaticResolver(DomainResolver):
    """Always reports the same active domain id (or none)."""

    def __init__(self, domain_id: DomainId | None = None) -> None:
        self._domain_id = domain_id or None

    def get_active_id(self) -> DomainId | None:
        return self._domain_id
