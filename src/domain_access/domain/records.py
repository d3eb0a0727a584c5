"""Domain records - one configured partition of a multi-site installation.

A domain is identified by a stable machine name, distinct from the DNS
hostname it answers on. Records are frozen once loaded.
"""

from __future__ import annotations

import re
from typing import TypeAlias

from pydantic import BaseModel, model_validator

DomainId: TypeAlias = str

CONFIG_DEPENDENCY_KEY = "config"
CONFIG_PREFIX = "domain.record"

_NON_MACHINE_CHARS = re.compile(r"[^a-z0-9_]+")


def domain_id_from_hostname(hostname: str) -> DomainId:
    """Derive a machine-name identifier from a hostname.

    Lowercases, drops any ``:port`` suffix, and replaces every run of
    characters outside ``[a-z0-9_]`` with a single underscore.

    >>> domain_id_from_hostname("Example.com:8080")
    'example_com'
    """
    host = hostname.strip().lower().split(":", 1)[0]
    return _NON_MACHINE_CHARS.sub("_", host).strip("_")


class DomainRecord(BaseModel):
    """A single configured domain."""

    model_config = {"frozen": True}

    id: DomainId = ""
    hostname: str
    name: str = ""
    is_default: bool = False
    status: bool = True
    weight: int = 0

    @model_validator(mode="before")
    @classmethod
    def _fill_derived(cls, data: object) -> object:
        if isinstance(data, dict) and data.get("hostname"):
            data = dict(data)
            if not data.get("id"):
                data["id"] = domain_id_from_hostname(data["hostname"])
            if not data.get("name"):
                data["name"] = data["hostname"]
        return data

    @property
    def config_dependency_key(self) -> str:
        """Dependency kind under which this record is reported."""
        return CONFIG_DEPENDENCY_KEY

    @property
    def config_dependency_name(self) -> str:
        """Fully qualified configuration name of this record."""
        return f"{CONFIG_PREFIX}.{self.id}"

    def matches_host(self, hostname: str) -> bool:
        """Case-insensitive hostname comparison, ignoring any port."""
        host = hostname.strip().lower().split(":", 1)[0]
        return host == self.hostname.strip().lower().split(":", 1)[0]
