"""Errors raised by the domain access rule and its collaborators."""

from __future__ import annotations


class DomainAccessError(Exception):
    """Base class for all domain-access errors."""


class OptionsValidationError(DomainAccessError):
    """Raised when a submitted access options form fails validation.

    Attributes:
        field: Name of the form element the error is attached to.
    """

    def __init__(self, message: str, field: str = "domain") -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class DuplicateDomainError(DomainAccessError):
    """Raised when two domain records share the same identifier."""

    def __init__(self, domain_id: str) -> None:
        super().__init__(f"Domain ({domain_id}) is defined more than once")
        self.domain_id = domain_id


class UnknownAccessPluginError(DomainAccessError):
    """Raised when no access plugin is registered under the requested id."""

    def __init__(self, plugin_id: str) -> None:
        super().__init__(f"Access plugin ({plugin_id}) is not registered")
        self.plugin_id = plugin_id
