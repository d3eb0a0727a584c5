"""Domain access rule - grants access only from allow-listed domains.

The decision is a membership test of the request's active domain against
the display's ``domain`` option. Everything else on the rule is metadata
for the host: a ``_domain`` route requirement, config dependencies on the
selected domain records, a summary title, and cache metadata that varies
by site only.

The pure functions at module level carry the behaviour; DomainAccessRule
binds them to a display's options and to injected collaborators.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from domain_access.access.base import (
    CACHE_PERMANENT,
    AccessPlugin,
    FormState,
    PluginDefinition,
    Route,
)
from domain_access.errors import OptionsValidationError

if TYPE_CHECKING:
    from domain_access.domain.contracts import DomainDirectory, DomainResolver
    from domain_access.domain.records import DomainId

logger = logging.getLogger(__name__)

ROUTE_REQUIREMENT = "_domain"
ROUTE_DELIMITER = "+"
CACHE_CONTEXTS = ("url.site",)

SUMMARY_NONE = "No domain(s) selected"
SUMMARY_MULTIPLE = "Multiple domains"
REQUIRED_MESSAGE = 'You must select at least one domain if type is "by domain"'

DIRECTORY_SERVICE = "domain.directory"
RESOLVER_SERVICE = "domain.resolver"


def decide(active_domain: DomainId | None, allow_list: Iterable[DomainId]) -> bool:
    """Return True iff *active_domain* is set and is in *allow_list*."""
    if active_domain is None:
        return False
    return active_domain in {domain_id for domain_id in allow_list if domain_id}


def route_constraint(allow_list: Iterable[DomainId]) -> str | None:
    """Join *allow_list* with ``+`` in iteration order, or None when empty.

    An empty list installs no requirement even though ``decide`` denies it.
    """
    ids = [str(domain_id) for domain_id in allow_list]
    if not ids:
        return None
    return ROUTE_DELIMITER.join(ids)


def summary(allow_list: Iterable[DomainId], option_list: Mapping[DomainId, str]) -> str:
    """Human-readable description of the selection.

    A single id missing from *option_list* is reported as the raw id.
    """
    ids = list(allow_list)
    if not ids:
        return SUMMARY_NONE
    if len(ids) > 1:
        return SUMMARY_MULTIPLE
    return option_list.get(ids[0], ids[0])


def selected_ids(value: Iterable[Any] | Mapping[Any, Any] | str | None) -> tuple[DomainId, ...]:
    """Reduce a stored or submitted selection to its chosen domain ids.

    Accepts a list of ids, a single id, or a checkbox mapping
    ``{id: id-or-0}`` (only keys with truthy values count). Falsy entries
    are dropped and duplicates collapsed in order.
    """
    if value is None:
        candidates: Iterable[Any] = ()
    elif isinstance(value, str):
        candidates = (value,)
    elif isinstance(value, Mapping):
        candidates = (key for key, checked in value.items() if checked)
    else:
        candidates = value
    return tuple(dict.fromkeys(str(c) for c in candidates if c))


def validate(submitted: Iterable[Any] | Mapping[Any, Any] | str | None) -> tuple[DomainId, ...]:
    """Filter a submitted selection down to the chosen domain ids.

    Raises:
        OptionsValidationError: If nothing remains after filtering.
    """
    selected = selected_ids(submitted)
    if not selected:
        raise OptionsValidationError(REQUIRED_MESSAGE, field="domain")
    return selected


def dependencies(
    allow_list: Iterable[DomainId], directory: DomainDirectory
) -> dict[str, list[str]]:
    """Config dependencies on every allow-listed domain that still exists."""
    result: dict[str, list[str]] = {}
    for domain_id in allow_list:
        if not domain_id:
            continue
        record = directory.load(domain_id)
        if record is None:
            logger.debug("Skipping dependency on missing domain %s", domain_id)
            continue
        result.setdefault(record.config_dependency_key, []).append(
            record.config_dependency_name
        )
    return result


class DomainAccessRule(AccessPlugin):
    """Access plugin that provides domain-based access control."""

    DEFINITION: ClassVar[PluginDefinition] = PluginDefinition(
        id="domain",
        title="Domain",
        help="Access will be granted when accessed from an allowed domain.",
    )
    uses_options: ClassVar[bool] = True

    def __init__(
        self,
        options: Mapping[str, Any] | None,
        directory: DomainDirectory,
        resolver: DomainResolver,
        *,
        plugin_id: str | None = None,
        definition: PluginDefinition | None = None,
    ) -> None:
        super().__init__(options, plugin_id=plugin_id, definition=definition)
        self.directory = directory
        self.resolver = resolver

    @classmethod
    def create(
        cls,
        services: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        plugin_id: str | None = None,
        definition: PluginDefinition | None = None,
    ) -> DomainAccessRule:
        return cls(
            options,
            services[DIRECTORY_SERVICE],
            services[RESOLVER_SERVICE],
            plugin_id=plugin_id,
            definition=definition,
        )

    @property
    def allow_list(self) -> tuple[DomainId, ...]:
        """The configured domain ids, in stored order."""
        return selected_ids(self.options.get("domain"))

    def define_options(self) -> dict[str, Any]:
        options = super().define_options()
        options["domain"] = []
        return options

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def access(self, account: Any = None) -> bool:
        active_id = self.resolver.get_active_id()
        granted = decide(active_id, self.allow_list)
        logger.debug(
            "Domain access %s for active domain %s",
            "granted" if granted else "denied",
            active_id,
        )
        return granted

    def alter_route_definition(self, route: Route) -> None:
        requirement = route_constraint(self.allow_list)
        if requirement is not None:
            route.set_requirement(ROUTE_REQUIREMENT, requirement)

    def summary_title(self) -> str:
        ids = self.allow_list
        # The option list is only needed to label a single selection.
        options = self.directory.load_options_list() if len(ids) == 1 else {}
        return summary(ids, options)

    # ------------------------------------------------------------------
    # Options form
    # ------------------------------------------------------------------

    def build_options_form(self, form: dict[str, Any]) -> dict[str, Any]:
        form = super().build_options_form(form)
        form["domain"] = {
            "name": "domain",
            "type": "checkboxes",
            "title": "Domain",
            "default_value": list(self.allow_list),
            "options": self.directory.load_options_list(),
            "description": "Only the checked domain(s) will be able to access this display.",
        }
        return form

    def validate_options_form(self, form: dict[str, Any], form_state: FormState) -> None:
        path = ("access_options", "domain")
        try:
            selected: tuple[DomainId, ...] = validate(form_state.get_value(path))
        except OptionsValidationError as exc:
            form_state.set_error(form.get("domain", {"name": "domain"}), exc.message)
            selected = ()
        form_state.set_value(path, list(selected))

    # ------------------------------------------------------------------
    # Dependencies and cache metadata
    # ------------------------------------------------------------------

    def calculate_dependencies(self) -> dict[str, list[str]]:
        result = super().calculate_dependencies()
        for key, names in dependencies(self.allow_list, self.directory).items():
            result.setdefault(key, []).extend(names)
        return result

    def get_cache_max_age(self) -> int:
        return CACHE_PERMANENT

    def get_cache_contexts(self) -> list[str]:
        return list(CACHE_CONTEXTS)

    def get_cache_tags(self) -> list[str]:
        return []
