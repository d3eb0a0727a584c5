"""Access plugin base class and the host objects it collaborates with.

An access plugin decides whether a view display may be shown and
contributes metadata the host aggregates: a route requirement, config
dependencies, a summary title and an options form. The host owns routing,
form rendering and persistence; the small Route and FormState classes here
carry only what a plugin reads or writes.
"""

from __future__ import annotations

import abc
import copy
from collections.abc import Mapping
from typing import Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel

CACHE_PERMANENT = -1


@runtime_checkable
class CacheableDependency(Protocol):
    """Cache metadata a response-caching layer reads from a dependency."""

    def get_cache_max_age(self) -> int: ...

    def get_cache_contexts(self) -> list[str]: ...

    def get_cache_tags(self) -> list[str]: ...


class PluginDefinition(BaseModel):
    """Static metadata describing an access plugin."""

    model_config = {"frozen": True}

    id: str
    title: str
    help: str = ""


class Route:
    """A route definition with string requirements."""

    def __init__(self, path: str, requirements: Mapping[str, str] | None = None) -> None:
        self.path = path
        self.requirements: dict[str, str] = dict(requirements or {})

    def set_requirement(self, key: str, value: str) -> None:
        self.requirements[key] = value

    def get_requirement(self, key: str) -> str | None:
        return self.requirements.get(key)

    def __repr__(self) -> str:
        return f"Route({self.path!r}, {self.requirements!r})"


class FormState:
    """Submitted form values and inline errors for an options form.

    Values are addressed by tuple paths, e.g. ``("access_options", "domain")``.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = copy.deepcopy(dict(values or {}))
        self.errors: dict[str, str] = {}

    def get_value(self, path: tuple[str, ...], default: Any = None) -> Any:
        node: Any = self._values
        for key in path:
            if not isinstance(node, Mapping) or key not in node:
                return default
            node = node[key]
        return node

    def set_value(self, path: tuple[str, ...], value: Any) -> None:
        node = self._values
        for key in path[:-1]:
            node = node.setdefault(key, {})
        node[path[-1]] = value

    def set_error(self, element: Mapping[str, Any], message: str) -> None:
        """Attach *message* to a form element, keyed by its ``name``."""
        self.errors[element.get("name", "")] = message

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class AccessPlugin(abc.ABC):
    """Base for access rules plugged into a view display.

    Subclasses set ``DEFINITION`` and implement ``access`` and
    ``alter_route_definition``. Options passed at construction are overlaid
    on ``define_options()`` defaults.
    """

    DEFINITION: ClassVar[PluginDefinition]
    uses_options: ClassVar[bool] = False

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        plugin_id: str | None = None,
        definition: PluginDefinition | None = None,
    ) -> None:
        self.definition = definition or self.DEFINITION
        self.plugin_id = plugin_id or self.definition.id
        self.options: dict[str, Any] = self.define_options()
        if options:
            self.options.update(options)

    @classmethod
    def create(
        cls,
        services: Mapping[str, Any],
        options: Mapping[str, Any] | None = None,
        plugin_id: str | None = None,
        definition: PluginDefinition | None = None,
    ) -> AccessPlugin:
        """Build an instance, pulling collaborators out of *services*."""
        return cls(options, plugin_id=plugin_id, definition=definition)

    def define_options(self) -> dict[str, Any]:
        return {}

    @abc.abstractmethod
    def access(self, account: Any = None) -> bool:
        """Return True if the current request may see the display."""

    @abc.abstractmethod
    def alter_route_definition(self, route: Route) -> None:
        """Add this plugin's requirements to the display's route."""

    def summary_title(self) -> str:
        return self.definition.title

    def build_options_form(self, form: dict[str, Any]) -> dict[str, Any]:
        return form

    def validate_options_form(self, form: dict[str, Any], form_state: FormState) -> None:
        return None

    def submit_options_form(self, form: dict[str, Any], form_state: FormState) -> None:
        if not self.uses_options:
            return
        for key in self.options:
            value = form_state.get_value(("access_options", key))
            if value is not None:
                self.options[key] = value

    def calculate_dependencies(self) -> dict[str, list[str]]:
        return {}
