"""AccessService - evaluates view access rules against configured domains.

Builds the domain directory from settings once, then for every operation
instantiates the view's access plugin with a request-scoped resolver.
Rule and configuration errors become failed ServiceResults; nothing here
raises to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from domain_access.access.base import AccessPlugin, CacheableDependency, Route
from domain_access.access.rule import DIRECTORY_SERVICE, RESOLVER_SERVICE
from domain_access.access.rule import selected_ids
from domain_access.access.rule import validate as validate_selection
from domain_access.adapters.memory import HostnameResolver, MemoryDomainDirectory, StaticResolver
from domain_access.errors import (
    DomainAccessError,
    OptionsValidationError,
    UnknownAccessPluginError,
)
from domain_access.plugins.manager import PluginManager
from domain_access.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from domain_access.config.models import ViewConfig
    from domain_access.config.settings import DomainAccessSettings
    from domain_access.domain.contracts import DomainResolver

logger = logging.getLogger(__name__)

UNRESTRICTED = "none"


def _fail(op: str, code: str, message: str, **detail: Any) -> ServiceResult:
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=code, message=message, detail=detail),
    )


class AccessService:
    """Access checks and access-rule metadata for configured views."""

    def __init__(
        self,
        settings: DomainAccessSettings,
        plugins: PluginManager | None = None,
    ) -> None:
        self._settings = settings
        self._plugins = plugins or PluginManager()
        self._directory: MemoryDomainDirectory | None = None

    @property
    def directory(self) -> MemoryDomainDirectory:
        """Directory of the configured domains (built on first use)."""
        if self._directory is None:
            self._directory = MemoryDomainDirectory(self._settings.domains)
        return self._directory

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def check(
        self,
        view: str,
        *,
        host: str | None = None,
        domain_id: str | None = None,
    ) -> ServiceResult:
        """Decide whether *view* is accessible from *host* (or *domain_id*)."""
        op = "check"
        try:
            cfg = self._view(view)
            if cfg is None:
                return _fail(op, "NOT_FOUND", f"View '{view}' not found", view=view)
            resolver = self._resolver(host=host, domain_id=domain_id)
            active = resolver.get_active_id()
            rule = self._rule(cfg, resolver)
        except UnknownAccessPluginError as exc:
            return _fail(op, "UNKNOWN_PLUGIN", str(exc), plugin=exc.plugin_id)
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))

        if rule is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "view": view,
                    "plugin": UNRESTRICTED,
                    "active_domain": active,
                    "granted": True,
                    "route_requirements": {},
                    "cache": None,
                },
            )

        granted = rule.access()
        route = self._route(view, cfg, rule)
        logger.debug("check view=%s active=%s granted=%s", view, active, granted)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "view": view,
                "plugin": rule.plugin_id,
                "active_domain": active,
                "granted": granted,
                "route_requirements": route.requirements,
                "cache": self._cache_metadata(rule),
            },
        )

    def summary(self, view: str) -> ServiceResult:
        """Summary title of *view*'s access rule."""
        op = "summary"
        try:
            cfg = self._view(view)
            if cfg is None:
                return _fail(op, "NOT_FOUND", f"View '{view}' not found", view=view)
            rule = self._rule(cfg, StaticResolver())
        except UnknownAccessPluginError as exc:
            return _fail(op, "UNKNOWN_PLUGIN", str(exc), plugin=exc.plugin_id)
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))

        title = "Unrestricted" if rule is None else rule.summary_title()
        return ServiceResult(ok=True, op=op, data={"view": view, "summary": title})

    def dependencies(self, view: str) -> ServiceResult:
        """Config dependencies contributed by *view*'s access rule.

        Allow-listed ids that no longer resolve are reported as warnings.
        """
        op = "dependencies"
        try:
            cfg = self._view(view)
            if cfg is None:
                return _fail(op, "NOT_FOUND", f"View '{view}' not found", view=view)
            rule = self._rule(cfg, StaticResolver())
        except UnknownAccessPluginError as exc:
            return _fail(op, "UNKNOWN_PLUGIN", str(exc), plugin=exc.plugin_id)
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))

        warnings: list[str] = []
        deps: dict[str, list[str]] = {}
        if rule is not None:
            deps = rule.calculate_dependencies()
            for domain_id in selected_ids(rule.options.get("domain")):
                if self.directory.load(domain_id) is None:
                    warnings.append(f"Domain ({domain_id}) no longer exists")
        return ServiceResult(
            ok=True,
            op=op,
            data={"view": view, "dependencies": deps},
            warnings=warnings,
        )

    def routes(self) -> ServiceResult:
        """Route definitions of every configured view after access alteration."""
        op = "routes"
        items: list[dict[str, Any]] = []
        try:
            for name, cfg in sorted(self._settings.views.items()):
                rule = self._rule(cfg, StaticResolver())
                route = self._route(name, cfg, rule)
                items.append(
                    {
                        "view": name,
                        "path": route.path,
                        "plugin": rule.plugin_id if rule is not None else UNRESTRICTED,
                        "requirements": route.requirements,
                    }
                )
        except UnknownAccessPluginError as exc:
            return _fail(op, "UNKNOWN_PLUGIN", str(exc), plugin=exc.plugin_id)
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    def options(self) -> ServiceResult:
        """The domain option list offered by the access options form."""
        op = "options"
        try:
            records = self.directory.load_multiple()
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))
        items = [
            {
                "id": record.id,
                "name": record.name,
                "hostname": record.hostname,
                "default": record.is_default,
            }
            for record in records
        ]
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    def validate(self, selection: list[str] | dict[str, Any]) -> ServiceResult:
        """Validate a submitted domain selection for the access options form."""
        op = "validate"
        try:
            selected = validate_selection(selection)
        except OptionsValidationError as exc:
            return _fail(op, "VALIDATION_ERROR", exc.message, field=exc.field)

        warnings: list[str] = []
        try:
            unknown = [d for d in selected if self.directory.load(d) is None]
        except DomainAccessError as exc:
            return _fail(op, "CONFIG_ERROR", str(exc))
        if unknown:
            warnings.append(f"Unknown domain(s): {', '.join(unknown)}")
        return ServiceResult(ok=True, op=op, data={"domain": list(selected)}, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _view(self, view: str) -> ViewConfig | None:
        return self._settings.views.get(view)

    def _resolver(self, *, host: str | None, domain_id: str | None) -> DomainResolver:
        if domain_id is not None:
            return StaticResolver(domain_id)
        return HostnameResolver(
            self.directory,
            host,
            fallback_to_default=self._settings.resolver.fallback_to_default,
        )

    def _rule(self, cfg: ViewConfig, resolver: DomainResolver) -> AccessPlugin | None:
        if cfg.access is None or cfg.access.plugin == UNRESTRICTED:
            return None
        services = {DIRECTORY_SERVICE: self.directory, RESOLVER_SERVICE: resolver}
        return self._plugins.create_access_plugin(
            cfg.access.plugin, cfg.access.options, services
        )

    @staticmethod
    def _route(view: str, cfg: ViewConfig, rule: AccessPlugin | None) -> Route:
        route = Route(cfg.path or f"/{view}")
        if rule is not None:
            rule.alter_route_definition(route)
        return route

    @staticmethod
    def _cache_metadata(rule: AccessPlugin) -> dict[str, Any] | None:
        if not isinstance(rule, CacheableDependency):
            return None
        return {
            "max_age": rule.get_cache_max_age(),
            "contexts": rule.get_cache_contexts(),
            "tags": rule.get_cache_tags(),
        }
