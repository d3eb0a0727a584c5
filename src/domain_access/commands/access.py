"""Commands: evaluate and inspect view access rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from domain_access.commands._base import DomainAccessCommand

if TYPE_CHECKING:
    from domain_access.commands._context import AppContext

DENIED_EXIT_CODE = 2


@click.command(
    cls=DomainAccessCommand,
    examples="""\
  domain-access check news --host example.com
  domain-access check news --domain example_com
  domain-access --json check news --host other.example.com --strict""",
)
@click.argument("view")
@click.option("--host", default=None, help="Request hostname used to negotiate the domain.")
@click.option("--domain", "domain_id", default=None, help="Use this active domain id directly.")
@click.option("--strict", is_flag=True, help="Exit with status 2 when access is denied.")
@click.pass_obj
def check(
    app: AppContext,
    view: str,
    host: str | None,
    domain_id: str | None,
    strict: bool,
) -> None:
    """Check whether VIEW is accessible from a host or domain."""
    if host and domain_id:
        raise click.UsageError("--host and --domain are mutually exclusive.")
    result = app.service.check(view, host=host, domain_id=domain_id)
    app.emit(result)
    if strict and not result.data.get("granted"):
        raise SystemExit(DENIED_EXIT_CODE)


@click.command(cls=DomainAccessCommand, examples="  domain-access summary news")
@click.argument("view")
@click.pass_obj
def summary(app: AppContext, view: str) -> None:
    """Show the access summary title of VIEW."""
    app.emit(app.service.summary(view))


@click.command(cls=DomainAccessCommand, examples="  domain-access --json deps news")
@click.argument("view")
@click.pass_obj
def deps(app: AppContext, view: str) -> None:
    """List config dependencies contributed by VIEW's access rule."""
    app.emit(app.service.dependencies(view))


@click.command(cls=DomainAccessCommand, examples="  domain-access routes")
@click.pass_obj
def routes(app: AppContext) -> None:
    """List view routes with their access requirements."""
    app.emit(app.service.routes())


@click.command(cls=DomainAccessCommand, examples="  domain-access domains")
@click.pass_obj
def domains(app: AppContext) -> None:
    """List the domains offered for selection."""
    app.emit(app.service.options())


@click.command(
    cls=DomainAccessCommand,
    examples="""\
  domain-access validate example_com other_com
  domain-access validate ''""",
)
@click.argument("domain_ids", nargs=-1)
@click.pass_obj
def validate(app: AppContext, domain_ids: tuple[str, ...]) -> None:
    """Validate a domain selection for the access options form."""
    app.emit(app.service.validate(list(domain_ids)))
