"""Subcommand modules for domain-access.

Provides register_commands() which uses deferred imports to keep
``domain-access --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from domain_access.commands.access import check, deps, domains, routes, summary, validate

    cli.add_command(check)
    cli.add_command(summary)
    cli.add_command(deps)
    cli.add_command(routes)
    cli.add_command(domains)
    cli.add_command(validate)
