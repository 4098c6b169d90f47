"""Namespace mapping commands - manage prefix to directory mappings in settings.

Mappings live in the scope-aware settings files; the most specific scope's
directories are probed first.
"""

from __future__ import annotations

from typing import cast

import click
from rich.table import Table

from ..console import console
from ..errors import SettingsError
from ..settings import SCOPE_ORDER
from ..settings import AutoloadSettings
from ..settings import Scope
from ..utils.error_format import escape_markup

SCOPE_LABELS = {
    "local": "local (.nsautoload/settings.local.yaml)",
    "project": "project (.nsautoload/settings.yaml)",
    "global": "global (~/.nsautoload/settings.yaml)",
}


def _scope_options(action: str):
    """Attach the --local/--project/--global flags to a command."""

    def decorator(f):
        f = click.option(
            "--global", "scope_flag", flag_value="global", help=f"{action} user settings (~/.nsautoload/settings.yaml)"
        )(f)
        f = click.option(
            "--project",
            "scope_flag",
            flag_value="project",
            help=f"{action} project settings (.nsautoload/settings.yaml)",
        )(f)
        f = click.option(
            "--local",
            "scope_flag",
            flag_value="local",
            help=f"{action} local settings (.nsautoload/settings.local.yaml)",
        )(f)
        return f

    return decorator


@click.group(invoke_without_command=True)
@click.pass_context
def namespace(ctx: click.Context):
    """Manage namespace prefix to directory mappings.

    Examples:

        \b
        # Map the App namespace to src/App for the project
        nsautoload namespace add 'App' src/App

        \b
        # Probe a local override directory before the project one
        nsautoload namespace add 'App' ~/dev/app-overrides --local --prepend
    """
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@namespace.command("add")
@click.argument("prefix")
@click.argument("directory")
@click.option("--prepend", is_flag=True, help="Probe this directory before those already mapped")
@_scope_options("Store in")
def namespace_add(prefix: str, directory: str, prepend: bool, scope_flag: str | None):
    """Map a namespace prefix to a base directory.

    PREFIX is the namespace prefix (e.g. 'App\\Model').
    DIRECTORY is the directory holding the prefix's files.
    """
    scope = cast(Scope, scope_flag or "project")
    settings = AutoloadSettings()
    try:
        settings.add_namespace(prefix, directory, scope=scope, prepend=prepend)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="'PREFIX'") from e

    console.print(f"[green]✓ Mapped {escape_markup(prefix)}[/green]")
    console.print(f"  Directory: {escape_markup(directory)}")
    console.print(f"  Scope: {SCOPE_LABELS[scope]}")


@namespace.command("remove")
@click.argument("prefix")
@_scope_options("Remove from")
def namespace_remove(prefix: str, scope_flag: str | None):
    """Remove every directory mapped to a namespace prefix."""
    scope = cast(Scope, scope_flag or "project")
    settings = AutoloadSettings()

    if settings.remove_namespace(prefix, scope=scope):
        console.print(f"[green]✓ Removed {escape_markup(prefix)} ({SCOPE_LABELS[scope]})[/green]")
    else:
        console.print(f"[yellow]No mapping for {escape_markup(prefix)} in {SCOPE_LABELS[scope]}[/yellow]")


@namespace.command("list")
@click.pass_context
def namespace_list(ctx: click.Context):
    """List namespace mappings from all scopes, most specific scope first."""
    settings = AutoloadSettings()

    table = Table(title="Namespace Mappings")
    table.add_column("Prefix", style="cyan")
    table.add_column("Directory", style="green")
    table.add_column("Scope", style="dim")

    rows = 0
    try:
        for scope in SCOPE_ORDER:
            for mapping in settings.get_scope_namespaces(scope):
                for directory in mapping.directories:
                    table.add_row(escape_markup(mapping.prefix), escape_markup(directory), scope)
                    rows += 1
    except SettingsError as e:
        console.print(f"[red]Error:[/red] {escape_markup(e.message)}")
        ctx.exit(1)

    if not rows:
        console.print("[yellow]No namespace mappings configured[/yellow]")
        console.print("\nAdd one with: [cyan]nsautoload namespace add <prefix> <directory>[/cyan]")
        return

    console.print(table)
