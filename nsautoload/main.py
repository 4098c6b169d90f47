"""nsautoload CLI - resolve namespaced symbols to source files."""

from __future__ import annotations

import logging

import click
from rich.table import Table

from .autoloader import Autoloader
from .commands.namespace import namespace as namespace_group
from .console import console
from .errors import InvalidMappingError
from .errors import SettingsError
from .logging_setup import init_json_logging
from .settings import AutoloadSettings
from .settings import build_autoloader
from .tracing import trace_resolution
from .utils.error_format import escape_markup
from .utils.error_format import format_error_message

logger = logging.getLogger(__name__)

# click reserves 2 for usage errors
EXIT_LOAD_FAILURE = 3


def parse_mapping(value: str) -> tuple[str, str]:
    """Split a PREFIX=DIR command line mapping.

    Raises:
        InvalidMappingError: Missing '=' or an empty side
    """
    prefix, sep, directory = value.partition("=")
    if not sep or not prefix or not directory:
        raise InvalidMappingError(f"Expected PREFIX=DIR, got '{value}'")
    return prefix, directory


def _mapping_callback(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> list[tuple[str, str]]:
    try:
        return [parse_mapping(value) for value in values]
    except InvalidMappingError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param) from e


def _create_autoloader(ctx: click.Context, mappings: list[tuple[str, str]], no_settings: bool) -> Autoloader:
    """Build an autoloader from settings plus command line mappings.

    Command line mappings are prepended so they win over configured ones.
    """
    if no_settings:
        autoloader = Autoloader()
    else:
        try:
            autoloader = build_autoloader(AutoloadSettings())
        except SettingsError as e:
            console.print(f"[red]Error:[/red] {escape_markup(e.message)}")
            ctx.exit(1)

    for prefix, directory in reversed(mappings):
        try:
            autoloader.add_namespace(prefix, directory, prepend=True)
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param_hint="'--map'") from e
    return autoloader


mapping_option = click.option(
    "--map",
    "-m",
    "mappings",
    multiple=True,
    metavar="PREFIX=DIR",
    callback=_mapping_callback,
    help="Extra namespace mapping, probed before configured ones (repeatable)",
)
no_settings_option = click.option(
    "--no-settings", is_flag=True, help="Ignore namespace mappings from settings files"
)


@click.group(invoke_without_command=True)
@click.version_option(package_name="nsautoload")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output (DEBUG logging)")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write JSONL logs to this file",
)
@click.pass_context
def cli(ctx, verbose, log_file):
    """nsautoload - map namespaced symbols to source files."""
    if log_file:
        init_json_logging(log_file, "DEBUG" if verbose else None)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("symbol")
@mapping_option
@no_settings_option
@click.option("--dry-run", is_flag=True, help="Only check which files exist, do not execute them")
@click.pass_context
def resolve(ctx, symbol: str, mappings: list[tuple[str, str]], no_settings: bool, dry_run: bool):
    """Resolve SYMBOL and load the file mapped to it.

    Shows every candidate file in probe order.

    Examples:

        \b
        nsautoload resolve 'App\\Model\\User' -m 'App=src/App'
        nsautoload resolve 'App\\Model\\User' --dry-run
    """
    autoloader = _create_autoloader(ctx, mappings, no_settings)

    try:
        resolution = trace_resolution(autoloader, symbol, dry_run=dry_run)
    except Exception as e:
        console.print(f"[red]Error loading {escape_markup(symbol)}:[/red] {escape_markup(format_error_message(e))}")
        logger.debug("Load failure", exc_info=True)
        ctx.exit(EXIT_LOAD_FAILURE)

    if resolution.attempts:
        table = Table(title=f"Probes for {escape_markup(symbol)}")
        table.add_column("#", style="dim", justify="right")
        table.add_column("Prefix", style="cyan")
        table.add_column("Path")
        table.add_column("Result")
        for index, attempt in enumerate(resolution.attempts, 1):
            result = "[green]loaded[/green]" if attempt.loaded else "[dim]missing[/dim]"
            if attempt.loaded and dry_run:
                result = "[green]exists[/green]"
            table.add_row(str(index), escape_markup(attempt.prefix), escape_markup(attempt.path), result)
        console.print(table)

    if not resolution.loaded:
        console.print(f"[yellow]✗ No file found for {escape_markup(symbol)}[/yellow]")
        ctx.exit(1)

    verb = "Found" if dry_run else "Loaded"
    console.print(f"[green]✓ {verb} {escape_markup(symbol)}[/green] from {escape_markup(resolution.path)}")


@cli.command()
@click.argument("symbol")
@mapping_option
@no_settings_option
@click.pass_context
def which(ctx, symbol: str, mappings: list[tuple[str, str]], no_settings: bool):
    """Print the file SYMBOL would be loaded from, without loading it."""
    autoloader = _create_autoloader(ctx, mappings, no_settings)

    path = autoloader.find_file(symbol)
    if path is None:
        click.echo(f"No file found for {symbol}", err=True)
        ctx.exit(1)

    click.echo(path)


cli.add_command(namespace_group)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
