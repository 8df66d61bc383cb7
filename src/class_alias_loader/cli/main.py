"""CLI entry point for class-alias-loader.

Invoked as::

    class-alias-loader [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m class_alias_loader.cli.main

Commands
--------
generate    Merge alias maps and rewrite the Composer autoloader
show        Print the merged alias map without writing anything
version     Show version information
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax
from rich.table import Table

from class_alias_loader.errors import ClassAliasLoaderError
from class_alias_loader.reporter import ConsoleReporter

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _fail(exc: ClassAliasLoaderError) -> None:
    err_console.print(f"[red]Error:[/red] {exc}", highlight=False)
    sys.exit(1)


working_dir_option = click.option(
    "--working-dir",
    "-d",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory holding the project's composer.json",
)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="class-alias-loader")
def cli() -> None:
    """Class alias maps and case-insensitive class loading for Composer autoloaders."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from class_alias_loader import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]class-alias-loader[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# generate command
# ---------------------------------------------------------------------------


@cli.command(name="generate")
@working_dir_option
@click.option(
    "--optimize",
    "-o",
    is_flag=True,
    default=False,
    help="Composer dumped an optimized class map (composer dump-autoload -o)",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug output")
def generate_command(working_dir: Path, optimize: bool, verbose: bool) -> None:
    """Merge all class alias maps and rewrite vendor/autoload.php.

    Run this after Composer has written its autoload files.

    Examples:

    \b
        class-alias-loader generate
        class-alias-loader generate --working-dir ../project --optimize
    """
    from class_alias_loader.generator import ClassAliasMapGenerator

    _configure_logging(verbose)
    reporter = ConsoleReporter(console, err_console)
    try:
        rewritten = ClassAliasMapGenerator(working_dir, reporter=reporter, optimize=optimize).generate()
    except ClassAliasLoaderError as exc:
        _fail(exc)
        return

    if not rewritten:
        console.print("[dim]No class alias maps found; autoloader left untouched.[/dim]")


# ---------------------------------------------------------------------------
# show command
# ---------------------------------------------------------------------------


@cli.command(name="show")
@working_dir_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    default="table",
    help="Output format",
)
def show_command(working_dir: Path, output_format: str) -> None:
    """Print the merged class alias map of a project.

    Nothing is written; deprecation notices and missing map files are
    reported on stderr.
    """
    from class_alias_loader.generator import ClassAliasMapGenerator

    _configure_logging(False)
    reporter = ConsoleReporter(err_console, err_console)
    try:
        result, main_config = ClassAliasMapGenerator(working_dir, reporter=reporter).collect()
    except ClassAliasLoaderError as exc:
        _fail(exc)
        return

    alias_map = result.alias_map
    if output_format == "json":
        console.print(Syntax(json.dumps(alias_map.to_export(), indent=2), "json"))
        return
    if output_format == "yaml":
        text = yaml.safe_dump(alias_map.to_export(), default_flow_style=False, allow_unicode=True)
        console.print(Syntax(text, "yaml"))
        return

    if not alias_map.alias_to_class:
        console.print("[yellow]No class aliases declared.[/yellow]")
    else:
        table = Table(title="Class aliases", show_lines=False)
        table.add_column("Alias (folded)", style="bold")
        table.add_column("Class")
        for alias, class_name in sorted(alias_map.alias_to_class.items()):
            table.add_row(alias, class_name)
        console.print(table)

    sensitivity = "case sensitive" if main_config.autoload_case_sensitivity else "case insensitive"
    console.print(
        f"\n[bold]{len(alias_map)}[/bold] alias(es), class loading {sensitivity}, "
        f"always add alias loader: {str(main_config.always_add_alias_loader).lower()}"
    )


if __name__ == "__main__":
    cli()
