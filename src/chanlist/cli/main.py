"""CLI entry point for chanlist.

Invoked as::

    chanlist [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m chanlist.cli.main

Commands
--------
formats     List registered format plugins
info        Print the diagnostics report of a channel list
features    Show what the format plugin for a file can edit
files       List the data files that belong to a channel list
backup      Copy the data files of a channel list into a directory
cleanup     Run the format's clean-up pass and save the result
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, NoReturn

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from chanlist.errors import ChanlistError, UnsupportedVersionError

if TYPE_CHECKING:
    from chanlist.config import Settings
    from chanlist.serializer import SerializerBase

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(1)


def _open_or_exit(file: str, settings: "Settings") -> "SerializerBase":
    """Open *file* with the first accepting plugin, exiting on error."""
    from chanlist.host import open_serializer

    try:
        return open_serializer(file, settings=settings)
    except UnsupportedVersionError as exc:
        _fail(f"{file}: {exc}")
    except ChanlistError as exc:
        _fail(str(exc))
    except OSError as exc:
        _fail(f"Cannot read {file}: {exc}")


def _describe(value: object) -> str:
    if isinstance(value, bool):
        return "[green]yes[/green]" if value else "[dim]no[/dim]"
    if isinstance(value, Enum):
        return str(value.name)
    return str(value)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="chanlist")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML settings file (defaults to $CHANLIST_CONFIG).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """Inspect, back up and clean up TV channel lists."""
    from chanlist.config import load_settings

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    try:
        ctx.obj = load_settings(config_path)
    except ChanlistError as exc:
        _fail(str(exc))


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from chanlist import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]chanlist[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# formats command
# ---------------------------------------------------------------------------


@cli.command(name="formats")
@click.pass_obj
def formats_command(settings: "Settings") -> None:
    """List all registered format plugins, including installed entry-points."""
    from chanlist.host import _default_registry

    registry = _default_registry()
    registry.load_entrypoints(settings.plugins_entrypoint_group)

    table = Table(title="Channel list formats")
    table.add_column("Name", style="bold")
    table.add_column("Format")
    table.add_column("File patterns")
    for name, cls in registry.items():
        table.add_row(escape(name), escape(cls.format_name), escape(", ".join(cls.file_patterns)))
    console.print(table)


# ---------------------------------------------------------------------------
# info command
# ---------------------------------------------------------------------------


@cli.command(name="info")
@click.argument("file", type=click.Path(exists=False))
@click.pass_obj
def info_command(settings: "Settings", file: str) -> None:
    """Print the diagnostics report for FILE."""
    with _open_or_exit(file, settings) as serializer:
        console.print(f"[bold]Format:[/bold] {escape(serializer.display_name)}")
        if serializer.tv_model_name:
            console.print(f"[bold]Model:[/bold] {escape(serializer.tv_model_name)}")
        click.echo(serializer.get_file_information(), nl=False)


# ---------------------------------------------------------------------------
# features command
# ---------------------------------------------------------------------------


@cli.command(name="features")
@click.argument("file", type=click.Path(exists=False))
@click.pass_obj
def features_command(settings: "Settings", file: str) -> None:
    """Show the editing capabilities of the plugin that loads FILE."""
    with _open_or_exit(file, settings) as serializer:
        table = Table(title=f"Features: {escape(serializer.display_name)}", show_header=False)
        table.add_column("Feature", style="bold")
        table.add_column("Value")
        for name, value in serializer.features.as_dict().items():
            table.add_row(name, _describe(value))
        console.print(table)


# ---------------------------------------------------------------------------
# files / backup commands
# ---------------------------------------------------------------------------


@cli.command(name="files")
@click.argument("file", type=click.Path(exists=False))
@click.pass_obj
def files_command(settings: "Settings", file: str) -> None:
    """List every data file that must be backed up together with FILE."""
    with _open_or_exit(file, settings) as serializer:
        for path in serializer.get_data_file_paths():
            click.echo(path)


@cli.command(name="backup")
@click.argument("file", type=click.Path(exists=False))
@click.argument("destination", type=click.Path(file_okay=False))
@click.pass_obj
def backup_command(settings: "Settings", file: str, destination: str) -> None:
    """Copy the data files of FILE into the DESTINATION directory."""
    from chanlist.host import backup_data_files

    with _open_or_exit(file, settings) as serializer:
        try:
            copied = backup_data_files(serializer, destination)
        except ChanlistError as exc:
            _fail(str(exc))
    for path in copied:
        console.print(f"[green]Copied:[/green] {escape(str(path))}")


# ---------------------------------------------------------------------------
# cleanup command
# ---------------------------------------------------------------------------


@cli.command(name="cleanup")
@click.argument("file", type=click.Path(exists=False))
@click.option("--save-as", "save_as", default=None, help="Write the result to this file instead")
@click.option("--dry-run", is_flag=True, default=False, help="Report changes without saving")
@click.pass_obj
def cleanup_command(settings: "Settings", file: str, save_as: str | None, dry_run: bool) -> None:
    """Run the format-specific clean-up pass on FILE and save it."""
    with _open_or_exit(file, settings) as serializer:
        if not serializer.features.can_clean_up_channel_data:
            console.print(f"[yellow]{escape(serializer.display_name)} has no clean-up pass.[/yellow]")
            return

        changes = serializer.clean_up_channel_data()
        if not changes:
            console.print(f"[green]OK[/green] nothing to clean up in {escape(file)}")
            return
        console.print(escape(changes))
        if dry_run:
            return

        try:
            if save_as:
                serializer.save_as_file_name = save_as
            serializer.save()
        except ChanlistError as exc:
            _fail(str(exc))
        console.print(f"[green]Saved[/green] {escape(serializer.output_file_name)}")


if __name__ == "__main__":
    cli()
