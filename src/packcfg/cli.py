"""
packcfg CLI.

Commands:
- list: Show the targets defined in a manifest
- show: Dump resolved targets as JSON
- check: Validate a manifest
"""

from __future__ import annotations

import json
import platform
import sys
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from packcfg import __version__
from packcfg.core.config import ParserConfig, configure_logging
from packcfg.core.errors import ManifestError
from packcfg.core.ir import Target
from packcfg.core.merge import select_targets
from packcfg.core.parser import parse_manifest_file, parse_manifest_stream

DEFAULT_MANIFEST = "package.cfg"

# Passing this as the manifest path reads from stdin
STDIN_PATH = "-"

app = typer.Typer(
    help="Inspect package manifests and the targets they define",
    no_args_is_help=True,
)

console = Console()

ManifestOption = Annotated[
    str,
    typer.Option("--manifest", "-m", help="Path to the manifest, or '-' for stdin"),
]


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"packcfg {__version__}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Logging level (overrides PACKCFG_LOG_LEVEL)"),
    ] = None,
) -> None:
    """packcfg CLI main callback for global options."""
    configure_logging(log_level or ParserConfig.from_env().log_level)


def _load_targets(manifest: str) -> list[Target]:
    """Parse manifest, exiting with status 1 on any manifest error."""
    config = ParserConfig.from_env()
    try:
        if manifest == STDIN_PATH:
            return parse_manifest_stream(sys.stdin, config.source_name)
        return parse_manifest_file(manifest, config)
    except ManifestError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("list")
def list_command(manifest: ManifestOption = DEFAULT_MANIFEST) -> None:
    """
    Show the targets defined in a manifest.

    Package defaults are already applied to each row.
    """
    targets = _load_targets(manifest)

    if not targets:
        console.print("[dim]No targets defined.[/dim]")
        return

    table = Table(title="Targets")
    table.add_column("Name", style="bold")
    table.add_column("File")
    table.add_column("Branch")
    table.add_column("Includes", justify="right")
    table.add_column("Excludes", justify="right")
    table.add_column("Filters", justify="right")
    table.add_column("Rules", justify="right")
    table.add_column("Aliases", justify="right")

    for target in targets:
        table.add_row(
            target.name,
            target.file,
            target.branch,
            str(len(target.includes)),
            str(len(target.excludes)),
            str(len(target.filters)),
            str(len(target.rules)),
            str(len(target.aliases)),
        )

    console.print(table)
    console.print(f"\n[dim]{len(targets)} target(s) shown[/dim]")


@app.command("show")
def show_command(
    names: Annotated[
        list[str] | None,
        typer.Argument(help="Targets to show ('all' for every target). Default: all"),
    ] = None,
    manifest: ManifestOption = DEFAULT_MANIFEST,
) -> None:
    """Dump resolved targets as JSON."""
    targets = _load_targets(manifest)

    if names:
        try:
            targets = select_targets(targets, names)
        except ManifestError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)

    data = [target.model_dump(mode="json", by_alias=True) for target in targets]
    typer.echo(json.dumps(data, indent=2))


@app.command("check")
def check_command(manifest: ManifestOption = DEFAULT_MANIFEST) -> None:
    """Validate a manifest."""
    targets = _load_targets(manifest)
    typer.echo(f"Manifest is valid: {len(targets)} target(s)")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
