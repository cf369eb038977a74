"""Typer-based CLI for codeflatten."""

from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape
from rich.table import Table

from . import __version__
from .catalog import Catalog
from .cli_common import (
    console,
    load_config_or_exit,
    resolve_options,
    run_flatten_or_exit,
    write_bundle,
)
from .cli_watch import watch_app
from .config_manager import ConfigError, FlattenConfig, config_path, save_config, set_config_value
from .discovery import discover_sources
from .graph_export import export_graph, render_dot, render_json
from .logging_config import configure_logging

app = typer.Typer(
    help="🗜️  codeflatten: bundle a multi-file Scala project into a single file.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(
    help="⚙️  Configuration: show and edit .codeflatten.toml.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(watch_app, name="watch")
app.add_typer(config_app, name="config")

_SOURCE_HELP = "Source root to scan (repeatable; defaults to the config's source_roots)."
_EXTERNAL_HELP = "Package root always treated as external, e.g. scala (repeatable)."


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"codeflatten v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every indexing and resolution step."),
):
    """codeflatten: strip packages, inline dependencies, emit one file."""
    configure_logging(verbose=verbose)


@app.command("flatten")
def flatten_command(
    entry: Optional[Path] = typer.Argument(None, help="Entry file (defaults to 'entry' in the config)."),
    sources: Optional[List[Path]] = typer.Option(None, "--source", "-s", help=_SOURCE_HELP),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write the bundle to."),
    external: Optional[List[str]] = typer.Option(None, "--external", "-x", help=_EXTERNAL_HELP),
    stdout: bool = typer.Option(False, "--stdout", help="Print the bundle instead of writing it."),
):
    """📦 Flatten ENTRY and everything it depends on into one file.

    Example:
      cflat flatten src/main/scala/Player.scala
      cflat flatten Player.scala -s src/main/scala -o out/Player.scala -x scala -x java
    """
    options = resolve_options(entry, sources, output, external)
    result = run_flatten_or_exit(options)

    if stdout:
        typer.echo(result.text)
        return

    write_bundle(result, options.output)
    console.print(f"[green]✓[/green] Flattened {result.file_count} file(s) into {options.output}")


@app.command("inspect")
def inspect_command(
    sources: Optional[List[Path]] = typer.Option(None, "--source", "-s", help=_SOURCE_HELP),
    external: Optional[List[str]] = typer.Option(None, "--external", "-x", help=_EXTERNAL_HELP),
):
    """🔍 Show how every source file is indexed (package and symbols)."""
    cfg = load_config_or_exit()
    roots = sources or [Path(root) for root in cfg.source_roots]
    files = discover_sources(roots, cfg.extensions, cfg.skip_dirs)
    catalog = Catalog.build(files, external or cfg.external_prefixes)

    if not catalog.files:
        console.print("[yellow]No source files found.[/yellow]")
        return

    cwd = Path.cwd().resolve()
    table = Table(title="Source Catalog", show_header=True, show_lines=False)
    table.add_column("File", style="cyan")
    table.add_column("Package", style="magenta")
    table.add_column("Symbols")
    for source in catalog.files:
        try:
            shown = Path(source.path).relative_to(cwd).as_posix()
        except ValueError:
            shown = source.path
        table.add_row(shown, source.module or "-", ", ".join(sorted(source.symbols)) or "-")
    console.print(table)
    console.print(
        f"{len(catalog)} file(s), {len(catalog.module_index)} package(s), "
        f"{len(catalog.symbol_index)} symbol(s)"
    )

    for name, paths in sorted(catalog.collisions.items()):
        console.print(
            f"[yellow]⚠[/yellow] {name} is defined in {len(paths)} files; using {Path(paths[-1]).name}"
        )


@app.command("graph")
def graph_command(
    entry: Optional[Path] = typer.Argument(None, help="Entry file (defaults to 'entry' in the config)."),
    sources: Optional[List[Path]] = typer.Option(None, "--source", "-s", help=_SOURCE_HELP),
    external: Optional[List[str]] = typer.Option(None, "--external", "-x", help=_EXTERNAL_HELP),
    fmt: str = typer.Option("dot", "--format", "-f", help="Output format: dot or json."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout."),
):
    """🕸️  Export the inclusion graph (which file pulled in which, and why)."""
    if fmt not in ("dot", "json"):
        raise typer.BadParameter(f"Unsupported format '{fmt}'. Use dot or json.")

    options = resolve_options(entry, sources, None, external)
    result = run_flatten_or_exit(options)
    root = options.roots[0] if len(options.roots) == 1 else None
    if output is None:
        typer.echo(render_json(result, root) if fmt == "json" else render_dot(result, root))
        return
    export_graph(result, output, fmt, root)
    console.print(f"[green]✓[/green] Wrote {fmt} graph of {result.file_count} file(s) to {output}")


# ── Configuration ────────────────────────────────────────────


@config_app.command("show")
def config_show():
    """Show the effective configuration."""
    cfg = load_config_or_exit()
    table = Table(show_header=True, title="codeflatten config")
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    for field in fields(FlattenConfig):
        current = getattr(cfg, field.name)
        if isinstance(current, list):
            current = ", ".join(current)
        table.add_row(field.name, "-" if current is None else str(current))
    console.print(table)


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key, e.g. entry, output, source_roots."),
    value: str = typer.Argument(..., help="New value (comma-separated for lists)."),
):
    """Persist one configuration value."""
    try:
        set_config_value(key, value)
    except ConfigError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(1)
    console.print(f"[green]✓[/green] Set {key} = {value}")


@config_app.command("init")
def config_init(
    entry: Optional[str] = typer.Option(None, "--entry", "-e", help="Entry file to record."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing [flatten] table."),
):
    """Write a config file with default values."""
    path = config_path(None)
    if path.exists() and not force:
        console.print(f"[yellow]{path} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    written = save_config(FlattenConfig(entry=entry))
    console.print(f"[green]✓[/green] Wrote {written}")


if __name__ == "__main__":
    app()
