"""Option resolution and the run-once helper shared by CLI commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.markup import escape

from .config_manager import ConfigError, FlattenConfig, load_config
from .flattener import MissingEntryFileError, flatten_project
from .models import BundleResult

console = Console()


@dataclass
class RunOptions:
    entry: Path
    output: Path
    roots: Tuple[Path, ...]
    extensions: Tuple[str, ...]
    skip_dirs: Tuple[str, ...]
    external_prefixes: Tuple[str, ...]
    debounce_seconds: float


def load_config_or_exit() -> FlattenConfig:
    try:
        return load_config()
    except ConfigError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def resolve_options(
    entry: Optional[Path],
    sources: Optional[List[Path]] = None,
    output: Optional[Path] = None,
    external: Optional[List[str]] = None,
) -> RunOptions:
    """Merge command-line values over the config file."""
    cfg = load_config_or_exit()

    entry_path = entry or (Path(cfg.entry) if cfg.entry else None)
    if entry_path is None:
        console.print("[red]✗[/red] No entry file given. Pass ENTRY or set 'entry' with 'cflat config set'.")
        raise typer.Exit(1)

    return RunOptions(
        entry=entry_path,
        output=output or Path(cfg.output),
        roots=tuple(sources or [Path(root) for root in cfg.source_roots]),
        extensions=tuple(cfg.extensions),
        skip_dirs=tuple(cfg.skip_dirs),
        external_prefixes=tuple(external or cfg.external_prefixes),
        debounce_seconds=cfg.debounce_seconds,
    )


def run_flatten(options: RunOptions) -> BundleResult:
    return flatten_project(
        options.entry,
        options.roots,
        extensions=options.extensions,
        skip_dirs=options.skip_dirs,
        external_prefixes=options.external_prefixes,
    )


def run_flatten_or_exit(options: RunOptions) -> BundleResult:
    try:
        return run_flatten(options)
    except MissingEntryFileError as exc:
        console.print(f"[red]✗[/red] {escape(str(exc))}")
        raise typer.Exit(1)


def write_bundle(result: BundleResult, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.text, encoding="utf-8")
