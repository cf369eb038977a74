"""Watch mode for regenerating the flattened file on source changes."""

from __future__ import annotations

import threading
import time
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Set

import typer
from rich.markup import escape

from .cli_common import console, resolve_options, run_flatten, write_bundle
from .flattener import MissingEntryFileError

watch_app = typer.Typer(help="👀 Watch mode for continuous flattening")


class SourceChangeHandler:
    """Collect file system events and trigger a rebuild, debounced."""

    def __init__(
        self,
        rebuild_callback: Callable[[List[Path]], None],
        extensions: Iterable[str],
        ignored: Iterable[Path] = (),
        debounce_seconds: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.rebuild_callback = rebuild_callback
        self.extensions = set(extensions)
        self.ignored = {Path(p).resolve() for p in ignored}
        self.debounce_seconds = debounce_seconds
        self.clock = clock
        self.last_change = 0.0
        self._pending_files: Set[str] = set()
        # dispatch runs on the observer thread, flush on the main loop
        self._lock = threading.Lock()

    def dispatch(self, event):
        """Route events to the change handler."""
        if event.is_directory:
            return
        for attr in ("src_path", "dest_path"):
            path = getattr(event, attr, None)
            if path:
                self._handle_change(path)

    def _handle_change(self, src_path: str):
        file_path = Path(src_path)
        if file_path.suffix not in self.extensions:
            return

        # Skip hidden/temp files
        if file_path.name.startswith("."):
            return
        if file_path.resolve() in self.ignored:
            return

        with self._lock:
            self._pending_files.add(str(file_path))
            self.last_change = self.clock()

    def flush(self) -> bool:
        """Rebuild once changes have been quiet for the debounce interval."""
        with self._lock:
            if not self._pending_files:
                return False
            if self.clock() - self.last_change < self.debounce_seconds:
                return False
            files, self._pending_files = self._pending_files, set()

        self.rebuild_callback([Path(f) for f in sorted(files)])
        return True


@watch_app.command("start")
def watch(
    entry: Optional[Path] = typer.Argument(None, help="Entry file (defaults to 'entry' in the config)."),
    sources: Optional[List[Path]] = typer.Option(None, "--source", "-s", help="Source root to scan (repeatable)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="File to write the bundle to."),
    external: Optional[List[str]] = typer.Option(
        None, "--external", "-x", help="Package root always treated as external (repeatable)."
    ),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Debounce interval in seconds."),
):
    """👀 Watch mode: re-flatten whenever a source file changes.

    Example:
      cflat watch start src/main/scala/Player.scala
      cflat watch start -s src/main/scala -o out/Player.scala --interval 2
    """
    try:
        from watchdog.events import FileSystemEventHandler
        from watchdog.observers import Observer
    except ImportError:
        console.print("[red]✗[/red] watchdog is not installed.")
        console.print("[dim]Install with: pip install watchdog[/dim]")
        raise typer.Exit(1)

    options = resolve_options(entry, sources, output, external)
    watch_roots = [root.resolve() for root in options.roots if root.exists()]
    if not watch_roots:
        console.print("[red]✗[/red] None of the source roots exist.")
        raise typer.Exit(1)

    rebuild_count = 0

    def rebuild(changed: List[Path]):
        nonlocal rebuild_count
        try:
            result = run_flatten(options)
            write_bundle(result, options.output)
        except MissingEntryFileError as exc:
            console.print(f"  [red]✗[/red] {escape(str(exc))}")
            return
        except OSError as exc:
            console.print(f"  [red]✗[/red] Rebuild failed: {escape(str(exc))}")
            return
        rebuild_count += 1
        names = ", ".join(p.name for p in changed) or "startup"
        console.print(
            f"  [green]✓[/green] Flattened {result.file_count} file(s) into {options.output} ({names})"
        )

    rebuild([])

    debounce = interval if interval is not None else options.debounce_seconds
    handler = SourceChangeHandler(
        rebuild,
        extensions=options.extensions,
        ignored=[options.output],
        debounce_seconds=debounce,
    )

    console.print(f"\n[bold green]👀 Watching[/bold green] for changes...")
    console.print(f"[dim]  Roots:     {', '.join(str(r) for r in watch_roots)}")
    console.print(f"  Entry:     {options.entry}")
    console.print(f"  Output:    {options.output}")
    console.print(f"  Debounce:  {debounce}s")
    console.print(f"  Press Ctrl+C to stop[/dim]\n")

    # Wrap as proper watchdog handler
    class WatchdogAdapter(FileSystemEventHandler):
        def on_modified(self, event):
            handler.dispatch(event)

        def on_created(self, event):
            handler.dispatch(event)

        def on_deleted(self, event):
            handler.dispatch(event)

        def on_moved(self, event):
            handler.dispatch(event)

    observer = Observer()
    for root in watch_roots:
        observer.schedule(WatchdogAdapter(), str(root), recursive=True)
    observer.start()

    try:
        while True:
            time.sleep(0.2)
            handler.flush()
    except KeyboardInterrupt:
        console.print(f"\n[yellow]Stopped watching.[/yellow] Rebuilt {rebuild_count} time(s).")
    finally:
        observer.stop()
        observer.join()
