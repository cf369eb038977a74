"""One flattening run: resolve, rewrite and assemble starting from an entry file."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from .assembler import assemble
from .catalog import Catalog
from .config import DEFAULT_EXTENSIONS
from .discovery import discover_sources, source_key
from .models import BundleResult
from .resolver import ClosureResolver
from .rewriter import HeaderRewriter

logger = logging.getLogger(__name__)


class MissingEntryFileError(FileNotFoundError):
    """Raised when the entry file is not part of the candidate pool."""

    def __init__(self, entry: str) -> None:
        super().__init__(f"Entry file {entry} is not among the source files")
        self.entry = entry


def flatten(entry: Union[str, Path], catalog: Catalog) -> BundleResult:
    """Bundle *entry* and everything it depends on into a single text.

    *entry* is looked up as given first; a Path (or a string naming an
    existing file) that misses is retried under its resolved absolute
    form, the key ``discover_sources`` uses.  Each call uses its own
    resolver, so concurrent calls may share one catalog.
    """
    source = catalog.get(str(entry))
    if source is None and (isinstance(entry, Path) or Path(entry).exists()):
        source = catalog.get(source_key(Path(entry)))
    if source is None:
        raise MissingEntryFileError(str(entry))

    logger.info("Flattening from: %s", source.name)
    resolver = ClosureResolver(catalog)
    files = resolver.resolve(source)

    rewriter = HeaderRewriter(catalog)
    text = assemble(rewriter.rewrite(f.text) for f in files)

    logger.info("Included %d files", len(files))
    return BundleResult(text=text, files=files, steps=tuple(resolver.steps))


def flatten_project(
    entry: Path,
    roots: Iterable[Path],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    skip_dirs: Optional[Iterable[str]] = None,
    external_prefixes: Sequence[str] = (),
) -> BundleResult:
    """Discover the sources under *roots*, index them and flatten *entry*.

    The entry file joins the candidate pool even when it lives outside the
    roots.  A fresh catalog is built on every call.
    """
    entry = Path(entry)
    extra = [entry] if entry.is_file() else []
    files = discover_sources(roots, extensions, skip_dirs, extra_files=extra)
    catalog = Catalog.build(files, external_prefixes)
    return flatten(source_key(entry), catalog)
