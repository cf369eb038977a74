"""Source-file discovery: walk the source roots and read every candidate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Set, Tuple

from .config import DEFAULT_EXTENSIONS, SKIP_DIRS

logger = logging.getLogger(__name__)


def source_key(path: Path) -> str:
    """Identity used for a file throughout a run (absolute, POSIX style)."""
    return path.resolve().as_posix()


def iter_source_paths(
    roots: Iterable[Path],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    skip_dirs: Optional[Iterable[str]] = None,
) -> List[Path]:
    skipped: Set[str] = set(SKIP_DIRS if skip_dirs is None else skip_dirs)
    found: List[Path] = []
    for root in roots:
        root = Path(root)
        if not root.exists():
            logger.warning("Directory %s does not exist", root.resolve())
            continue
        if root.is_file():
            found.append(root)
            continue
        for file_path in sorted(root.rglob("*")):
            if not file_path.is_file() or file_path.suffix not in extensions:
                continue
            relative_parts = file_path.relative_to(root).parts[:-1]
            if any(part in skipped for part in relative_parts):
                continue
            found.append(file_path)
    return found


def discover_sources(
    roots: Iterable[Path],
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    skip_dirs: Optional[Iterable[str]] = None,
    extra_files: Iterable[Path] = (),
) -> List[Tuple[str, str]]:
    """Return ``(path, text)`` for every readable source file, sorted by path.

    Files that cannot be read or decoded as UTF-8 are logged and skipped.
    """
    candidates = {}
    for file_path in [*iter_source_paths(roots, extensions, skip_dirs), *map(Path, extra_files)]:
        candidates.setdefault(source_key(file_path), file_path)
    logger.debug("Found %d source files", len(candidates))

    sources: List[Tuple[str, str]] = []
    for key in sorted(candidates):
        try:
            text = candidates[key].read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not process %s: %s", candidates[key].name, exc)
            continue
        sources.append((key, text))
    return sources
