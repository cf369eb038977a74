"""Closure resolver: which files a bundle needs, and in what order."""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Dict, List, Tuple

from .catalog import Catalog
from .models import (
    GROUPED_IMPORT,
    SAME_MODULE,
    SINGLE_IMPORT,
    WILDCARD_IMPORT,
    InclusionStep,
    SourceFile,
)

logger = logging.getLogger(__name__)


class ClosureResolver:
    """Expand an entry file to the full set of files it transitively needs.

    Iterative work-list over a shared, read-only :class:`Catalog`.  A file
    enters the inclusion set at most once and is expanded at most once,
    which also breaks reference cycles.  The returned order is discovery
    order: entry first, then dependencies as their references are met.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self.steps: List[InclusionStep] = []
        self._included: Dict[str, SourceFile] = {}
        self._queue: Deque[SourceFile] = deque()

    def resolve(self, entry: SourceFile) -> Tuple[SourceFile, ...]:
        self.steps = []
        self._included = {entry.path: entry}
        self._queue = deque([entry])

        extractor = self.catalog.extractor
        while self._queue:
            current = self._queue.popleft()
            references = extractor.extract(current.text)

            for name in references.same_module:
                target = self.catalog.same_module_definer(current, name)
                if target is not None:
                    self._include(current, target, SAME_MODULE, name)

            for category, names in (
                (SINGLE_IMPORT, references.single_imports),
                (GROUPED_IMPORT, references.grouped_imports),
            ):
                for name in names:
                    target = self.catalog.resolve_symbol(name)
                    if target is None:
                        logger.debug("Unresolved %s %s in %s", category, name, current.name)
                        continue
                    self._include(current, target, category, name)

            for prefix in references.wildcard_imports:
                matches = self.catalog.modules_matching(prefix)
                if not matches:
                    logger.debug("Wildcard %s._ in %s matches no project file", prefix, current.name)
                for target in matches:
                    self._include(current, target, WILDCARD_IMPORT, prefix)

        return tuple(self._included.values())

    def _include(self, source: SourceFile, target: SourceFile, category: str, reference: str) -> None:
        if target.path in self._included:
            return
        self._included[target.path] = target
        self._queue.append(target)
        self.steps.append(
            InclusionStep(source=source.path, target=target.path, category=category, reference=reference)
        )
        logger.debug(
            "Added %s (%s %s from %s)", target.name, category, reference, source.name,
        )
