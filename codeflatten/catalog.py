"""Source catalog: every candidate file indexed by package and by symbol.

A :class:`Catalog` is built once per run from ``(path, text)`` pairs and is
never mutated afterwards, so one instance can be shared by any number of
resolvers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .extractor import ReferenceExtractor, RegexReferenceExtractor, is_external
from .models import SourceFile

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    return str(path).replace("\\", "/")


@dataclass(frozen=True, eq=False)
class Catalog:
    files: Tuple[SourceFile, ...]
    module_index: Mapping[str, Tuple[SourceFile, ...]]
    symbol_index: Mapping[str, SourceFile]
    collisions: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    external_prefixes: Tuple[str, ...] = ()
    extractor: ReferenceExtractor = field(default_factory=RegexReferenceExtractor)
    _by_path: Mapping[str, SourceFile] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_path", {source.path: source for source in self.files})

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def build(
        cls,
        files: Iterable[Tuple[str, str]],
        external_prefixes: Sequence[str] = (),
        extractor: Optional[ReferenceExtractor] = None,
    ) -> "Catalog":
        """Index *files* in the order given.

        When several files define the same symbol, the last one wins and a
        warning is logged; callers wanting a stable winner pass the files in
        a stable (e.g. sorted) order.
        """
        prefixes = tuple(external_prefixes)
        scanner = extractor or RegexReferenceExtractor(prefixes)

        sources: List[SourceFile] = []
        seen_paths = set()
        modules: Dict[str, List[SourceFile]] = {}
        symbols: Dict[str, SourceFile] = {}
        definers: Dict[str, List[str]] = {}

        for raw_path, text in files:
            path = _normalize_path(raw_path)
            if path in seen_paths:
                logger.debug("Skipping duplicate candidate %s", path)
                continue
            seen_paths.add(path)

            source = SourceFile(
                path=path,
                text=text,
                module=scanner.extract_module(text),
                symbols=scanner.extract_symbols(text),
            )
            sources.append(source)
            if source.module is not None:
                modules.setdefault(source.module, []).append(source)
            for symbol in sorted(source.symbols):
                symbols[symbol] = source
                definers.setdefault(symbol, []).append(path)

            logger.debug(
                "Indexed %s: package=%s, symbols=[%s]",
                source.name, source.module, ", ".join(sorted(source.symbols)),
            )

        collisions = {name: tuple(paths) for name, paths in definers.items() if len(paths) > 1}
        for name, paths in sorted(collisions.items()):
            logger.warning(
                "Symbol %s is defined in %d files (%s); using %s",
                name, len(paths), ", ".join(paths), paths[-1],
            )

        logger.debug("Catalog built: %d files, %d packages, %d symbols",
                     len(sources), len(modules), len(symbols))
        return cls(
            files=tuple(sources),
            module_index=MappingProxyType({k: tuple(v) for k, v in modules.items()}),
            symbol_index=MappingProxyType(symbols),
            collisions=MappingProxyType(collisions),
            external_prefixes=prefixes,
            extractor=scanner,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.files)

    def get(self, path: str) -> Optional[SourceFile]:
        return self._by_path.get(_normalize_path(path))

    def resolve_symbol(self, name: str) -> Optional[SourceFile]:
        return self.symbol_index.get(name)

    def modules_matching(self, prefix: str) -> Tuple[SourceFile, ...]:
        """Files whose package equals *prefix* or is a dotted descendant of it."""
        if is_external(prefix, self.external_prefixes):
            return ()
        nested = prefix + "."
        return tuple(
            source
            for source in self.files
            if source.module is not None
            and (source.module == prefix or source.module.startswith(nested))
        )

    def same_module_definer(self, source: SourceFile, name: str) -> Optional[SourceFile]:
        """Another file in *source*'s package that defines *name* (last wins)."""
        if source.module is None:
            return None
        found: Optional[SourceFile] = None
        for candidate in self.module_index.get(source.module, ()):
            if candidate.path != source.path and name in candidate.symbols:
                found = candidate
        return found
