"""Core data models shared by the catalog, resolver and bundler layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Tuple

SAME_MODULE = "same-module"
SINGLE_IMPORT = "single-import"
GROUPED_IMPORT = "grouped-import"
WILDCARD_IMPORT = "wildcard-import"


@dataclass(frozen=True)
class SourceFile:
    path: str
    text: str
    module: Optional[str] = None
    symbols: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class ReferenceSet:
    """Identifiers one file refers to, split by how they are reached.

    Each tuple keeps first-encounter order and holds no duplicates.
    ``wildcard_imports`` contains module paths, the others symbol names.
    """

    same_module: Tuple[str, ...] = ()
    single_imports: Tuple[str, ...] = ()
    grouped_imports: Tuple[str, ...] = ()
    wildcard_imports: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not (
            self.same_module
            or self.single_imports
            or self.grouped_imports
            or self.wildcard_imports
        )


@dataclass(frozen=True)
class InclusionStep:
    source: str
    target: str
    category: str
    reference: str


@dataclass(frozen=True)
class BundleResult:
    text: str
    files: Tuple[SourceFile, ...]
    steps: Tuple[InclusionStep, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.files)
