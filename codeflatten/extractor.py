"""Heuristic Scala source scanner.

Recognises, without a real parser:
- the ``package`` clause a file declares,
- the top-level classes / objects / traits it defines,
- the symbols and modules it refers to (explicit imports and
  same-package usages).

Everything is matched on a *masked* copy of the text in which comments
and string literals have been blanked out, so identifiers inside them do
not count.  The heuristics can both under- and over-match; the
:class:`ReferenceExtractor` interface keeps them swappable for a real
tokenizer later.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

from .models import GROUPED_IMPORT, SINGLE_IMPORT, WILDCARD_IMPORT, ReferenceSet

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
_MASK_RE = re.compile(
    r'"""[\s\S]*?"""'
    r'|"(?:\\.|[^"\\\n])*"'
    r"|'(?:\\.|[^'\\\n])'"
    r"|//[^\n]*"
    r"|/\*[\s\S]*?\*/"
)

_PACKAGE_RE = re.compile(r"^\s*package\s+([\w.]+)\s*;?\s*$", re.MULTILINE)

_DECLARATION_RE = re.compile(
    r"^\s*(?:(?:sealed|abstract|final|implicit|open|case"
    r"|(?:private|protected)(?:\[[\w.]+\])?)\s+)*"
    r"(?:class|object|trait|enum)\s+(\w+)"
)

_IMPORT_RE = re.compile(r"^\s*import\s+(.+?)\s*;?\s*$")
_WILDCARD_TARGET_RE = re.compile(r"^([\w.]+)\.(?:_|\*)$")
_GROUPED_TARGET_RE = re.compile(r"^([\w.]+)\.\{([^}]*)\}$")
_SINGLE_TARGET_RE = re.compile(r"^([\w.]+)\.(\w+)$")
_IDENTIFIER_RE = re.compile(r"^\w+$")

_HEADER_LINE_RE = re.compile(r"^[ \t]*(?:import[ \t].*|package[ \t]+[\w.]+[ \t]*;?[ \t]*)$", re.MULTILINE)

# new Name / Name( / Name.member / = Name / extends Name / with Name
_REFERENCE_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\bnew\s+(\w+)"),
    re.compile(r"\b(\w+)\s*\("),
    re.compile(r"\b(\w+)\.\w"),
    re.compile(r"=\s*(\w+)[ \t]*(?=[;}\n]|$)"),
    re.compile(r"\bextends\s+(\w+)"),
    re.compile(r"\bwith\s+(\w+)"),
)

BUILTIN_TYPES: FrozenSet[str] = frozenset({
    "List", "Array", "Set", "Map", "Seq", "Vector",
    "Option", "Some", "None",
    "Either", "Left", "Right",
    "Future", "Try", "Success", "Failure",
    "String", "Int", "Long", "Double", "Float", "Boolean",
    "Char", "Byte", "Short", "Unit",
    "Any", "AnyRef", "Nothing",
    "BigInt", "BigDecimal", "StringBuilder", "App",
})


# ===================================================================
# Import clauses
# ===================================================================

@dataclass(frozen=True)
class ImportClause:
    """One parsed ``import`` line.

    ``path`` is the module path in front of the selector; ``names`` the
    imported symbols (empty for wildcards).
    """

    kind: str
    path: str
    names: Tuple[str, ...] = ()

    @property
    def full_path(self) -> str:
        if self.kind == SINGLE_IMPORT:
            return f"{self.path}.{self.names[0]}"
        return self.path


def parse_import(line: str) -> Optional[ImportClause]:
    """Classify *line* as a single, grouped or wildcard import, or None."""
    match = _IMPORT_RE.match(line)
    if match is None:
        return None
    target = match.group(1)

    wildcard = _WILDCARD_TARGET_RE.match(target)
    if wildcard:
        return ImportClause(WILDCARD_IMPORT, wildcard.group(1))

    grouped = _GROUPED_TARGET_RE.match(target)
    if grouped:
        return ImportClause(GROUPED_IMPORT, grouped.group(1), _selector_names(grouped.group(2)))

    single = _SINGLE_TARGET_RE.match(target)
    if single:
        return ImportClause(SINGLE_IMPORT, single.group(1), (single.group(2),))

    return None


def _selector_names(selectors: str) -> Tuple[str, ...]:
    names: List[str] = []
    for raw in selectors.split(","):
        name = raw.split("=>", 1)[0].strip()
        if name in ("_", "*", "given") or not _IDENTIFIER_RE.match(name):
            continue
        if name not in names:
            names.append(name)
    return tuple(names)


def _strip_selector(prefix: str) -> str:
    for suffix in ("._", ".*", "."):
        if prefix.endswith(suffix):
            return prefix[: -len(suffix)]
    return prefix


def is_external(path: str, external_prefixes: Iterable[str]) -> bool:
    """True when *path* equals or descends from an allowlisted root."""
    for prefix in external_prefixes:
        root = _strip_selector(prefix)
        if root and (path == root or path.startswith(root + ".")):
            return True
    return False


def mask_comments_and_strings(text: str) -> str:
    """Blank out comments and string literals, keeping line structure."""

    def _replace(match: re.Match) -> str:
        token = match.group(0)
        newlines = "\n" * token.count("\n")
        if token.startswith("//"):
            return ""
        if token.startswith("/*"):
            return newlines
        if token.startswith("'"):
            return "''"
        return '""' + newlines

    return _MASK_RE.sub(_replace, text)


def _ordered_unique(items: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return tuple(seen)


# ===================================================================
# Abstract Extractor Interface
# ===================================================================

class ReferenceExtractor(ABC):
    """Abstract base class for source scanners."""

    @abstractmethod
    def extract_module(self, text: str) -> Optional[str]:
        """Return the declared module path of *text*, if any."""
        ...

    @abstractmethod
    def extract_symbols(self, text: str) -> FrozenSet[str]:
        """Return the names of the top-level definitions in *text*."""
        ...

    @abstractmethod
    def extract(self, text: str) -> ReferenceSet:
        """Return every symbol / module *text* refers to."""
        ...


# ===================================================================
# Regex Extractor
# ===================================================================

class RegexReferenceExtractor(ReferenceExtractor):
    """Line- and regex-based extractor good enough for contest-sized files.

    Imports whose path falls under one of *external_prefixes* are ignored
    entirely (they never name a project file).
    """

    def __init__(self, external_prefixes: Sequence[str] = ()) -> None:
        self.external_prefixes: Tuple[str, ...] = tuple(external_prefixes)

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def extract_module(self, text: str) -> Optional[str]:
        match = _PACKAGE_RE.search(mask_comments_and_strings(text))
        return match.group(1) if match else None

    def extract_symbols(self, text: str) -> FrozenSet[str]:
        symbols: List[str] = []
        depth = 0
        for line in mask_comments_and_strings(text).split("\n"):
            if depth == 0:
                match = _DECLARATION_RE.match(line)
                if match:
                    symbols.append(match.group(1))
            depth = max(depth + line.count("{") - line.count("}"), 0)
        return frozenset(symbols)

    # ------------------------------------------------------------------
    # References
    # ------------------------------------------------------------------

    def extract(self, text: str) -> ReferenceSet:
        masked = mask_comments_and_strings(text)
        single: List[str] = []
        grouped: List[str] = []
        wildcard: List[str] = []

        for line in masked.split("\n"):
            clause = parse_import(line)
            if clause is None or is_external(clause.full_path, self.external_prefixes):
                continue
            if clause.kind == WILDCARD_IMPORT:
                wildcard.append(clause.path)
            elif clause.kind == GROUPED_IMPORT:
                grouped.extend(clause.names)
            else:
                single.extend(clause.names)

        imported = set(single) | set(grouped)
        same_module = tuple(
            name for name in self._direct_references(masked) if name not in imported
        )

        references = ReferenceSet(
            same_module=same_module,
            single_imports=_ordered_unique(single),
            grouped_imports=_ordered_unique(grouped),
            wildcard_imports=_ordered_unique(wildcard),
        )
        if not references.is_empty():
            logger.debug(
                "References: same-module=[%s] single=[%s] grouped=[%s] wildcard=[%s]",
                ", ".join(references.same_module),
                ", ".join(references.single_imports),
                ", ".join(references.grouped_imports),
                ", ".join(references.wildcard_imports),
            )
        return references

    @staticmethod
    def _direct_references(masked: str) -> Tuple[str, ...]:
        """Return upper-case, non-builtin names used in the body, in order."""
        body = _HEADER_LINE_RE.sub("", masked)
        hits: List[Tuple[int, str]] = []
        for pattern in _REFERENCE_PATTERNS:
            for match in pattern.finditer(body):
                name = match.group(1)
                if name[0].isupper() and name not in BUILTIN_TYPES:
                    hits.append((match.start(1), name))
        hits.sort()
        return _ordered_unique(name for _, name in hits)
