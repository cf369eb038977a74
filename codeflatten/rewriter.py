"""Strip package clauses and project-local imports from a source file."""

from __future__ import annotations

import logging
import re
from typing import List

from .catalog import Catalog
from .extractor import ImportClause, is_external, mask_comments_and_strings, parse_import
from .models import GROUPED_IMPORT, WILDCARD_IMPORT

logger = logging.getLogger(__name__)

_PACKAGE_LINE_RE = re.compile(r"^package\s+(?!object\b)")
_IMPORT_LINE_RE = re.compile(r"^import\s")


class HeaderRewriter:
    """Line filter deciding, for each import, whether it names project code.

    An import is project-local when the catalog can resolve it; anything
    else (including lines whose shape is not recognised) is kept verbatim.
    """

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog

    def rewrite(self, text: str) -> str:
        """Filter *text* line by line; a single trailing newline is dropped.

        Lines are split on LF only, so form feeds and Unicode line
        separators inside literals survive untouched.
        """
        if text.endswith("\n"):
            text = text[:-1]
        kept: List[str] = []
        for line in text.split("\n"):
            trimmed = line.strip()
            if _PACKAGE_LINE_RE.match(trimmed):
                continue
            if _IMPORT_LINE_RE.match(trimmed) and self.is_local_import(trimmed):
                logger.debug("Stripped local import: %s", trimmed)
                continue
            kept.append(line)
        return "\n".join(kept)

    def is_local_import(self, line: str) -> bool:
        clause = parse_import(mask_comments_and_strings(line))
        if clause is None:
            return False
        if is_external(clause.full_path, self.catalog.external_prefixes):
            return False
        return self._resolves_locally(clause)

    def _resolves_locally(self, clause: ImportClause) -> bool:
        if clause.kind == WILDCARD_IMPORT:
            return bool(self.catalog.modules_matching(clause.path))
        if clause.kind == GROUPED_IMPORT:
            return any(self.catalog.resolve_symbol(name) is not None for name in clause.names)
        return self.catalog.resolve_symbol(clause.names[0]) is not None
