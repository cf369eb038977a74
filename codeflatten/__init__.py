"""Flatten a multi-file Scala project into a single source file."""

from __future__ import annotations

__version__ = "0.1.0"

from .catalog import Catalog
from .discovery import discover_sources
from .flattener import MissingEntryFileError, flatten
from .models import BundleResult, InclusionStep, ReferenceSet, SourceFile

__all__ = [
    "BundleResult",
    "Catalog",
    "InclusionStep",
    "MissingEntryFileError",
    "ReferenceSet",
    "SourceFile",
    "__version__",
    "discover_sources",
    "flatten",
]
