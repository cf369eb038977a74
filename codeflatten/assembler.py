"""Join rewritten file bodies into one bundle."""

from __future__ import annotations

from typing import Iterable

SEPARATOR = "\n\n"


def assemble(bodies: Iterable[str]) -> str:
    """Concatenate *bodies* in order, one blank line between consecutive ones."""
    return SEPARATOR.join(bodies)
