"""Default settings and config-file location for codeflatten."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILE = Path(os.environ.get("CODEFLATTEN_CONFIG", ".codeflatten.toml")).expanduser()
CONFIG_SECTION = "flatten"

DEFAULT_SOURCE_ROOTS = ["src/main/scala"]
DEFAULT_OUTPUT = "flattened/Main.scala"
DEFAULT_EXTENSIONS = (".scala",)
DEFAULT_DEBOUNCE_SECONDS = 1.0

SKIP_DIRS = {
    ".git", "target", ".bsp", ".idea", ".metals", ".bloop",
    "node_modules",
}
