"""Configuration manager for codeflatten using a TOML file.

The file holds a single ``[flatten]`` table::

    [flatten]
    entry = "src/main/scala/Player.scala"
    output = "flattened/Player.scala"
    source_roots = ["src/main/scala"]
    external_prefixes = ["scala", "java"]
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import toml

from .config import (
    CONFIG_FILE,
    CONFIG_SECTION,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_EXTENSIONS,
    DEFAULT_OUTPUT,
    DEFAULT_SOURCE_ROOTS,
    SKIP_DIRS,
)

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class FlattenConfig:
    entry: Optional[str] = None
    output: str = DEFAULT_OUTPUT
    source_roots: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_ROOTS))
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    external_prefixes: List[str] = field(default_factory=list)
    skip_dirs: List[str] = field(default_factory=lambda: sorted(SKIP_DIRS))
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FlattenConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

        config = cls()
        for key in known & set(data):
            setattr(config, key, _coerce(key, data[key]))
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


_LIST_KEYS = {"source_roots", "extensions", "external_prefixes", "skip_dirs"}


def _coerce(key: str, value: Any) -> Any:
    """Validate *value* for *key*; strings are split on commas for list keys."""
    if key in _LIST_KEYS:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        raise ConfigError(f"'{key}' must be a list of strings")
    if key == "debounce_seconds":
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"'{key}' must be a number, got {value!r}") from None
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"'{key}' must be a string")
    return value


def config_path(path: Optional[Path] = None) -> Path:
    return Path(path) if path is not None else CONFIG_FILE


def load_full_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the entire TOML file (all tables); empty when it doesn't exist."""
    file_path = config_path(path)
    if not file_path.exists():
        return {}
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return toml.load(f)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {file_path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> FlattenConfig:
    """Load the ``[flatten]`` table, falling back to defaults."""
    section = load_full_config(path).get(CONFIG_SECTION, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{CONFIG_SECTION}] must be a table")
    return FlattenConfig.from_dict(section)


def save_config(config: FlattenConfig, path: Optional[Path] = None) -> Path:
    """Write *config* into the ``[flatten]`` table, preserving other tables."""
    file_path = config_path(path)
    full = load_full_config(file_path)
    full[CONFIG_SECTION] = config.to_dict()
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        toml.dump(full, f)
    return file_path


def set_config_value(key: str, value: str, path: Optional[Path] = None) -> FlattenConfig:
    config = load_config(path)
    if key not in {f.name for f in fields(FlattenConfig)}:
        raise ConfigError(f"Unknown config key: {key}")
    setattr(config, key, _coerce(key, value))
    save_config(config, path)
    return config
