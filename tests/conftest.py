"""Pytest configuration and fixtures for codeflatten tests."""

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, Iterable, Tuple

import pytest

from codeflatten.catalog import Catalog


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path: Path, monkeypatch):
    """Keep every test away from the user's config file and CLI log handlers.

    The CLI installs a non-propagating rich handler on the ``codeflatten``
    logger; undo that after each test so ``caplog`` keeps working.
    """
    monkeypatch.setattr("codeflatten.config_manager.CONFIG_FILE", tmp_path / ".codeflatten.toml")
    yield
    logger = logging.getLogger("codeflatten")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to the sample Scala project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def write_sources(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write ``{relative_path: content}`` under ``temp_dir/src`` and return that root."""

    def _write(files: Dict[str, str]) -> Path:
        root = temp_dir / "src"
        for relative, content in files.items():
            target = root / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def make_catalog() -> Callable[..., Catalog]:
    """Build an in-memory catalog from ``(path, text)`` pairs."""

    def _build(files: Iterable[Tuple[str, str]], external_prefixes: Iterable[str] = ()) -> Catalog:
        return Catalog.build(list(files), tuple(external_prefixes))

    return _build
