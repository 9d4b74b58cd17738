"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from tree_shaker.loader.memory import InMemoryLoader

_REPO_ROOT = Path(__file__).parent.parent

# Base location for in-memory module trees; the trailing slash marks a directory.
PROJECT = "/project/"


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        if rel.parts and rel.parts[0] == "unit":
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the JavaScript fixture trees."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def javascript_parser() -> Parser:
    """Return a tree-sitter parser for JavaScript."""
    return get_parser("javascript")


@pytest.fixture
def make_loader() -> Callable[[dict[str, str]], InMemoryLoader]:
    """Build an in-memory loader from file names relative to ``PROJECT``."""

    def _make(files: dict[str, str]) -> InMemoryLoader:
        return InMemoryLoader({PROJECT + name: source for name, source in files.items()})

    return _make


@pytest.fixture
def write_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write a module tree below ``tmp_path`` and return its root."""

    def _write(files: dict[str, str]) -> Path:
        for name, source in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(source, encoding="utf-8")
        return tmp_path

    return _write


@pytest.fixture
def project() -> str:
    """Return the base location of in-memory module trees."""
    return PROJECT
