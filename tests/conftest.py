"""Shared fixtures and helpers for tests."""

from collections.abc import Callable
from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from r_style_lint.config import LintConfig
from r_style_lint.core.engine import RuleEngine
from r_style_lint.core.parser import parse
from r_style_lint.models import SourceFile
from r_style_lint.rules import build_rules

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def r_parser() -> Parser:
    """Return a raw tree-sitter parser for R."""
    return get_parser("r")


@pytest.fixture
def default_config() -> LintConfig:
    return LintConfig()


@pytest.fixture
def make_source() -> Callable[..., SourceFile]:
    """Build a parsed SourceFile from literal R text."""

    def _make(text: str, path: str = "analysis.R") -> SourceFile:
        return SourceFile(path=path, text=text, tree=parse(text))

    return _make


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an R script under the temporary directory and return its path."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def engine(default_config: LintConfig) -> RuleEngine:
    return RuleEngine(build_rules(), default_config)
