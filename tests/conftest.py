"""Shared pytest fixtures for the slidesplit test suite."""

from __future__ import annotations

from pathlib import Path

import pytest

from slidesplit.config import SlideOptions
from slidesplit.renderer import MarkdownRenderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ── Options Fixtures ──────────────────────────────────────────────


@pytest.fixture
def default_options_path() -> Path:
    return FIXTURES_DIR / "default_options.yaml"


@pytest.fixture
def tight_options_path() -> Path:
    return FIXTURES_DIR / "tight_options.yaml"


@pytest.fixture
def invalid_options_path() -> Path:
    return FIXTURES_DIR / "invalid_options.yaml"


@pytest.fixture
def list_options_path() -> Path:
    return FIXTURES_DIR / "list_options.yaml"


@pytest.fixture
def nonexistent_options_path(tmp_path: Path) -> Path:
    return tmp_path / "does_not_exist.yaml"


@pytest.fixture
def options() -> SlideOptions:
    return SlideOptions()


@pytest.fixture
def raw_options() -> SlideOptions:
    """Default budgets with sanitizing off, for exact HTML comparisons."""
    return SlideOptions(sanitize=False)


@pytest.fixture
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer()


# ── Document Fixtures ─────────────────────────────────────────────


@pytest.fixture
def sample_deck_path() -> Path:
    return FIXTURES_DIR / "sample_deck.md"


@pytest.fixture
def sample_deck_text(sample_deck_path: Path) -> str:
    return sample_deck_path.read_text(encoding="utf-8")


@pytest.fixture
def example_deck_text() -> str:
    """Title, loose paragraph, heading with two lines, page break, tail."""
    return "# Title\n\nSome text\n\n## Heading\nLine1\nLine2\n===\nFinal"


def make_table(rows: int, row_text: str = "cell") -> str:
    """Build a one-column pipe table with ``rows`` content rows."""
    lines = ["| Item |", "|------|"]
    lines.extend(f"| {row_text}{i:02d} |" for i in range(rows))
    return "\n".join(lines)


@pytest.fixture
def table_factory():
    return make_table
