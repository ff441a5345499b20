"""Shared pytest fixtures for loxexpr tests."""

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def lox_fixtures_dir(fixtures_dir: Path) -> Path:
    """Return path to .lox script fixtures."""
    return fixtures_dir / "lox"
