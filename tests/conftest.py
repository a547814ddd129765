"""Shared test fixtures — sample C# solution and settings."""

from pathlib import Path

import pytest

from archgap.config import Settings

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


@pytest.fixture
def sample_solution() -> Path:
    """Small C# solution with controllers, services and project files."""
    return FIXTURES_DIR / "sample_solution"


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env lookup)."""
    return Settings(_env_file=None)  # type: ignore[call-arg]
