"""Pytest configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import structlog

from phpunit_events.config import Settings, get_settings

if TYPE_CHECKING:
    from collections.abc import Generator

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo logging configuration done by a test (e.g. a CLI invocation)."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Isolate tests from PHPUNIT_EVENTS_* variables in the environment."""
    for name in ("LOG_LEVEL", "LOG_JSON_FORMAT", "STRICT_FINISH", "AUDIT_OPEN_KEYS"):
        monkeypatch.delenv(f"PHPUNIT_EVENTS_{name}", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def phpunit_output_path() -> Path:
    """Path to a PHPUnit 9 --teamcity run with two failures."""
    return FIXTURES_DIR / "phpunit_teamcity.txt"


@pytest.fixture
def phpunit_output(phpunit_output_path: Path) -> list[str]:
    return phpunit_output_path.read_text().splitlines()


@pytest.fixture
def paratest_output_path() -> Path:
    """Path to a ParaTest run with two workers reporting the same test name."""
    return FIXTURES_DIR / "paratest_teamcity.txt"


@pytest.fixture
def paratest_output(paratest_output_path: Path) -> list[str]:
    return paratest_output_path.read_text().splitlines()
