"""Pytest configuration and fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Add src to the Python path
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# Helper scripts run as child processes
FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def python() -> str:
    """Interpreter used to run child processes."""
    return sys.executable


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory of helper scripts."""
    return FIXTURES_DIR


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch: pytest.MonkeyPatch):
    """Drop ASYNC_SPAWN_* overrides and the cached config around each test."""
    from async_spawn import config

    for name in ("ASYNC_SPAWN_ENCODING", "ASYNC_SPAWN_DECODE_ERRORS", "ASYNC_SPAWN_LOG_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config, "_config", None)
    yield
    config._config = None
