"""Pytest configuration and shared fixtures."""
from __future__ import annotations

import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Ensure src/ is on the import path (for local imports without installing as package)
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the root directory of the project."""
    return Path(__file__).resolve().parent.parent


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Shipped default config."""
    return project_root / "config" / "default.yaml"


@pytest.fixture(scope="function")
def clock():
    """Deterministic clock: 15:04 UTC, advancing one minute per call."""
    state = {"now": datetime(2024, 5, 1, 15, 4, tzinfo=timezone.utc)}

    def _tick() -> datetime:
        now = state["now"]
        state["now"] = now + timedelta(minutes=1)
        return now

    return _tick


@pytest.fixture(scope="function")
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Ensure tests run with a clean environment (no leftover vars)."""
    for var in list(os.environ):
        if var == "CAREBOT_CONFIG" or var.startswith("CAREBOT__"):
            monkeypatch.delenv(var, raising=False)
    yield
