# tests/conftest.py
from __future__ import annotations

import pytest

from numsteps import runtime
from numsteps.registry import discover
from numsteps.workspace import ensure_workspace_seeded


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets its own seeded workspace and a clean runtime (English, no profile)."""
    monkeypatch.setenv("NUMSTEPS_HOME", str(tmp_path / "workspace"))
    runtime.reset()
    ensure_workspace_seeded()
    yield tmp_path / "workspace"
    runtime.reset()


@pytest.fixture(scope="session")
def index():
    return discover()
