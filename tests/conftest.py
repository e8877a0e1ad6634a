"""Test bootstrap.

Puts the repository root on `sys.path` so `overseekflow` and `web.backend`
resolve to this checkout, and isolates the backend flow store per test.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    p = str(path)
    if p and p not in sys.path:
        sys.path.insert(0, p)


HERE = Path(__file__).resolve()
REPO_ROOT = HERE.parents[1]

_prepend_sys_path(REPO_ROOT)


@pytest.fixture
def flows_dir(tmp_path, monkeypatch) -> Path:
    from web.backend.services.flow_store import reset_flow_store

    target = tmp_path / "flows"
    monkeypatch.setenv("OVERSEEKFLOW_FLOWS_DIR", str(target))
    reset_flow_store()
    yield target
    reset_flow_store()
