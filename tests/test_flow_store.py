from __future__ import annotations

from pathlib import Path

from web.backend.services import flow_store
from web.backend.services.flow_store import FlowStore, default_flows_dir, resolve_flows_dir


def test_checkout_default_is_flows_at_repo_root(monkeypatch) -> None:
    monkeypatch.delenv("OVERSEEKFLOW_FLOWS_DIR", raising=False)
    repo_root = Path(__file__).resolve().parents[1]
    assert default_flows_dir() == repo_root / "flows"
    assert resolve_flows_dir() == (repo_root / "flows").resolve()


def test_installed_default_is_under_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(flow_store, "_REPO_ROOT", tmp_path / "site-packages")
    assert default_flows_dir() == Path.home() / ".overseekflow" / "flows"


def test_env_override_wins(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("OVERSEEKFLOW_FLOWS_DIR", str(tmp_path / "elsewhere"))
    assert resolve_flows_dir() == (tmp_path / "elsewhere").resolve()


def test_store_creates_its_directory(tmp_path: Path) -> None:
    store = FlowStore(tmp_path / "a" / "b")
    assert (tmp_path / "a" / "b").is_dir()
    assert store.list() == []
