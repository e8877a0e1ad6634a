"""File-backed flow storage (one JSON file per flow)."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import ValidationError

from overseekflow.visual.models import StoredFlow

logger = logging.getLogger(__name__)

FLOWS_DIR_ENV = "OVERSEEKFLOW_FLOWS_DIR"

_REPO_ROOT = Path(__file__).resolve().parents[3]


def default_flows_dir() -> Path:
    """`<checkout>/flows` when running from a clone, `~/.overseekflow/flows` otherwise."""
    if (_REPO_ROOT / "pyproject.toml").is_file() and (_REPO_ROOT / "overseekflow").is_dir():
        return _REPO_ROOT / "flows"
    return Path.home() / ".overseekflow" / "flows"


def resolve_flows_dir() -> Path:
    raw = (os.getenv(FLOWS_DIR_ENV) or "").strip()
    directory = Path(raw).expanduser() if raw else default_flows_dir()
    return directory.resolve()


class FlowStore:
    """In-memory index of flows, written through to `<dir>/<id>.json`."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._flows: Dict[str, StoredFlow] = self._load_from_disk()

    def _path(self, flow_id: str) -> Path:
        return self.directory / f"{flow_id}.json"

    def _load_from_disk(self) -> Dict[str, StoredFlow]:
        flows: Dict[str, StoredFlow] = {}
        for path in sorted(self.directory.glob("*.json")):
            try:
                flow = StoredFlow.model_validate_json(path.read_text(encoding="utf-8"))
            except (OSError, ValidationError, ValueError) as e:
                logger.warning("Failed to load flow from %s: %s", path, e)
                continue
            flows[flow.id] = flow
            logger.info("Loaded flow '%s' (%s) from %s", flow.name, flow.id, path)
        return flows

    def list(self) -> List[StoredFlow]:
        return list(self._flows.values())

    def get(self, flow_id: str) -> Optional[StoredFlow]:
        return self._flows.get(flow_id)

    def save(self, flow: StoredFlow) -> StoredFlow:
        path = self._path(flow.id)
        path.write_text(flow.model_dump_json(indent=2, exclude_none=True), encoding="utf-8")
        self._flows[flow.id] = flow
        logger.info("Saved flow '%s' (%s) to %s", flow.name, flow.id, path)
        return flow

    def delete(self, flow_id: str) -> bool:
        if self._flows.pop(flow_id, None) is None:
            return False
        path = self._path(flow_id)
        if path.exists():
            path.unlink()
            logger.info("Deleted flow file %s", path)
        return True


_store: Optional[FlowStore] = None


def get_flow_store() -> FlowStore:
    """Process-wide store, created on first use from OVERSEEKFLOW_FLOWS_DIR."""
    global _store
    if _store is None:
        _store = FlowStore(resolve_flows_dir())
    return _store


def reset_flow_store() -> None:
    global _store
    _store = None
