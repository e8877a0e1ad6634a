"""Flow CRUD and validation routes."""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from ..models import FlowCreateRequest, FlowUpdateRequest, StoredFlow
from ..services.flow_store import FlowStore, get_flow_store
from overseekflow.visual.validation import has_errors, validate_flow

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/flows", tags=["flows"])


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _get_or_404(store: FlowStore, flow_id: str) -> StoredFlow:
    flow = store.get(flow_id)
    if flow is None:
        raise HTTPException(status_code=404, detail=f"Flow '{flow_id}' not found")
    return flow


@router.get("", response_model=List[StoredFlow], response_model_exclude_none=True)
async def list_flows(store: FlowStore = Depends(get_flow_store)):
    """List all saved flows."""
    return store.list()


@router.post("", response_model=StoredFlow, response_model_exclude_none=True)
async def create_flow(request: FlowCreateRequest, store: FlowStore = Depends(get_flow_store)):
    """Create a new flow with nodes and edges."""
    now = _now_iso()
    flow = StoredFlow(
        id=str(uuid.uuid4())[:8],
        name=request.name,
        description=request.description,
        nodes=request.nodes,
        edges=request.edges,
        created_at=now,
        updated_at=now,
    )
    return store.save(flow)


@router.get("/{flow_id}", response_model=StoredFlow, response_model_exclude_none=True)
async def get_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    """Get a specific flow by ID."""
    return _get_or_404(store, flow_id)


@router.put("/{flow_id}", response_model=StoredFlow, response_model_exclude_none=True)
async def update_flow(flow_id: str, request: FlowUpdateRequest, store: FlowStore = Depends(get_flow_store)):
    """Update an existing flow; omitted fields keep their value."""
    flow = _get_or_404(store, flow_id)
    changes = request.model_dump(exclude_none=True)
    update: Dict[str, Any] = {}
    for key in ("name", "description"):
        if key in changes:
            update[key] = changes[key]
    if request.nodes is not None:
        update["nodes"] = request.nodes
    if request.edges is not None:
        update["edges"] = request.edges
    update["updated_at"] = _now_iso()
    return store.save(flow.model_copy(update=update))


@router.delete("/{flow_id}")
async def delete_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    """Delete a flow."""
    _get_or_404(store, flow_id)
    store.delete(flow_id)
    return {"status": "deleted", "id": flow_id}


@router.post("/{flow_id}/validate")
async def validate_saved_flow(flow_id: str, store: FlowStore = Depends(get_flow_store)):
    """Validate a saved flow without activating it."""
    flow = _get_or_404(store, flow_id)
    issues = validate_flow(flow.definition())
    return {
        "valid": not has_errors(issues),
        "issues": [i.as_dict() for i in issues],
    }
