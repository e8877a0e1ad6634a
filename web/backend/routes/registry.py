"""Node type registry endpoints (palette + node presentation)."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List

from fastapi import APIRouter

from ..models import FlowNode
from overseekflow.visual.registry import (
    ACTION_TYPES,
    TRIGGER_TYPES,
    get_node_presentation,
    get_panel_header,
    palette_items,
)

router = APIRouter(prefix="/registry", tags=["registry"])


@router.get("/palette")
async def list_palette() -> List[Dict[str, Any]]:
    """Toolbox entries that can be dropped on the canvas."""
    return [
        {"id": item.id, "type": item.type.value, "label": item.label, "config": dict(item.config)}
        for item in palette_items()
    ]


@router.get("/triggers")
async def list_trigger_types() -> List[Dict[str, str]]:
    return [asdict(t) for t in TRIGGER_TYPES]


@router.get("/actions")
async def list_action_types() -> List[Dict[str, str]]:
    return [asdict(t) for t in ACTION_TYPES]


@router.post("/present")
async def present_node(node: FlowNode) -> Dict[str, Any]:
    """Resolve icon/label/colors and config panel header for a node."""
    return {
        "node": asdict(get_node_presentation(node)),
        "panel": asdict(get_panel_header(node.type)),
    }
