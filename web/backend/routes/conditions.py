"""Condition catalogue and preview endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from overseekflow.visual.conditions import group_catalogue, render_condition_preview
from overseekflow.visual.models import ConditionRule, MatchType

router = APIRouter(prefix="/conditions", tags=["conditions"])


class ConditionPreviewRequest(BaseModel):
    conditions: List[ConditionRule] = Field(default_factory=list)
    matchType: MatchType = MatchType.ALL


class ConditionPreviewResponse(BaseModel):
    preview: Optional[str] = None


@router.get("/groups")
async def list_condition_groups() -> List[Dict[str, Any]]:
    return group_catalogue()


@router.post("/preview", response_model=ConditionPreviewResponse)
async def preview_conditions(request: ConditionPreviewRequest):
    """Render the `If ... → YES / Otherwise → NO` text for a rule list."""
    return ConditionPreviewResponse(
        preview=render_condition_preview(request.conditions, request.matchType.value)
    )
