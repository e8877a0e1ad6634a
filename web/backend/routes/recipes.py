"""Automation recipe endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException

from ..models import FlowDefinition
from overseekflow.visual.recipes import get_recipe, instantiate_recipe, list_recipes, recipe_summary

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get("")
async def get_recipes(category: Optional[str] = None) -> List[Dict[str, Any]]:
    return [recipe_summary(r) for r in list_recipes(category)]


@router.post("/{recipe_id}/instantiate", response_model=FlowDefinition, response_model_exclude_none=True)
async def instantiate(recipe_id: str):
    """Build a ready-to-edit `{nodes, edges}` flow from a recipe."""
    recipe = get_recipe(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe '{recipe_id}' not found")
    return instantiate_recipe(recipe)
