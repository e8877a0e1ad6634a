"""Backend API routes."""

from .conditions import router as conditions_router
from .flows import router as flows_router
from .recipes import router as recipes_router
from .registry import router as registry_router

__all__ = ["conditions_router", "flows_router", "recipes_router", "registry_router"]
