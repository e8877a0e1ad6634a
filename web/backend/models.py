"""Web backend models.

The web backend re-exports the portable flow models from
`overseekflow.visual.models` so other hosts (CLI, workers) share the same
JSON schema without importing the backend package.
"""

from __future__ import annotations

from overseekflow.visual.models import (  # noqa: F401
    FlowCreateRequest,
    FlowDefinition,
    FlowEdge,
    FlowNode,
    FlowUpdateRequest,
    NodeData,
    NodeKind,
    Position,
    StoredFlow,
)

__all__ = [
    "FlowCreateRequest",
    "FlowDefinition",
    "FlowEdge",
    "FlowNode",
    "FlowUpdateRequest",
    "NodeData",
    "NodeKind",
    "Position",
    "StoredFlow",
]
