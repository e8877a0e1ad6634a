"""Visual flow builder: models, graph, registry, config panel and canvas."""

from .canvas import EMPTY_CANVAS_HINT, CanvasController
from .conditions import OPERATOR_LABELS, render_condition_preview
from .config_panel import ConfigPanel, FieldSpec
from .graph import FlowGraph, FlowGraphError, SequentialIdFactory, uuid_id_factory
from .models import (
    FlowDefinition,
    FlowEdge,
    FlowNode,
    NodeData,
    NodeKind,
    Position,
    StoredFlow,
    narrow_config,
)
from .registry import get_node_presentation
from .validation import FlowIssue, validate_flow

__all__ = [
    "CanvasController",
    "ConfigPanel",
    "EMPTY_CANVAS_HINT",
    "FieldSpec",
    "FlowDefinition",
    "FlowEdge",
    "FlowGraph",
    "FlowGraphError",
    "FlowIssue",
    "FlowNode",
    "NodeData",
    "NodeKind",
    "OPERATOR_LABELS",
    "Position",
    "SequentialIdFactory",
    "StoredFlow",
    "get_node_presentation",
    "narrow_config",
    "render_condition_preview",
    "uuid_id_factory",
    "validate_flow",
]
