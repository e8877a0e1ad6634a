"""OverSeek automation flow builder."""

__version__ = "0.1.0"

from .visual import CanvasController, FlowDefinition, FlowGraph, FlowGraphError

__all__ = ["CanvasController", "FlowDefinition", "FlowGraph", "FlowGraphError", "__version__"]
