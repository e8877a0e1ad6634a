"""Canvas controller: glue between the palette, the graph and the config panel."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from .config_panel import ConfigPanel, ConfirmCallback
from .graph import FlowGraph, FlowGraphError, IdFactory
from .models import FlowDefinition, FlowEdge, FlowNode, NodeData, NodeKind, Position
from .recipes import get_recipe, instantiate_recipe
from .registry import get_palette_item

logger = logging.getLogger(__name__)

EMPTY_CANVAS_HINT = "Drag a trigger from the toolbox to start your flow"

SaveCallback = Callable[[FlowDefinition], Any]


def _coerce_definition(initial_flow: Any) -> FlowDefinition:
    if initial_flow is None:
        return FlowDefinition()
    if isinstance(initial_flow, FlowDefinition):
        return initial_flow
    if isinstance(initial_flow, Mapping):
        return FlowDefinition.model_validate(
            {"nodes": initial_flow.get("nodes") or [], "edges": initial_flow.get("edges") or []}
        )
    raise TypeError(f"Unsupported initial flow: {type(initial_flow).__name__}")


class CanvasController:
    """Editing session for one flow.

    Holds the graph, the current selection and the save/cancel hooks. The
    controller never persists anything itself: `save()` hands the serialized
    flow to `on_save`, `cancel()` drops the edits and calls `on_cancel`.
    """

    def __init__(
        self,
        initial_flow: Union[FlowDefinition, Mapping[str, Any], None] = None,
        on_save: Optional[SaveCallback] = None,
        on_cancel: Optional[Callable[[], Any]] = None,
        id_factory: Optional[IdFactory] = None,
    ):
        self._on_save = on_save
        self._on_cancel = on_cancel
        self._id_factory = id_factory
        self._initial = _coerce_definition(initial_flow)
        self.graph = FlowGraph.from_definition(self._initial, id_factory=id_factory)
        self.selected_id: Optional[str] = None

    # --- State -----------------------------------------------------------

    @property
    def nodes(self):
        return self.graph.nodes

    @property
    def edges(self):
        return self.graph.edges

    @property
    def empty_hint(self) -> Optional[str]:
        return EMPTY_CANVAS_HINT if self.graph.is_empty() else None

    @property
    def selected_node(self) -> Optional[FlowNode]:
        if self.selected_id is None or not self.graph.has_node(self.selected_id):
            return None
        return self.graph.get_node(self.selected_id)

    @property
    def panel_open(self) -> bool:
        return self.selected_node is not None

    # --- Palette / graph events -----------------------------------------

    def drop(
        self,
        node_type: Optional[str],
        position: Union[Position, Dict[str, Any], tuple],
        label: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
    ) -> Optional[FlowNode]:
        """Create a node from a palette drop; a drop without a type is ignored."""
        if not node_type:
            return None
        return self.graph.add_node(node_type, position, initial_config=config, label=label)

    def drop_palette_item(self, item_id: str, position: Union[Position, Dict[str, Any], tuple]) -> Optional[FlowNode]:
        item = get_palette_item(item_id)
        if item is None:
            logger.warning("Unknown palette item '%s'", item_id)
            return None
        return self.drop(item.type.value, position, label=item.label, config=item.config)

    def connect(
        self,
        source_id: str,
        target_id: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> FlowEdge:
        return self.graph.connect(source_id, target_id, source_handle, target_handle)

    def apply_node_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        """Apply change events emitted by the graph renderer.

        Supported: `position`, `remove`, `select`. Others (dimensions...) are
        layout-only and ignored.
        """
        for change in changes:
            kind = change.get("type")
            node_id = change.get("id")
            if not isinstance(node_id, str) or not self.graph.has_node(node_id):
                continue
            if kind == "position" and change.get("position") is not None:
                self.graph.move_node(node_id, change["position"])
            elif kind == "remove":
                self.delete_node(node_id)
            elif kind == "select":
                if change.get("selected"):
                    self.select(node_id)
                elif self.selected_id == node_id:
                    self.clear_selection()

    def apply_edge_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        for change in changes:
            if change.get("type") != "remove":
                continue
            try:
                self.graph.delete_edge(str(change.get("id")))
            except FlowGraphError:
                logger.debug("Ignoring removal of unknown edge %s", change.get("id"))

    # --- Selection / config panel ----------------------------------------

    def select(self, node_id: str) -> FlowNode:
        node = self.graph.get_node(node_id)
        self.selected_id = node_id
        return node

    def clear_selection(self) -> None:
        self.selected_id = None

    def update_node_data(self, node_id: str, data: Union[NodeData, Dict[str, Any]]) -> FlowNode:
        return self.graph.update_node_data(node_id, data)

    def delete_node(self, node_id: str) -> FlowNode:
        node = self.graph.delete_node(node_id)
        if self.selected_id == node_id:
            self.clear_selection()
        return node

    def config_panel(self, confirm: Optional[ConfirmCallback] = None) -> Optional[ConfigPanel]:
        """Panel for the selected node, or None when nothing is selected."""
        node = self.selected_node
        if node is None:
            return None
        return ConfigPanel(
            node,
            on_update=self.update_node_data,
            on_delete=self.delete_node,
            on_close=self.clear_selection,
            confirm=confirm,
        )

    # --- Recipes ---------------------------------------------------------

    def load_recipe(self, recipe_id: str) -> FlowDefinition:
        recipe = get_recipe(recipe_id)
        if recipe is None:
            raise FlowGraphError(f"Recipe '{recipe_id}' not found")
        definition = instantiate_recipe(recipe)
        self.graph = FlowGraph.from_definition(definition, id_factory=self._id_factory)
        self.clear_selection()
        return definition

    # --- Save / cancel ---------------------------------------------------

    def to_definition(self) -> FlowDefinition:
        return self.graph.to_definition()

    def save(self) -> FlowDefinition:
        definition = self.to_definition()
        if self._on_save is not None:
            self._on_save(definition)
        return definition

    def cancel(self) -> None:
        """Discard every edit since load; nothing is persisted."""
        self.graph = FlowGraph.from_definition(self._initial, id_factory=self._id_factory)
        self.clear_selection()
        if self._on_cancel is not None:
            self._on_cancel()
