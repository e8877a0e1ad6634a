"""In-memory node/edge graph for one flow being edited."""

from __future__ import annotations

import copy
import itertools
import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from .models import FlowDefinition, FlowEdge, FlowNode, NodeData, NodeKind, Position

logger = logging.getLogger(__name__)

IdFactory = Callable[[], str]


class FlowGraphError(KeyError):
    """Raised for unknown node or edge ids, and for duplicate node ids on load."""


class SequentialIdFactory:
    """Monotonic `<prefix>_<n>` ids owned by a single graph.

    `reserve` lets the graph skip ids that were loaded from a saved flow.
    """

    def __init__(self, prefix: str = "node", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)
        self._taken: set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        self._taken.update(ids)

    def __call__(self) -> str:
        while True:
            candidate = f"{self.prefix}_{next(self._counter)}"
            if candidate not in self._taken:
                self._taken.add(candidate)
                return candidate


def uuid_id_factory(prefix: str = "node") -> IdFactory:
    def _make() -> str:
        return f"{prefix}_{uuid.uuid4().hex[:12]}"

    return _make


def _as_position(value: Union[Position, Dict[str, Any], tuple]) -> Position:
    if isinstance(value, Position):
        return value
    if isinstance(value, dict):
        return Position.model_validate(value)
    x, y = value
    return Position(x=x, y=y)


class FlowGraph:
    """Canonical graph state for a flow on the canvas.

    Nodes keep insertion order; edges are an ordered list. The graph never
    talks to persistence: `to_definition()` is the hand-off point.

    Example:
        >>> g = FlowGraph()
        >>> t = g.add_node("trigger", (0, 0), {"triggerType": "ORDER_CREATED"})
        >>> a = g.add_node("action", (0, 120), {"actionType": "SEND_EMAIL"})
        >>> g.connect(t.id, a.id).source == t.id
        True
    """

    def __init__(
        self,
        nodes: Iterable[FlowNode] = (),
        edges: Iterable[FlowEdge] = (),
        id_factory: Optional[IdFactory] = None,
        edge_id_factory: Optional[IdFactory] = None,
    ):
        self._nodes: Dict[str, FlowNode] = {}
        for node in nodes:
            if node.id in self._nodes:
                raise FlowGraphError(f"Duplicate node id '{node.id}'")
            self._nodes[node.id] = node
        self._edges: List[FlowEdge] = list(edges)

        if id_factory is None:
            id_factory = SequentialIdFactory(prefix="node")
        if edge_id_factory is None:
            edge_id_factory = SequentialIdFactory(prefix="edge")
        for factory, taken in (
            (id_factory, self._nodes.keys()),
            (edge_id_factory, [e.id for e in self._edges]),
        ):
            if isinstance(factory, SequentialIdFactory):
                factory.reserve(taken)
        self._new_node_id = id_factory
        self._new_edge_id = edge_id_factory

    @classmethod
    def from_definition(
        cls, definition: FlowDefinition, id_factory: Optional[IdFactory] = None
    ) -> "FlowGraph":
        defn = definition.model_copy(deep=True)
        return cls(defn.nodes, defn.edges, id_factory=id_factory)

    def to_definition(self) -> FlowDefinition:
        return FlowDefinition(
            nodes=[n.model_copy(deep=True) for n in self._nodes.values()],
            edges=[e.model_copy(deep=True) for e in self._edges],
        )

    # --- Queries ---------------------------------------------------------

    @property
    def nodes(self) -> List[FlowNode]:
        return list(self._nodes.values())

    @property
    def edges(self) -> List[FlowEdge]:
        return list(self._edges)

    def is_empty(self) -> bool:
        return not self._nodes

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> FlowNode:
        try:
            return self._nodes[node_id]
        except KeyError:
            raise FlowGraphError(f"Node '{node_id}' not found") from None

    def outgoing(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self._edges if e.source == node_id]

    def incoming(self, node_id: str) -> List[FlowEdge]:
        return [e for e in self._edges if e.target == node_id]

    # --- Mutations -------------------------------------------------------

    def add_node(
        self,
        type: Union[NodeKind, str],
        position: Union[Position, Dict[str, Any], tuple],
        initial_config: Optional[Dict[str, Any]] = None,
        label: Optional[str] = None,
    ) -> FlowNode:
        """Create a node with a fresh id and append it to the graph."""
        kind = NodeKind(type)
        node = FlowNode(
            id=self._new_node_id(),
            type=kind,
            position=_as_position(position),
            data=NodeData(
                label=label or f"{kind.value} node",
                config=copy.deepcopy(initial_config) if initial_config else {},
            ),
        )
        self._nodes[node.id] = node
        logger.debug("Added %s node %s", kind.value, node.id)
        return node

    def connect(
        self,
        source_id: str,
        target_id: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> FlowEdge:
        """Append an edge. Cycles and parallel edges are allowed."""
        self.get_node(source_id)
        self.get_node(target_id)
        edge = FlowEdge(
            id=self._new_edge_id(),
            source=source_id,
            target=target_id,
            sourceHandle=source_handle,
            targetHandle=target_handle,
        )
        self._edges.append(edge)
        logger.debug("Connected %s -> %s (%s)", source_id, target_id, source_handle)
        return edge

    def update_node_data(self, node_id: str, new_data: Union[NodeData, Dict[str, Any]]) -> FlowNode:
        """Replace a node's `data` wholesale. Callers merge before calling."""
        node = self.get_node(node_id)
        data = new_data if isinstance(new_data, NodeData) else NodeData.model_validate(new_data)
        updated = node.model_copy(update={"data": data.model_copy(deep=True)})
        self._nodes[node_id] = updated
        return updated

    def move_node(self, node_id: str, position: Union[Position, Dict[str, Any], tuple]) -> FlowNode:
        node = self.get_node(node_id)
        updated = node.model_copy(update={"position": _as_position(position)})
        self._nodes[node_id] = updated
        return updated

    def delete_node(self, node_id: str) -> FlowNode:
        """Remove a node together with every edge touching it."""
        node = self._nodes.pop(node_id, None)
        if node is None:
            raise FlowGraphError(f"Node '{node_id}' not found")
        before = len(self._edges)
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]
        logger.debug("Deleted node %s and %d edge(s)", node_id, before - len(self._edges))
        return node

    def delete_edge(self, edge_id: str) -> FlowEdge:
        for i, edge in enumerate(self._edges):
            if edge.id == edge_id:
                return self._edges.pop(i)
        raise FlowGraphError(f"Edge '{edge_id}' not found")

    def duplicate_node(self, node_id: str, offset: tuple = (40.0, 40.0)) -> FlowNode:
        """Copy a node (data included, edges not) next to the original."""
        node = self.get_node(node_id)
        dx, dy = offset
        clone = FlowNode(
            id=self._new_node_id(),
            type=node.type,
            position=Position(x=node.position.x + dx, y=node.position.y + dy),
            data=node.data.model_copy(deep=True),
        )
        self._nodes[clone.id] = clone
        return clone
