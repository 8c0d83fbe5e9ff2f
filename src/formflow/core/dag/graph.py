# src/formflow/core/dag/graph.py
"""FormGraph: the node and edge collection behind the builder canvas.

FormGraph only guarantees referential integrity (unique node ids, edges
between existing nodes). Whether an edge is *legal* is decided beforehand by
connections.can_connect; the builder calls that first and only then mutates.
"""

from __future__ import annotations

from collections.abc import Iterable

from formflow.contracts.graph import Edge, FieldNode, GraphPayload, Node
from formflow.contracts.types import NodeID
from formflow.core.dag.models import GraphValidationError


class FormGraph:
    """Current nodes and edges of one form.

    Nodes keep insertion order (the canvas draws them in that order and the
    export fallback relies on it). Accessors return tuples so callers get
    an immutable snapshot that later mutations cannot disturb.
    """

    def __init__(self, nodes: Iterable[Node] = (), edges: Iterable[Edge] = ()) -> None:
        self._nodes: dict[NodeID, Node] = {}
        self._edges: list[Edge] = []
        self.replace(nodes, edges)

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes.values())

    @property
    def edges(self) -> tuple[Edge, ...]:
        return tuple(self._edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Node:
        """Return the node with ``node_id``.

        Raises:
            KeyError: If node doesn't exist
        """
        if node_id not in self._nodes:
            raise KeyError(f"Node not found: {node_id}")
        return self._nodes[NodeID(node_id)]

    def field_nodes(self) -> list[FieldNode]:
        return [node for node in self._nodes.values() if isinstance(node, FieldNode)]

    def add_node(self, node: Node) -> None:
        """Append a node.

        Raises:
            GraphValidationError: If a node with the same id already exists
        """
        if node.id in self._nodes:
            raise GraphValidationError(f"Duplicate node id '{node.id}'")
        self._nodes[node.id] = node

    def replace_node(self, node: Node) -> None:
        """Swap in an updated copy of an existing node, keeping its slot.

        Raises:
            KeyError: If no node with ``node.id`` exists
        """
        if node.id not in self._nodes:
            raise KeyError(f"Node not found: {node.id}")
        self._nodes[node.id] = node

    def remove_node(self, node_id: str) -> int:
        """Delete a node and every edge touching it.

        Returns:
            Number of incident edges removed

        Raises:
            KeyError: If node doesn't exist
        """
        if node_id not in self._nodes:
            raise KeyError(f"Node not found: {node_id}")
        del self._nodes[NodeID(node_id)]
        return self.remove_edges_for(node_id)

    def add_edge(self, edge: Edge) -> None:
        """Append an edge between existing nodes.

        Raises:
            GraphValidationError: If an endpoint is missing, the edge is a self-loop or the pair already exists
        """
        if edge.source == edge.target:
            raise GraphValidationError(f"Edge '{edge.id}' connects node '{edge.source}' to itself")
        missing = [node_id for node_id in (edge.source, edge.target) if node_id not in self._nodes]
        if missing:
            raise GraphValidationError(f"Edge '{edge.id}' references unknown node(s): {missing}")
        if self.has_edge(edge.source, edge.target):
            raise GraphValidationError(f"Edge {edge.source} -> {edge.target} already exists")
        self._edges.append(edge)

    def has_edge(self, source: str, target: str) -> bool:
        return any(edge.source == source and edge.target == target for edge in self._edges)

    def remove_edges_for(self, node_id: str) -> int:
        """Drop every edge with ``node_id`` as source or target."""
        kept = [edge for edge in self._edges if node_id not in (edge.source, edge.target)]
        removed = len(self._edges) - len(kept)
        self._edges = kept
        return removed

    def replace(self, nodes: Iterable[Node], edges: Iterable[Edge]) -> None:
        """Swap the whole graph in one step (import).

        Validation happens on fresh containers so a failure leaves the current
        graph untouched.

        Raises:
            GraphValidationError: On duplicate node ids, dangling edges or
                duplicate (source, target) pairs
        """
        staged = FormGraph.__new__(FormGraph)
        staged._nodes = {}
        staged._edges = []
        for node in nodes:
            staged.add_node(node)
        for edge in edges:
            staged.add_edge(edge)
        self._nodes = staged._nodes
        self._edges = staged._edges

    def clear(self) -> None:
        self._nodes = {}
        self._edges = []

    def to_payload(self) -> GraphPayload:
        return GraphPayload(nodes=list(self._nodes.values()), edges=list(self._edges))
