# src/formflow/core/dag/models.py
"""Types, constants, and helpers shared by the form graph modules.

Leaf module: no imports from sibling dag modules (prevents import cycles).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import assert_never

from formflow.contracts.graph import Edge, EndNode, FieldNode, FormField, Node, StartNode, SubmitNode
from formflow.contracts.types import NodeID


class GraphValidationError(ValueError):
    """Raised when a direct graph-model call would break referential integrity.

    User edits never raise this: they go through can_connect first and get a
    ConnectionVerdict back.
    """

    pass


class ImportRejectedError(ValueError):
    """Raised when an import payload cannot be parsed or matches neither shape."""

    pass


# User-facing rejection reasons. Views show these strings verbatim.
REASON_INVALID = "Invalid connection"
REASON_SELF_LOOP = "No self-loops"
REASON_UNKNOWN_NODES = "Unknown nodes"
REASON_DUPLICATE = "Duplicate edge"
REASON_START_INCOMING = "Start cannot have incoming edges"
REASON_SUBMIT_OUTGOING = "Submit cannot have outgoing edges"
REASON_SUBMIT_FROM_END = "Submit must connect only from End"
REASON_END_TO_SUBMIT = "End must connect only to Submit"
REASON_ONE_OUTGOING = "Only one outgoing edge allowed per node"
REASON_ONE_INCOMING = "Only one incoming edge allowed per node"
REASON_CYCLE = "Connection would create a cycle"
REASON_START_TARGET = "Start must connect only to a Static section or End"
REASON_SECTION_TARGET = "A Static section must connect to a field or End"
REASON_FIELD_TARGET = "A field must connect to another field or End"


@dataclass(frozen=True, slots=True)
class ConnectionVerdict:
    """Result of validating a proposed edge.

    ``reason`` is None exactly when ``ok`` is True.
    """

    ok: bool
    reason: str | None = None

    @classmethod
    def accept(cls) -> ConnectionVerdict:
        return cls(ok=True)

    @classmethod
    def reject(cls, reason: str) -> ConnectionVerdict:
        return cls(ok=False, reason=reason)

    def __bool__(self) -> bool:
        return self.ok


@dataclass(frozen=True, slots=True)
class OrderResult:
    """Output of the ordering engine.

    Attributes:
        ordered_fields: Fields in render order (section headings included)
        sequence: Diagnostic trail of node ids, end/submit included
        warnings: Human-readable problems found while walking
    """

    ordered_fields: tuple[FormField, ...] = ()
    sequence: tuple[NodeID, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class GraphIndex:
    """Lookup tables over one (nodes, edges) snapshot.

    When imported data repeats a node id, the first node wins the lookup.
    Adjacency lists keep edge order; edges naming unknown nodes still appear
    in the adjacency lists (callers check ``by_id``).
    """

    by_id: dict[NodeID, Node]
    out_map: dict[NodeID, list[NodeID]] = field(default_factory=dict)
    in_map: dict[NodeID, list[NodeID]] = field(default_factory=dict)

    def outgoing(self, node_id: NodeID) -> list[NodeID]:
        return self.out_map.get(node_id, [])

    def incoming(self, node_id: NodeID) -> list[NodeID]:
        return self.in_map.get(node_id, [])


def index_graph(nodes: Iterable[Node], edges: Iterable[Edge]) -> GraphIndex:
    by_id: dict[NodeID, Node] = {}
    for node in nodes:
        by_id.setdefault(node.id, node)
    index = GraphIndex(by_id=by_id)
    for edge in edges:
        index.out_map.setdefault(edge.source, []).append(edge.target)
        index.in_map.setdefault(edge.target, []).append(edge.source)
    return index


def is_field_node(node: Node | None) -> bool:
    return isinstance(node, FieldNode)


def is_section_node(node: Node | None) -> bool:
    """True for field nodes whose field is a static section marker."""
    return isinstance(node, FieldNode) and node.is_section


def is_content_node(node: Node | None) -> bool:
    """True for field nodes that collect a value (non-static)."""
    return isinstance(node, FieldNode) and not node.is_section


def is_structural(node: Node | None) -> bool:
    match node:
        case StartNode() | EndNode() | SubmitNode():
            return True
        case FieldNode() | None:
            return False
        case _:
            assert_never(node)


def find_first[N: Node](nodes: Iterable[Node], node_cls: type[N]) -> N | None:
    """First node of the given class, in insertion order."""
    for node in nodes:
        if isinstance(node, node_cls):
            return node
    return None


def position_key(node_id: NodeID, index: GraphIndex) -> tuple[float, float, str]:
    """Sort key: top to bottom, then left to right, then id."""
    node = index.by_id.get(node_id)
    if node is None:
        return (0.0, 0.0, str(node_id))
    return (node.position.y, node.position.x, str(node_id))


def sort_by_position(node_ids: Iterable[NodeID], index: GraphIndex) -> list[NodeID]:
    return sorted(node_ids, key=lambda node_id: position_key(node_id, index))


def node_display_name(node: Node) -> str:
    """Label for warnings: field label when present, else the node id."""
    if isinstance(node, FieldNode) and node.field.label:
        return node.field.label
    return str(node.id)


def edge_pairs(edges: Sequence[Edge]) -> set[tuple[NodeID, NodeID]]:
    return {(edge.source, edge.target) for edge in edges}
