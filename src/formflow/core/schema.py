# src/formflow/core/schema.py
"""Schema codec: graph payload <-> flat ordered field array.

Export walks the graph with the ordering engine. Import accepts either
shape:

- Graph payload ``{"nodes": [...], "edges": [...]}`` replaces the canvas as-is
- Legacy flat array ``[field, ...]`` is turned into a linear graph
  ``start -> field_1 -> ... -> field_n -> end -> submit``

Every import path validates the complete payload before anything is
handed to the graph model. A rejected import raises ImportRejectedError and
the caller's graph stays untouched.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from formflow.contracts.enums import DuplicateIdPolicy, NodeKind
from formflow.contracts.events import ImportFormat
from formflow.contracts.graph import (
    FIELD_LIST_ADAPTER,
    Edge,
    FieldNode,
    FieldNodeData,
    FormField,
    GraphPayload,
    Node,
    Position,
    edge_id_for,
)
from formflow.contracts.types import FieldID, NodeID
from formflow.core.config import LayoutSettings
from formflow.core.dag.models import ImportRejectedError
from formflow.core.dag.ordering import DEFAULT_ITERATION_SLACK, export_node_ids
from formflow.core.fields import field_node, new_structural_id, structural_node
from formflow.core.identifiers import ID_PATTERN, IdAllocator
from formflow.core.logging import get_logger

logger = get_logger(__name__)


# =============================================================================
# Export
# =============================================================================


def graph_to_fields(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    iteration_slack: int = DEFAULT_ITERATION_SLACK,
) -> list[FormField]:
    """Fields in export order; see export_node_ids for the fallbacks."""
    by_id = {node.id: node for node in nodes}
    return [
        node.field
        for node in (by_id[node_id] for node_id in export_node_ids(nodes, edges, iteration_slack=iteration_slack))
        if isinstance(node, FieldNode)
    ]


def fields_to_wire(fields: Sequence[FormField]) -> list[dict[str, Any]]:
    """JSON-ready flat schema; keys exactly as they were provided."""
    return [f.to_wire() for f in fields]


# =============================================================================
# Flat array -> linear graph
# =============================================================================


def flat_to_graph(
    fields: Sequence[FormField],
    *,
    layout: LayoutSettings | None = None,
    structural_id: Callable[[], NodeID] = new_structural_id,
) -> GraphPayload:
    """Synthesize a linear graph for a legacy flat schema.

    Field nodes are laid out on a grid (``layout.columns`` per row); Start sits
    above the field column, End and Submit below it. Edges run
    ``start -> f1 -> ... -> fn -> end -> submit``; an empty array gives
    ``start -> end -> submit``. No sections are created.
    """
    layout = layout or LayoutSettings()

    field_nodes: list[FieldNode] = []
    for i, form_field in enumerate(fields):
        row, col = divmod(i, layout.columns)
        position = Position(x=layout.origin_x + col * layout.step_x, y=layout.origin_y + row * layout.step_y)
        field_nodes.append(field_node(form_field, position))

    n = len(field_nodes)
    start = structural_node(NodeKind.START, Position(x=layout.structural_x, y=layout.structural_y), structural_id())
    end = structural_node(
        NodeKind.END,
        Position(x=layout.structural_x, y=layout.structural_y + layout.structural_gap * n),
        structural_id(),
    )
    submit = structural_node(
        NodeKind.SUBMIT,
        Position(x=layout.structural_x, y=layout.structural_y + layout.structural_gap * (n + 1)),
        structural_id(),
    )

    chain: list[Node] = [start, *field_nodes, end, submit]
    edges = [Edge(id=edge_id_for(a.id, b.id), source=a.id, target=b.id) for a, b in zip(chain, chain[1:], strict=False)]
    return GraphPayload(nodes=[start, *field_nodes, end, submit], edges=edges)


# =============================================================================
# Import boundary
# =============================================================================


@dataclass(frozen=True)
class ImportPlan:
    """A fully validated import, ready to replace the graph in one step.

    Attributes:
        format: Which payload shape was recognised
        nodes: Nodes to install, insertion order preserved
        edges: Edges to install (self-loops, dangling edges and repeated pairs already dropped)
        renamed: Original id -> new id for duplicates reissued under RENAME
        dropped_edges: Edge ids discarded because they could not be installed
    """

    format: ImportFormat
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    renamed: dict[NodeID, list[NodeID]] = field(default_factory=dict)
    dropped_edges: tuple[str, ...] = ()


def parse_import_text(text: str) -> Any:
    """Decode JSON text.

    Raises:
        ImportRejectedError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportRejectedError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})") from e


def read_import_file(path: Path) -> str:
    """Read an import file as UTF-8 text.

    Raises:
        ImportRejectedError: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ImportRejectedError(f"Cannot read import file {path}: {e}") from e


def parse_payload(payload: Any) -> GraphPayload | list[FormField]:
    """Classify and validate a decoded import payload.

    A dict with list ``nodes`` and list ``edges`` is a graph payload; a list is
    a flat field array. Anything else is rejected.

    Raises:
        ImportRejectedError: If the payload matches neither shape or fails validation
    """
    try:
        if isinstance(payload, dict) and isinstance(payload.get("nodes"), list) and isinstance(payload.get("edges"), list):
            return GraphPayload.model_validate(payload)
        if isinstance(payload, list):
            return FIELD_LIST_ADAPTER.validate_python(payload)
    except ValidationError as e:
        raise ImportRejectedError(f"Invalid import payload: {e.error_count()} validation error(s): {_first_error(e)}") from e
    raise ImportRejectedError("Import payload must be a {nodes, edges} graph or a list of fields")


def _first_error(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"


def _rename_prefix(node: Node) -> str:
    if isinstance(node, FieldNode):
        match = ID_PATTERN.match(node.field.id)
        return match.group(1) if match else node.field.type.value
    return node.kind.value


def _check_duplicate_ids(nodes: Sequence[Node], policy: DuplicateIdPolicy) -> None:
    """Raise under REJECT when any node id repeats."""
    counts = Counter(node.id for node in nodes)
    duplicates = sorted(node_id for node_id, count in counts.items() if count > 1)
    if duplicates and policy == DuplicateIdPolicy.REJECT:
        raise ImportRejectedError(f"Duplicate node ids in import: {duplicates}")


def _rename_duplicates(nodes: Sequence[Node], allocator: IdAllocator) -> tuple[list[Node], dict[NodeID, list[NodeID]]]:
    """Reissue ids for repeated nodes. The first occurrence keeps its id."""
    counts = Counter(node.id for node in nodes)
    if all(count == 1 for count in counts.values()):
        return list(nodes), {}

    seen: set[NodeID] = set()
    taken = set(counts)
    resolved: list[Node] = []
    renamed: dict[NodeID, list[NodeID]] = {}
    for node in nodes:
        if node.id not in seen:
            seen.add(node.id)
            resolved.append(node)
            continue
        new_id = _fresh_id(node, allocator, taken)
        taken.add(new_id)
        renamed.setdefault(node.id, []).append(new_id)
        if isinstance(node, FieldNode):
            new_field = node.field.model_copy(update={"id": FieldID(new_id)})
            resolved.append(node.model_copy(update={"id": new_id, "data": FieldNodeData(field=new_field)}))
        else:
            resolved.append(node.model_copy(update={"id": new_id}))
    return resolved, renamed


def _fresh_id(node: Node, allocator: IdAllocator, taken: set[NodeID]) -> NodeID:
    while True:
        candidate = NodeID(allocator.allocate(_rename_prefix(node))) if isinstance(node, FieldNode) else new_structural_id()
        if candidate not in taken:
            return candidate


def _installable_edges(nodes: Sequence[Node], edges: Sequence[Edge]) -> tuple[list[Edge], list[str]]:
    """Drop self-loops, edges naming unknown nodes and repeated (source, target) pairs."""
    known = {node.id for node in nodes}
    kept: list[Edge] = []
    dropped: list[str] = []
    pairs: set[tuple[NodeID, NodeID]] = set()
    for edge in edges:
        pair = (edge.source, edge.target)
        if edge.source == edge.target or edge.source not in known or edge.target not in known or pair in pairs:
            dropped.append(edge.id)
            continue
        pairs.add(pair)
        kept.append(edge)
    return kept, dropped


def plan_import(
    payload: Any,
    allocator: IdAllocator,
    *,
    duplicate_ids: DuplicateIdPolicy = DuplicateIdPolicy.REJECT,
    layout: LayoutSettings | None = None,
) -> ImportPlan:
    """Validate a decoded payload and build the nodes/edges to install.

    Reseeds ``allocator`` from every field id in the payload so ids created
    afterwards never collide with imported ones. Reseeding only happens
    once the payload has passed validation.

    Raises:
        ImportRejectedError: If the payload is malformed or violates the
            duplicate-id policy
    """
    parsed = parse_payload(payload)

    if isinstance(parsed, GraphPayload):
        _check_duplicate_ids(parsed.nodes, duplicate_ids)
        allocator.reseed(node.field.id for node in parsed.nodes if isinstance(node, FieldNode))
        nodes, renamed = _rename_duplicates(parsed.nodes, allocator)
        edges, dropped = _installable_edges(nodes, parsed.edges)
        if dropped:
            logger.warning("import_dropped_edges", edge_ids=dropped)
        return ImportPlan(
            format=ImportFormat.GRAPH,
            nodes=tuple(nodes),
            edges=tuple(edges),
            renamed=renamed,
            dropped_edges=tuple(dropped),
        )

    flat_nodes: list[Node] = [field_node(f) for f in parsed]
    _check_duplicate_ids(flat_nodes, duplicate_ids)
    allocator.reseed(f.id for f in parsed)
    field_nodes, renamed = _rename_duplicates(flat_nodes, allocator)
    graph = flat_to_graph([node.field for node in field_nodes if isinstance(node, FieldNode)], layout=layout)
    return ImportPlan(
        format=ImportFormat.FLAT,
        nodes=tuple(graph.nodes),
        edges=tuple(graph.edges),
        renamed=renamed,
    )
