# src/formflow/core/dag/ordering.py
"""Branch-aware ordering of the form graph.

Shape being linearized:

    start -> static_1 -> field -> field -> end -> submit
          -> static_2 -> field -> end

Each static node wired from Start roots one section. Sections are emitted
top to bottom by canvas position (not by when their edges were drawn);
within a section the single chain of fields is followed until End, another
static, or a dead end.

derive_order never raises. Missing structural nodes, miswired sections and
residual cycles all degrade into warnings and a shorter result.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import assert_never

from formflow.contracts.graph import Edge, EndNode, FieldNode, FormField, Node, StartNode, SubmitNode
from formflow.contracts.types import NodeID
from formflow.core.dag.models import (
    GraphIndex,
    OrderResult,
    find_first,
    index_graph,
    is_content_node,
    is_field_node,
    is_section_node,
    node_display_name,
    sort_by_position,
)

WARN_MISSING_START = "Missing Start node."
WARN_MISSING_END = "Missing End node."
WARN_MISSING_SUBMIT = "Missing Submit node."
WARN_NO_SECTIONS = "No static-wrapper (section) connected from Start. Connect Start → Static nodes."

DEFAULT_ITERATION_SLACK = 10


def _section_miswired_warning(section: Node) -> str:
    return f'Section "{node_display_name(section)}" points to another Static. Consider wiring that Static from Start directly.'


def pick_first_content_neighbor(candidates: Sequence[NodeID], index: GraphIndex) -> NodeID | None:
    """Choose where a chain continues.

    Structural neighbours are skipped. Non-static fields win over static
    ones; ties inside the winning group break by position, then id.
    """
    field_ids = [node_id for node_id in candidates if is_field_node(index.by_id.get(node_id))]
    if not field_ids:
        return None
    content_ids = [node_id for node_id in field_ids if is_content_node(index.by_id.get(node_id))]
    preferred = content_ids or field_ids
    return sort_by_position(preferred, index)[0]


def _walk_section(
    section: FieldNode,
    index: GraphIndex,
    visited: set[NodeID],
    step_limit: int,
    ordered: list[FormField],
    sequence: list[NodeID],
    warnings: list[str],
) -> None:
    """Emit one section: its static heading, then its field chain."""
    ordered.append(section.field)
    sequence.append(section.id)

    current = pick_first_content_neighbor(index.outgoing(section.id), index)
    steps = 0
    while current is not None and steps < step_limit:
        steps += 1
        if current in visited:
            break
        node = index.by_id.get(current)
        if node is None:
            break

        match node:
            case EndNode():
                sequence.append(node.id)
                return
            case FieldNode() if node.is_section:
                warnings.append(_section_miswired_warning(section))
                return
            case FieldNode():
                ordered.append(node.field)
                sequence.append(node.id)
                visited.add(node.id)
            case StartNode() | SubmitNode():
                # Not reachable through pick_first_content_neighbor; stop quietly
                return
            case _:
                assert_never(node)

        next_ids = index.outgoing(node.id)
        current = pick_first_content_neighbor(next_ids, index)
        if current is None:
            to_end = next((node_id for node_id in next_ids if isinstance(index.by_id.get(node_id), EndNode)), None)
            if to_end is not None:
                sequence.append(to_end)
            return


def derive_order(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    iteration_slack: int = DEFAULT_ITERATION_SLACK,
) -> OrderResult:
    """Linearize the graph into render order.

    Args:
        nodes: Current nodes (insertion order)
        edges: Current edges
        iteration_slack: Extra steps allowed per section walk beyond the node
            count; bounds the walk even if a cycle slipped past validation

    Returns:
        OrderResult with ordered fields, diagnostic sequence and warnings.
        Calling twice on the same snapshot yields equal results.
    """
    index = index_graph(nodes, edges)
    start = find_first(nodes, StartNode)
    end = find_first(nodes, EndNode)
    submit = find_first(nodes, SubmitNode)

    warnings: list[str] = []
    if start is None:
        warnings.append(WARN_MISSING_START)
    if end is None:
        warnings.append(WARN_MISSING_END)
    if submit is None:
        warnings.append(WARN_MISSING_SUBMIT)

    if start is None:
        return OrderResult(warnings=tuple(warnings))

    section_ids = [node_id for node_id in index.outgoing(start.id) if is_section_node(index.by_id.get(node_id))]
    if not section_ids:
        warnings.append(WARN_NO_SECTIONS)

    ordered: list[FormField] = []
    sequence: list[NodeID] = []
    # Shared across sections: a field consumed by one section cannot be re-entered by another
    visited: set[NodeID] = set()
    step_limit = len(nodes) + iteration_slack

    # dict.fromkeys drops duplicate start->section edges from imported data
    for section_id in sort_by_position(dict.fromkeys(section_ids), index):
        section = index.by_id[section_id]
        assert isinstance(section, FieldNode)
        _walk_section(section, index, visited, step_limit, ordered, sequence, warnings)

    if end is not None and submit is not None:
        sequence.extend((end.id, submit.id))

    return OrderResult(
        ordered_fields=tuple(ordered),
        sequence=tuple(sequence),
        warnings=tuple(warnings),
    )


def walk_linear_chain(nodes: Sequence[Node], edges: Sequence[Edge]) -> list[NodeID]:
    """Follow the first outgoing edge from Start until the chain ends.

    This is how graphs without sections (legacy flat imports) are read:
    ``start -> field -> field -> end -> submit``. Start itself is not
    included; each node is visited once, so a cycle just ends the walk.
    """
    index = index_graph(nodes, edges)
    start = find_first(nodes, StartNode)
    if start is None:
        return []
    chain: list[NodeID] = []
    seen: set[NodeID] = {start.id}
    current = start.id
    while True:
        next_ids = index.outgoing(current)
        if not next_ids:
            break
        current = next_ids[0]
        if current in seen or current not in index.by_id:
            break
        seen.add(current)
        chain.append(current)
    return chain


def export_node_ids(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    iteration_slack: int = DEFAULT_ITERATION_SLACK,
) -> list[NodeID]:
    """Ids of the field nodes an export emits, in export order.

    Tries, in order, until one yields fields:
    1. The section walk of derive_order
    2. The single chain from Start (graphs built from a flat import)
    3. Every field node in insertion order (keeps export usable on broken graphs)
    """
    by_id = {node.id: node for node in nodes}
    order = derive_order(nodes, edges, iteration_slack=iteration_slack)
    section_ids = [node_id for node_id in order.sequence if isinstance(by_id.get(node_id), FieldNode)]
    if section_ids:
        return section_ids

    chain_ids = [node_id for node_id in walk_linear_chain(nodes, edges) if isinstance(by_id.get(node_id), FieldNode)]
    if chain_ids:
        return chain_ids

    return [node.id for node in nodes if isinstance(node, FieldNode)]
