# src/formflow/core/dag/validation.py
"""Graph-level structural warnings.

Advisory only: the builder keeps accepting edits while any of these are
present. Surfaced in the diagnostics panel next to the ordering warnings.
"""

from __future__ import annotations

from collections.abc import Sequence

from formflow.contracts.graph import Edge, EndNode, FieldNode, Node, StartNode, SubmitNode
from formflow.core.dag.cycles import has_cycle
from formflow.core.dag.models import find_first, index_graph, node_display_name
from formflow.core.dag.ordering import DEFAULT_ITERATION_SLACK, export_node_ids

WARN_ADD_START = "Add a Start node."
WARN_ADD_END = "Add an End node."
WARN_ADD_SUBMIT = "Add a Submit node."
WARN_START_INCOMING = "Start has incoming edges (not allowed)."
WARN_SUBMIT_OUTGOING = "Submit has outgoing edges (not allowed)."
WARN_SUBMIT_FROM_END = "Submit must have exactly one incoming edge from End."
WARN_CYCLE = "Cycle detected in path; ordering stops where it repeats."


def structural_warnings(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    *,
    iteration_slack: int = DEFAULT_ITERATION_SLACK,
) -> list[str]:
    """Collect non-blocking structural problems.

    Reports, in order:
    1. Missing Start / End / Submit
    2. Per-node edge sanity (edges into Start, out of Submit, fan-out or
       fan-in on nodes that must be linear)
    3. Submit not fed by exactly one edge from End
    4. A cycle anywhere in the edge set
    5. Orphan fields: fields an export would leave out (same fallbacks as
       export_node_ids, so a legacy chain places its fields only when Start
       has no section)
    """
    index = index_graph(nodes, edges)
    start = find_first(nodes, StartNode)
    end = find_first(nodes, EndNode)
    submit = find_first(nodes, SubmitNode)

    warnings: list[str] = []
    if start is None:
        warnings.append(WARN_ADD_START)
    if end is None:
        warnings.append(WARN_ADD_END)
    if submit is None:
        warnings.append(WARN_ADD_SUBMIT)

    for node in nodes:
        outs = len(index.outgoing(node.id))
        ins = len(index.incoming(node.id))
        if isinstance(node, StartNode) and ins > 0:
            warnings.append(WARN_START_INCOMING)
        if isinstance(node, SubmitNode) and outs > 0:
            warnings.append(WARN_SUBMIT_OUTGOING)
        if not isinstance(node, StartNode | SubmitNode) and outs > 1:
            warnings.append(f"Node {node.id} has multiple outgoing edges; order is linear.")
        if not isinstance(node, StartNode) and ins > 1:
            warnings.append(f"Node {node.id} has multiple incoming edges; order is linear.")

    if end is not None and submit is not None:
        feeders = index.incoming(submit.id)
        if len(feeders) != 1 or feeders[0] != end.id:
            warnings.append(WARN_SUBMIT_FROM_END)

    if has_cycle(edges):
        warnings.append(WARN_CYCLE)

    placed = set(export_node_ids(nodes, edges, iteration_slack=iteration_slack))
    reported: set[str] = set()
    for node in nodes:
        if isinstance(node, FieldNode) and node.id not in placed and node.id not in reported:
            reported.add(node.id)
            warnings.append(f'Field "{node_display_name(node)}" ({node.id}) is not on any section path.')

    return warnings
