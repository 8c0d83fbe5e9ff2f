# src/formflow/core/dag/connections.py
"""Connection validation: admit or reject a proposed edge.

Two entry points:

- can_connect: full commit-time check (existence, duplicates, kind pairs,
  linearity, cycles). First failure wins.
- validate_edge_draft: kind-pair preview while the user is still dragging,
  before the graph-dependent checks can run.

Both are pure: they read a snapshot and return a ConnectionVerdict. Callers
perform the mutation.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import assert_never

from formflow.contracts.graph import Edge, EndNode, FieldNode, Node, StartNode, SubmitNode
from formflow.contracts.types import NodeID
from formflow.core.dag.cycles import would_create_cycle
from formflow.core.dag.models import (
    REASON_CYCLE,
    REASON_DUPLICATE,
    REASON_END_TO_SUBMIT,
    REASON_FIELD_TARGET,
    REASON_INVALID,
    REASON_ONE_INCOMING,
    REASON_ONE_OUTGOING,
    REASON_SECTION_TARGET,
    REASON_SELF_LOOP,
    REASON_START_INCOMING,
    REASON_START_TARGET,
    REASON_SUBMIT_FROM_END,
    REASON_SUBMIT_OUTGOING,
    REASON_UNKNOWN_NODES,
    ConnectionVerdict,
    index_graph,
    is_content_node,
    is_section_node,
)


def _kind_pair_verdict(source: Node, target: Node) -> ConnectionVerdict:
    """Start/End/Submit pairing rules that need no edge state."""
    if isinstance(target, StartNode):
        return ConnectionVerdict.reject(REASON_START_INCOMING)
    if isinstance(source, SubmitNode):
        return ConnectionVerdict.reject(REASON_SUBMIT_OUTGOING)
    if isinstance(target, SubmitNode) and not isinstance(source, EndNode):
        return ConnectionVerdict.reject(REASON_SUBMIT_FROM_END)
    if isinstance(source, EndNode) and not isinstance(target, SubmitNode):
        return ConnectionVerdict.reject(REASON_END_TO_SUBMIT)
    return ConnectionVerdict.accept()


def can_connect(
    source: NodeID | None,
    target: NodeID | None,
    nodes: Sequence[Node],
    edges: Sequence[Edge],
) -> ConnectionVerdict:
    """Validate a proposed ``source -> target`` edge against the current graph.

    Checks, in order:
    1. Both endpoints given, distinct, and present in the graph
    2. No existing edge with the same (source, target) pair
    3. Kind pairs: nothing into Start, nothing out of Submit, Submit only
       from End, End only to Submit, one outgoing edge per node (Start
       excepted), one incoming edge per node
    4. The edge does not close a cycle
    """
    if not source or not target:
        return ConnectionVerdict.reject(REASON_INVALID)
    if source == target:
        return ConnectionVerdict.reject(REASON_SELF_LOOP)

    index = index_graph(nodes, edges)
    source_node = index.by_id.get(source)
    target_node = index.by_id.get(target)
    if source_node is None or target_node is None:
        return ConnectionVerdict.reject(REASON_UNKNOWN_NODES)

    if target in index.outgoing(source):
        return ConnectionVerdict.reject(REASON_DUPLICATE)

    verdict = _kind_pair_verdict(source_node, target_node)
    if not verdict.ok:
        return verdict

    # Linearity: Start fans out to one branch per section; everything else is a chain
    if index.outgoing(source) and not isinstance(source_node, StartNode):
        return ConnectionVerdict.reject(REASON_ONE_OUTGOING)
    if index.incoming(target):
        return ConnectionVerdict.reject(REASON_ONE_INCOMING)

    if would_create_cycle(source, target, edges):
        return ConnectionVerdict.reject(REASON_CYCLE)

    return ConnectionVerdict.accept()


def validate_edge_draft(
    source: NodeID | None,
    target: NodeID | None,
    nodes: Sequence[Node],
) -> ConnectionVerdict:
    """Preview validity of an edge that is still being drawn.

    Only looks at the two endpoint kinds, so it can run on every pointer
    move. Beyond the Start/End/Submit pairing it previews section shape:

    - start -> static section, or start -> end
    - static section -> non-static field, or -> end
    - field -> non-static field, or -> end
    """
    if not source or not target:
        return ConnectionVerdict.reject(REASON_INVALID)
    index = index_graph(nodes, ())
    source_node = index.by_id.get(source)
    target_node = index.by_id.get(target)
    if source_node is None or target_node is None:
        return ConnectionVerdict.reject(REASON_UNKNOWN_NODES)

    verdict = _kind_pair_verdict(source_node, target_node)
    if not verdict.ok:
        return verdict

    match source_node:
        case StartNode():
            if isinstance(target_node, EndNode) or is_section_node(target_node):
                return ConnectionVerdict.accept()
            return ConnectionVerdict.reject(REASON_START_TARGET)
        case FieldNode():
            if isinstance(target_node, EndNode) or is_content_node(target_node):
                return ConnectionVerdict.accept()
            reason = REASON_SECTION_TARGET if source_node.is_section else REASON_FIELD_TARGET
            return ConnectionVerdict.reject(reason)
        case EndNode():
            # Pairing check already limited End to Submit
            return ConnectionVerdict.accept()
        case SubmitNode():
            return ConnectionVerdict.reject(REASON_SUBMIT_OUTGOING)
        case _:
            assert_never(source_node)
