# tests/unit/core/dag/test_connections.py
"""Tests for can_connect and validate_edge_draft.

can_connect checks run in a fixed order and the first failure wins, so
several tests build graphs that violate two rules at once to pin that order.
"""

import pytest

from formflow.contracts.graph import Edge, Node
from formflow.contracts.types import NodeID
from formflow.core.dag.connections import can_connect, validate_edge_draft
from formflow.core.dag.models import ConnectionVerdict
from tests.helpers.graphs import chain, make_edge, make_field_node, make_structural


def _nodes() -> list[Node]:
    return [
        make_structural("start"),
        make_field_node("static_1", "static"),
        make_field_node("static_2", "static"),
        make_field_node("text_1"),
        make_field_node("text_2"),
        make_field_node("text_3"),
        make_field_node("text_5"),
        make_structural("end", "end_1"),
        make_structural("submit"),
    ]


def _connect(source: str | None, target: str | None, edges: list[Edge] | None = None) -> ConnectionVerdict:
    return can_connect(
        NodeID(source) if source else None,
        NodeID(target) if target else None,
        _nodes(),
        edges or [],
    )


class TestBasicRejections:
    @pytest.mark.parametrize(("source", "target"), [(None, "text_1"), ("text_1", None), ("", "text_1"), (None, None)])
    def test_missing_endpoint(self, source: str | None, target: str | None) -> None:
        assert _connect(source, target) == ConnectionVerdict(ok=False, reason="Invalid connection")

    def test_self_loop(self) -> None:
        assert _connect("text_1", "text_1").reason == "No self-loops"

    def test_unknown_nodes(self) -> None:
        assert _connect("text_1", "ghost").reason == "Unknown nodes"
        assert _connect("ghost", "text_1").reason == "Unknown nodes"

    def test_duplicate_edge(self) -> None:
        assert _connect("text_1", "text_2", [make_edge("text_1", "text_2")]).reason == "Duplicate edge"

    def test_duplicate_checked_before_linearity(self) -> None:
        """Re-adding an existing edge reports the duplicate, not the fan-out."""
        edges = [make_edge("text_1", "text_2")]

        verdict = _connect("text_1", "text_2", edges)

        assert verdict.reason == "Duplicate edge"


class TestKindPairs:
    def test_nothing_into_start(self) -> None:
        assert _connect("text_1", "start").reason == "Start cannot have incoming edges"

    def test_nothing_out_of_submit(self) -> None:
        assert _connect("submit", "text_1").reason == "Submit cannot have outgoing edges"

    def test_submit_only_from_end(self) -> None:
        assert _connect("text_1", "submit").reason == "Submit must connect only from End"

    def test_end_only_to_submit(self) -> None:
        """end_1 -> text_5 is rejected and the reason names the rule."""
        verdict = _connect("end_1", "text_5")

        assert verdict == ConnectionVerdict(ok=False, reason="End must connect only to Submit")
        assert not verdict

    def test_end_to_submit_accepted(self) -> None:
        assert _connect("end_1", "submit").ok

    def test_start_into_start_reports_start_rule(self) -> None:
        nodes: list[Node] = [make_structural("start", "s1"), make_structural("start", "s2")]

        verdict = can_connect(NodeID("s1"), NodeID("s2"), nodes, [])

        assert verdict.reason == "Start cannot have incoming edges"


class TestLinearity:
    def test_start_may_fan_out(self) -> None:
        edges = [make_edge("start", "static_1")]

        assert _connect("start", "static_2", edges).ok

    def test_field_may_not_fan_out(self) -> None:
        edges = [make_edge("text_1", "text_2")]

        assert _connect("text_1", "text_3", edges).reason == "Only one outgoing edge allowed per node"

    def test_field_may_not_fan_in(self) -> None:
        edges = [make_edge("text_1", "text_3")]

        assert _connect("text_2", "text_3", edges).reason == "Only one incoming edge allowed per node"

    def test_end_fan_in_rejected(self) -> None:
        """End is a node like any other: one incoming edge."""
        edges = [make_edge("text_1", "end_1")]

        assert _connect("text_2", "end_1", edges).reason == "Only one incoming edge allowed per node"


class TestCycles:
    def test_back_edge_rejected_as_cycle(self) -> None:
        edges = chain("text_1", "text_2", "text_3")

        # text_1 already has no incoming edge and text_3 no outgoing edge,
        # so only the cycle check can reject this
        assert _connect("text_3", "text_1", edges).reason == "Connection would create a cycle"

    def test_accept_has_no_reason(self) -> None:
        verdict = _connect("text_1", "text_2")

        assert verdict == ConnectionVerdict.accept()
        assert verdict.reason is None
        assert verdict


class TestPurity:
    def test_inputs_unchanged(self) -> None:
        nodes = _nodes()
        edges = chain("text_1", "text_2")
        before = ([n.model_dump() for n in nodes], [e.model_dump() for e in edges])

        can_connect(NodeID("text_2"), NodeID("text_1"), nodes, edges)

        assert ([n.model_dump() for n in nodes], [e.model_dump() for e in edges]) == before


class TestValidateEdgeDraft:
    def _draft(self, source: str | None, target: str | None) -> ConnectionVerdict:
        return validate_edge_draft(NodeID(source) if source else None, NodeID(target) if target else None, _nodes())

    def test_missing_endpoint(self) -> None:
        assert self._draft(None, "text_1").reason == "Invalid connection"

    def test_unknown_node(self) -> None:
        assert self._draft("text_1", "ghost").reason == "Unknown nodes"

    @pytest.mark.parametrize(
        ("source", "target", "reason"),
        [
            ("text_1", "start", "Start cannot have incoming edges"),
            ("submit", "text_1", "Submit cannot have outgoing edges"),
            ("text_1", "submit", "Submit must connect only from End"),
            ("end_1", "text_1", "End must connect only to Submit"),
        ],
    )
    def test_kind_pairs_match_commit_check(self, source: str, target: str, reason: str) -> None:
        assert self._draft(source, target).reason == reason
        assert _connect(source, target).reason == reason

    @pytest.mark.parametrize(
        ("source", "target"),
        [
            ("start", "static_1"),
            ("start", "end_1"),
            ("static_1", "text_1"),
            ("static_1", "end_1"),
            ("text_1", "text_2"),
            ("text_1", "end_1"),
            ("end_1", "submit"),
        ],
    )
    def test_section_shapes_accepted(self, source: str, target: str) -> None:
        assert self._draft(source, target).ok

    def test_start_to_plain_field_rejected(self) -> None:
        assert self._draft("start", "text_1").reason == "Start must connect only to a Static section or End"

    def test_section_to_section_rejected(self) -> None:
        assert self._draft("static_1", "static_2").reason == "A Static section must connect to a field or End"

    def test_field_to_section_rejected(self) -> None:
        assert self._draft("text_1", "static_1").reason == "A field must connect to another field or End"

    def test_ignores_edge_state(self) -> None:
        """Fan-out and duplicates are commit-time concerns only."""
        nodes = _nodes()

        verdict = validate_edge_draft(NodeID("text_1"), NodeID("text_2"), nodes)

        assert verdict.ok
