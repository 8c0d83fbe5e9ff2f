# tests/unit/core/dag/test_form_graph.py
"""Tests for FormGraph referential integrity and snapshot semantics."""

import pytest

from formflow.contracts.graph import Edge, Node, Position
from formflow.core.dag.graph import FormGraph
from formflow.core.dag.models import GraphValidationError
from tests.helpers.graphs import make_edge, make_field_node

Graph = tuple[list[Node], list[Edge]]


class TestNodes:
    def test_insertion_order_kept(self) -> None:
        graph = FormGraph()
        for node_id in ("text_2", "text_1", "text_3"):
            graph.add_node(make_field_node(node_id))

        assert [n.id for n in graph.nodes] == ["text_2", "text_1", "text_3"]

    def test_duplicate_node_rejected(self) -> None:
        graph = FormGraph([make_field_node("text_1")])

        with pytest.raises(GraphValidationError, match="Duplicate node id 'text_1'"):
            graph.add_node(make_field_node("text_1"))

    def test_get_missing_node(self) -> None:
        with pytest.raises(KeyError, match="ghost"):
            FormGraph().get_node("ghost")

    def test_replace_node_keeps_slot(self) -> None:
        graph = FormGraph([make_field_node("text_1"), make_field_node("text_2")])
        moved = graph.get_node("text_1").model_copy(update={"position": Position(x=5, y=5)})

        graph.replace_node(moved)

        assert [n.id for n in graph.nodes] == ["text_1", "text_2"]
        assert graph.get_node("text_1").position == Position(x=5, y=5)

    def test_remove_node_cascades_edges(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)

        removed = graph.remove_node("text_1")

        assert removed == 2
        assert not graph.has_node("text_1")
        assert [(e.source, e.target) for e in graph.edges] == [("start", "static_1"), ("end", "submit")]

    def test_snapshots_are_immutable(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)
        before = graph.nodes

        graph.remove_node("text_1")

        assert len(before) == 5
        assert graph.node_count == 4


class TestEdges:
    def test_dangling_edge_rejected(self) -> None:
        graph = FormGraph([make_field_node("text_1")])

        with pytest.raises(GraphValidationError, match="unknown node"):
            graph.add_edge(make_edge("text_1", "ghost"))

    def test_self_loop_rejected(self) -> None:
        graph = FormGraph([make_field_node("text_1")])

        with pytest.raises(GraphValidationError, match="to itself"):
            graph.add_edge(make_edge("text_1", "text_1"))

    def test_duplicate_pair_rejected(self) -> None:
        graph = FormGraph([make_field_node("text_1"), make_field_node("text_2")], [make_edge("text_1", "text_2")])

        with pytest.raises(GraphValidationError, match="already exists"):
            graph.add_edge(Edge(id="other-id", source="text_1", target="text_2"))

    def test_remove_edges_for(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)

        assert graph.remove_edges_for("end") == 2
        assert graph.has_node("end")
        assert graph.edge_count == 2


class TestReplace:
    def test_replace_swaps_everything(self, scenario_a: Graph) -> None:
        graph = FormGraph([make_field_node("old_1")])

        graph.replace(*scenario_a)

        assert graph.node_count == 5
        assert not graph.has_node("old_1")

    def test_failed_replace_leaves_graph_untouched(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)
        nodes, edges = scenario_a

        with pytest.raises(GraphValidationError):
            graph.replace(nodes, [*edges, make_edge("text_1", "ghost")])

        assert graph.node_count == 5
        assert graph.edge_count == 4

    def test_clear(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)

        graph.clear()

        assert graph.nodes == ()
        assert graph.edges == ()


class TestPayload:
    def test_to_payload_round_trip(self, scenario_a: Graph) -> None:
        graph = FormGraph(*scenario_a)

        payload = graph.to_payload()

        assert FormGraph(payload.nodes, payload.edges).to_payload() == payload
        assert [n["type"] for n in payload.to_wire()["nodes"]] == ["start", "field", "field", "end", "submit"]
