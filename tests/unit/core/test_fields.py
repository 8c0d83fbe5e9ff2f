# tests/unit/core/test_fields.py
"""Tests for palette defaults and node factories."""

import pytest

from formflow.contracts.enums import FieldType, InputType, NodeKind
from formflow.contracts.graph import EndNode, FieldNode, Position, StartNode, SubmitNode
from formflow.core.dag.ordering import derive_order
from formflow.core.dag.validation import structural_warnings
from formflow.core.fields import PALETTE, create_node, default_field, new_structural_id, sample_schema, structural_node
from formflow.core.identifiers import IdAllocator


class TestDefaultField:
    @pytest.mark.parametrize("palette_type", [p for p in PALETTE if p not in ("email", "password")])
    def test_every_palette_type(self, palette_type: str, allocator: IdAllocator) -> None:
        field = default_field(palette_type, allocator)

        assert field.id == f"{palette_type}_1"
        assert field.type == FieldType(palette_type)
        assert field.label == "Untitled"
        assert field.is_required is False

    def test_email_is_virtual_text(self, allocator: IdAllocator) -> None:
        field = default_field("email", allocator)

        assert field.id == "email_1"
        assert field.type == FieldType.TEXT
        assert field.input_type == InputType.EMAIL

    def test_password_is_virtual_text(self, allocator: IdAllocator) -> None:
        field = default_field("password", allocator)

        assert field.type == FieldType.TEXT
        assert field.input_type == InputType.PASSWORD

    def test_type_specific_defaults(self, allocator: IdAllocator) -> None:
        assert default_field("select", allocator).options == ["Option A", "Option B"]
        assert default_field("file", allocator).max_size_mb == 5
        assert default_field("static", allocator).text == "Section text..."

    def test_wire_keys_are_camel_case(self, allocator: IdAllocator) -> None:
        wire = default_field("file", allocator).to_wire()

        assert wire["maxSizeMB"] == 5
        assert wire["isRequired"] is False

    def test_unknown_type(self, allocator: IdAllocator) -> None:
        with pytest.raises(ValueError, match="Unknown palette type 'slider'"):
            default_field("slider", allocator)

    def test_ids_advance(self, allocator: IdAllocator) -> None:
        assert [default_field("text", allocator).id for _ in range(3)] == ["text_1", "text_2", "text_3"]


class TestNodeFactories:
    def test_structural_ids_are_random_hex(self) -> None:
        first, second = new_structural_id(), new_structural_id()

        assert len(first) == 8
        assert first != second

    @pytest.mark.parametrize(
        ("kind", "cls"),
        [(NodeKind.START, StartNode), (NodeKind.END, EndNode), (NodeKind.SUBMIT, SubmitNode)],
    )
    def test_structural_node(self, kind: NodeKind, cls: type) -> None:
        node = structural_node(kind, Position(x=1, y=2), "fixed")

        assert isinstance(node, cls)
        assert node.id == "fixed"
        assert node.kind == kind

    def test_structural_node_rejects_field_kind(self) -> None:
        with pytest.raises(ValueError, match="not a structural"):
            structural_node(NodeKind.FIELD)

    def test_create_node_from_palette(self, allocator: IdAllocator) -> None:
        node = create_node("radio", allocator, Position(x=3, y=4))

        assert isinstance(node, FieldNode)
        assert node.id == node.field.id == "radio_1"
        assert node.position == Position(x=3, y=4)

    def test_create_structural_node(self, allocator: IdAllocator) -> None:
        node = create_node("submit", allocator)

        assert isinstance(node, SubmitNode)
        assert allocator.snapshot() == {}

    def test_create_node_from_existing_field(self, allocator: IdAllocator) -> None:
        field = default_field("date", IdAllocator({"date": 41}))

        node = create_node(field, allocator)

        assert node.id == "date_42"


class TestSampleSchema:
    def test_orders_all_fields_without_warnings(self) -> None:
        payload = sample_schema()

        result = derive_order(payload.nodes, payload.edges)

        assert [f.id for f in result.ordered_fields][:3] == ["static_1", "text_1", "email_1"]
        assert len(result.ordered_fields) == 10
        assert result.warnings == ()
        assert structural_warnings(payload.nodes, payload.edges) == []
