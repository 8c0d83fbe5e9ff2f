# src/formflow/core/fields.py
"""Palette defaults and node construction.

The palette lists what a user can drop on the canvas. ``email`` and
``password`` are virtual entries: they produce a TEXT field with the
matching input type but keep their own id prefix (``email_1``), so the id
still tells a reader what the field is for.
"""

from __future__ import annotations

import uuid
from typing import Any

from formflow.contracts.enums import FieldType, InputType, NodeKind
from formflow.contracts.graph import (
    Edge,
    EndNode,
    FieldNode,
    FieldNodeData,
    FormField,
    GraphPayload,
    Node,
    Position,
    StartNode,
    StructuralData,
    SubmitNode,
    SubmitNodeData,
    edge_id_for,
)
from formflow.contracts.types import NodeID
from formflow.core.identifiers import IdAllocator

PALETTE: tuple[str, ...] = (
    "text",
    "email",
    "password",
    "textarea",
    "radio",
    "select",
    "checkbox",
    "date",
    "file",
    "static",
)

DEFAULT_POSITION = Position(x=50, y=50)

_VIRTUAL_TEXT_TYPES: dict[str, tuple[InputType, str]] = {
    "email": (InputType.EMAIL, "you@example.com"),
    "password": (InputType.PASSWORD, "••••••••"),
}

# Type-specific attributes layered over {type, label, isRequired}
_TYPE_DEFAULTS: dict[FieldType, dict[str, Any]] = {
    FieldType.TEXT: {"placeholder": "Enter text", "inputType": InputType.TEXT},
    FieldType.TEXTAREA: {"placeholder": "Enter details"},
    FieldType.RADIO: {"options": ["Option 1", "Option 2"]},
    FieldType.SELECT: {"options": ["Option A", "Option B"], "multiple": False},
    FieldType.CHECKBOX: {"options": ["Check 1", "Check 2"]},
    FieldType.DATE: {"minDate": "", "maxDate": ""},
    FieldType.FILE: {"accept": ".png,.jpg", "maxSizeMB": 5, "multiple": False},
    FieldType.STATIC: {"text": "Section text..."},
}


def default_field(palette_type: str, allocator: IdAllocator) -> FormField:
    """Build a fresh field for a palette entry with a newly allocated id.

    Raises:
        ValueError: If ``palette_type`` is not in the palette
    """
    if palette_type in _VIRTUAL_TEXT_TYPES:
        input_type, placeholder = _VIRTUAL_TEXT_TYPES[palette_type]
        return FormField(
            id=allocator.allocate(palette_type),
            type=FieldType.TEXT,
            label="Untitled",
            isRequired=False,
            placeholder=placeholder,
            inputType=input_type,
        )

    try:
        field_type = FieldType(palette_type)
    except ValueError:
        raise ValueError(f"Unknown palette type '{palette_type}'. Available: {', '.join(PALETTE)}") from None

    return FormField(
        id=allocator.allocate(field_type.value),
        type=field_type,
        label="Untitled",
        isRequired=False,
        **_TYPE_DEFAULTS[field_type],
    )


def new_structural_id() -> NodeID:
    """Random 8-character id for start/end/submit nodes."""
    return NodeID(uuid.uuid4().hex[:8])


def structural_node(kind: NodeKind, position: Position | None = None, node_id: str | None = None) -> Node:
    """Create a start, end or submit node.

    Raises:
        ValueError: If ``kind`` is FIELD
    """
    resolved_id = NodeID(node_id) if node_id else new_structural_id()
    resolved_position = position or DEFAULT_POSITION
    if kind == NodeKind.START:
        return StartNode(id=resolved_id, position=resolved_position, data=StructuralData(label="start"))
    if kind == NodeKind.END:
        return EndNode(id=resolved_id, position=resolved_position, data=StructuralData(label="end"))
    if kind == NodeKind.SUBMIT:
        return SubmitNode(id=resolved_id, position=resolved_position, data=SubmitNodeData())
    raise ValueError(f"'{kind}' is not a structural node kind")


def field_node(field: FormField, position: Position | None = None) -> FieldNode:
    """Wrap a field in a canvas node. The node id is the field id."""
    return FieldNode(id=NodeID(field.id), position=position or DEFAULT_POSITION, data=FieldNodeData(field=field))


def create_node(
    type_or_field: str | FormField,
    allocator: IdAllocator,
    position: Position | None = None,
    node_id: str | None = None,
) -> Node:
    """Create a node from a palette/structural name or an existing field.

    - "start" / "end" / "submit": structural node (``node_id`` or a random id)
    - other strings: palette entry with defaults and a fresh field id
    - FormField: kept as-is, its id preserved (imports)
    """
    if isinstance(type_or_field, FormField):
        return field_node(type_or_field, position)
    if type_or_field in (NodeKind.START, NodeKind.END, NodeKind.SUBMIT):
        return structural_node(NodeKind(type_or_field), position, node_id)
    return field_node(default_field(type_or_field, allocator), position)


_SAMPLE_FIELDS: list[dict[str, Any]] = [
    {"id": "static_1", "type": "static", "label": "Registration Form", "text": "Please fill in all required fields."},
    {"id": "text_1", "type": "text", "label": "Full Name", "isRequired": True, "placeholder": "John Doe", "inputType": "text"},
    {"id": "email_1", "type": "text", "label": "Email", "isRequired": True, "placeholder": "you@example.com", "inputType": "email"},
    {"id": "password_1", "type": "text", "label": "Password", "isRequired": True, "placeholder": "••••••••", "inputType": "password"},
    {"id": "textarea_1", "type": "textarea", "label": "Short Bio", "placeholder": "Tell us about yourself"},
    {"id": "radio_1", "type": "radio", "label": "Gender", "isRequired": True, "options": ["Male", "Female", "Other"]},
    {
        "id": "select_1",
        "type": "select",
        "label": "Country",
        "isRequired": True,
        "options": ["India", "USA", "UK", "Germany", "Japan"],
        "multiple": False,
    },
    {"id": "checkbox_1", "type": "checkbox", "label": "Languages Known", "options": ["English", "Hindi", "Marathi", "Spanish", "German"]},
    {"id": "date_1", "type": "date", "label": "Date of Birth", "minDate": "1900-01-01", "maxDate": "2025-12-31", "isRequired": True},
    {"id": "file_1", "type": "file", "label": "Upload Resume", "isRequired": True, "accept": ".pdf", "maxSizeMB": 10, "multiple": False},
]


def sample_schema() -> GraphPayload:
    """A registration form wired as one section, for demos and tests.

    ``start -> static_1 -> text_1 -> ... -> file_1 -> end -> submit``
    """
    fields = [FormField.model_validate(raw) for raw in _SAMPLE_FIELDS]
    field_x, first_y, gap_y = 320, 40, 120

    start = structural_node(NodeKind.START, Position(x=40, y=40), "start")
    end = structural_node(NodeKind.END, Position(x=40, y=first_y + gap_y * len(fields)), "end")
    submit = structural_node(NodeKind.SUBMIT, Position(x=40, y=first_y + gap_y * (len(fields) + 1)), "submit")
    field_nodes = [field_node(f, Position(x=field_x, y=first_y + i * gap_y)) for i, f in enumerate(fields)]

    chain: list[Node] = [start, *field_nodes, end, submit]
    edges = [Edge(id=edge_id_for(a.id, b.id), source=a.id, target=b.id) for a, b in zip(chain, chain[1:], strict=False)]
    return GraphPayload(nodes=[start, *field_nodes, end, submit], edges=edges)
