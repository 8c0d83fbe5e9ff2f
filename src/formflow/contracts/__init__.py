"""Shared contracts: enums, identifiers, wire models and events.

Leaf package. Nothing here imports from formflow.core.
"""

from formflow.contracts.enums import (
    STRUCTURAL_KINDS,
    DuplicateIdPolicy,
    FieldType,
    InputType,
    NodeKind,
)
from formflow.contracts.events import (
    ConnectionRejected,
    DiagnosticsUpdated,
    EdgeAdded,
    GraphImported,
    ImportFormat,
    ImportRejected,
    NodeAdded,
    NodeRemoved,
)
from formflow.contracts.graph import (
    DEFAULT_SUBMIT_COLOR,
    DEFAULT_SUBMIT_LABEL,
    FIELD_LIST_ADAPTER,
    NODE_ADAPTER,
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
    SubmitApi,
    SubmitNode,
    SubmitNodeData,
    edge_id_for,
)
from formflow.contracts.types import EdgeID, FieldID, NodeID

__all__ = [
    "DEFAULT_SUBMIT_COLOR",
    "DEFAULT_SUBMIT_LABEL",
    "FIELD_LIST_ADAPTER",
    "NODE_ADAPTER",
    "STRUCTURAL_KINDS",
    "ConnectionRejected",
    "DiagnosticsUpdated",
    "DuplicateIdPolicy",
    "Edge",
    "EdgeAdded",
    "EdgeID",
    "EndNode",
    "FieldID",
    "FieldNode",
    "FieldNodeData",
    "FieldType",
    "FormField",
    "GraphImported",
    "GraphPayload",
    "ImportFormat",
    "ImportRejected",
    "InputType",
    "Node",
    "NodeAdded",
    "NodeID",
    "NodeKind",
    "NodeRemoved",
    "Position",
    "StartNode",
    "StructuralData",
    "SubmitApi",
    "SubmitNode",
    "SubmitNodeData",
    "edge_id_for",
]
