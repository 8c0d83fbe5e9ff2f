# src/formflow/core/dag/__init__.py
"""Form graph operations: model, connection rules, ordering, diagnostics."""

from formflow.core.dag.connections import can_connect, validate_edge_draft
from formflow.core.dag.cycles import would_create_cycle
from formflow.core.dag.graph import FormGraph
from formflow.core.dag.models import (
    ConnectionVerdict,
    GraphValidationError,
    ImportRejectedError,
    OrderResult,
)
from formflow.core.dag.ordering import derive_order, export_node_ids, walk_linear_chain
from formflow.core.dag.validation import structural_warnings

__all__ = [
    "ConnectionVerdict",
    "FormGraph",
    "GraphValidationError",
    "ImportRejectedError",
    "OrderResult",
    "can_connect",
    "derive_order",
    "export_node_ids",
    "structural_warnings",
    "validate_edge_draft",
    "walk_linear_chain",
    "would_create_cycle",
]
