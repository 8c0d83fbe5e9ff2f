# src/formflow/core/__init__.py
"""Core engine: graph model, connection rules, ordering, diagnostics and schema codec."""

from formflow.core.builder import Diagnostics, FormBuilder, SubmitMeta, Viewport
from formflow.core.config import FormflowSettings, load_settings
from formflow.core.events import EventBus
from formflow.core.fields import PALETTE, create_node, default_field, sample_schema
from formflow.core.identifiers import IdAllocator
from formflow.core.logging import configure_logging, get_logger
from formflow.core.notices import Clock, NoticeBoard
from formflow.core.schema import flat_to_graph, graph_to_fields, plan_import

__all__ = [
    "PALETTE",
    "Clock",
    "Diagnostics",
    "EventBus",
    "FormBuilder",
    "FormflowSettings",
    "IdAllocator",
    "NoticeBoard",
    "SubmitMeta",
    "Viewport",
    "configure_logging",
    "create_node",
    "default_field",
    "flat_to_graph",
    "get_logger",
    "graph_to_fields",
    "load_settings",
    "plan_import",
    "sample_schema",
]
