# src/formflow/core/builder.py
"""FormBuilder: the single writer behind the builder canvas.

Every user action (drop, connect, delete, edit, import) lands here. The
builder validates first, mutates the FormGraph only on success, then
publishes events. Derived state (ordering, warnings) is never maintained
incrementally: it is recomputed from the current snapshot and memoized on
the snapshot's structural fingerprint.

Threading: none. One logical writer; derivations run between mutations.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

from formflow.contracts.events import (
    ConnectionRejected,
    DiagnosticsUpdated,
    EdgeAdded,
    GraphImported,
    ImportRejected,
    NodeAdded,
    NodeRemoved,
)
from formflow.contracts.graph import (
    Edge,
    FieldNode,
    FieldNodeData,
    FormField,
    Node,
    Position,
    SubmitApi,
    SubmitNode,
    SubmitNodeData,
    edge_id_for,
)
from formflow.contracts.types import NodeID
from formflow.core.canonical import graph_fingerprint
from formflow.core.config import FormflowSettings, load_settings
from formflow.core.dag import (
    ConnectionVerdict,
    FormGraph,
    ImportRejectedError,
    OrderResult,
    can_connect,
    derive_order,
    structural_warnings,
    validate_edge_draft,
)
from formflow.core.dag.models import find_first
from formflow.core.dag.ordering import WARN_MISSING_END, WARN_MISSING_START, WARN_MISSING_SUBMIT
from formflow.core.dag.validation import WARN_ADD_END, WARN_ADD_START, WARN_ADD_SUBMIT
from formflow.core.events import EventBus
from formflow.core.fields import create_node
from formflow.core.identifiers import IdAllocator
from formflow.core.logging import configure_logging, get_logger
from formflow.core.notices import Clock, NoticeBoard
from formflow.core.schema import (
    ImportPlan,
    fields_to_wire,
    graph_to_fields,
    parse_import_text,
    plan_import,
    read_import_file,
)

logger = get_logger(__name__)

# Structural missing-node warnings and the ordering warning that says the same thing
_SAME_AS_ORDERING = {
    WARN_ADD_START: WARN_MISSING_START,
    WARN_ADD_END: WARN_MISSING_END,
    WARN_ADD_SUBMIT: WARN_MISSING_SUBMIT,
}


@dataclass(frozen=True, slots=True)
class Viewport:
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0


@dataclass(frozen=True, slots=True)
class Diagnostics:
    """Everything the diagnostics panel renders for one snapshot.

    Attributes:
        order: Ordering engine result
        structural: Graph-level structural warnings
    """

    order: OrderResult
    structural: tuple[str, ...]

    @property
    def warnings(self) -> tuple[str, ...]:
        """Ordering warnings, then structural ones the ordering engine has not already raised."""
        raised = set(self.order.warnings)
        return self.order.warnings + tuple(w for w in self.structural if _SAME_AS_ORDERING.get(w) not in raised)


@dataclass(frozen=True, slots=True)
class SubmitMeta:
    """What the submission collaborator needs from the submit node."""

    label: str
    color: str
    api: SubmitApi


class FormBuilder:
    """Editing session for one form graph.

    Example:
        builder = FormBuilder()
        builder.import_payload(sample_schema().to_wire())
        verdict = builder.connect(end_id, "text_1")
        verdict.reason  # 'End must connect only to Submit'
        builder.export_fields()
    """

    def __init__(
        self,
        settings: FormflowSettings | None = None,
        *,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
        allocator: IdAllocator | None = None,
    ) -> None:
        self._settings = settings or FormflowSettings()
        self._events = event_bus or EventBus()
        self._ids = allocator or IdAllocator()
        self._graph = FormGraph()
        self._selected: NodeID | None = None
        self._viewport = Viewport()
        self._notices = NoticeBoard(self._settings.notice.dismiss_after_seconds, clock or time.monotonic)
        self._diagnostics_cache: tuple[str, Diagnostics] | None = None

    @classmethod
    def from_config(
        cls,
        config_path: Path,
        *,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
    ) -> Self:
        """Start a session from a settings file.

        Loads YAML plus FORMFLOW_ environment overrides, then applies the
        logging section before the first action is logged.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If configuration fails Pydantic validation
        """
        settings = load_settings(config_path)
        configure_logging(json_output=settings.logging.json_output, level=settings.logging.level)
        logger.debug("session_configured", config_path=str(config_path))
        return cls(settings, event_bus=event_bus, clock=clock)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def graph(self) -> FormGraph:
        return self._graph

    @property
    def nodes(self) -> tuple[Node, ...]:
        return self._graph.nodes

    @property
    def edges(self) -> tuple[Edge, ...]:
        return self._graph.edges

    @property
    def ids(self) -> IdAllocator:
        return self._ids

    @property
    def selected_id(self) -> NodeID | None:
        return self._selected

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def notice(self) -> str | None:
        """Current rejection notice, or None once it has expired."""
        return self._notices.current

    @property
    def diagnostics(self) -> Diagnostics:
        """Ordering + structural warnings for the current snapshot."""
        nodes, edges = self._graph.nodes, self._graph.edges
        key = graph_fingerprint(nodes, edges)
        if self._diagnostics_cache is not None and self._diagnostics_cache[0] == key:
            return self._diagnostics_cache[1]
        slack = self._settings.ordering.iteration_slack
        diagnostics = Diagnostics(
            order=derive_order(nodes, edges, iteration_slack=slack),
            structural=tuple(structural_warnings(nodes, edges, iteration_slack=slack)),
        )
        self._diagnostics_cache = (key, diagnostics)
        return diagnostics

    # ------------------------------------------------------------------
    # Node actions
    # ------------------------------------------------------------------

    def drop(self, palette_type: str, position: Position | None = None) -> Node:
        """Add a node for a palette entry ("text", "static", "start"...).

        Raises:
            ValueError: If ``palette_type`` is unknown
        """
        node = create_node(palette_type, self._ids, position)
        self._graph.add_node(node)
        logger.debug("node_added", node_id=node.id, kind=node.kind.value)
        self._events.emit(NodeAdded(node_id=node.id, kind=node.kind.value))
        self._publish_diagnostics()
        return node

    def select(self, node_id: str | None) -> None:
        """Select a node (None clears the selection).

        Raises:
            KeyError: If ``node_id`` is not in the graph
        """
        if node_id is not None and not self._graph.has_node(node_id):
            raise KeyError(f"Node not found: {node_id}")
        self._selected = NodeID(node_id) if node_id is not None else None

    def remove_node(self, node_id: str) -> int:
        """Delete a node and its incident edges; returns edges removed.

        Raises:
            KeyError: If node doesn't exist
        """
        removed = self._graph.remove_node(node_id)
        if self._selected == node_id:
            self._selected = None
        logger.debug("node_removed", node_id=node_id, edges_removed=removed)
        self._events.emit(NodeRemoved(node_id=NodeID(node_id), edges_removed=removed))
        self._publish_diagnostics()
        return removed

    def delete_selected(self) -> bool:
        """Delete the selected node, if any. Returns True when something was deleted."""
        if self._selected is None:
            return False
        self.remove_node(self._selected)
        return True

    def update_field(self, node_id: str, field: FormField) -> FieldNode:
        """Replace the field carried by a field node.

        The node id is the field id, so the new field must keep it.

        Raises:
            KeyError: If node doesn't exist
            TypeError: If the node is not a field node
            ValueError: If the field id differs from the node id
        """
        node = self._graph.get_node(node_id)
        if not isinstance(node, FieldNode):
            raise TypeError(f"Node '{node_id}' is a {node.kind.value} node, not a field node")
        if field.id != node.id:
            raise ValueError(f"Field id '{field.id}' must match node id '{node.id}'")
        updated = node.model_copy(update={"data": FieldNodeData(field=field)})
        self._graph.replace_node(updated)
        self._publish_diagnostics()
        return updated

    def update_node_data(self, node_id: str, **patch: Any) -> Node:
        """Merge display data into a structural node (label, color, api...).

        Raises:
            KeyError: If node doesn't exist
            TypeError: If the node is a field node (use update_field)
        """
        node = self._graph.get_node(node_id)
        if isinstance(node, FieldNode):
            raise TypeError(f"Node '{node_id}' is a field node; use update_field")
        data = node.data.model_validate({**node.data.model_dump(by_alias=True), **patch})
        updated = node.model_copy(update={"data": data})
        self._graph.replace_node(updated)
        self._publish_diagnostics()
        return updated

    def move_node(self, node_id: str, position: Position) -> Node:
        """Reposition a node. Position drives section order, so diagnostics refresh."""
        node = self._graph.get_node(node_id)
        updated = node.model_copy(update={"position": position})
        self._graph.replace_node(updated)
        self._publish_diagnostics()
        return updated

    # ------------------------------------------------------------------
    # Edge actions
    # ------------------------------------------------------------------

    def preview_connection(self, source: str | None, target: str | None) -> ConnectionVerdict:
        """Kind-only check while an edge is still being dragged."""
        return validate_edge_draft(_as_node_id(source), _as_node_id(target), self._graph.nodes)

    def connect(self, source: str | None, target: str | None) -> ConnectionVerdict:
        """Validate and, if legal, add ``source -> target``.

        A rejection leaves the graph unchanged, shows a notice for the
        configured duration and emits ConnectionRejected.
        """
        source_id, target_id = _as_node_id(source), _as_node_id(target)
        verdict = can_connect(source_id, target_id, self._graph.nodes, self._graph.edges)
        if not verdict.ok:
            reason = verdict.reason or "Invalid connection"
            self._notices.post(reason)
            logger.info("connection_rejected", source=source_id, target=target_id, reason=reason)
            self._events.emit(ConnectionRejected(source=source_id, target=target_id, reason=reason))
            return verdict

        assert source_id is not None and target_id is not None
        self._graph.add_edge(Edge(id=edge_id_for(source_id, target_id), source=source_id, target=target_id))
        logger.debug("edge_added", source=source_id, target=target_id)
        self._events.emit(EdgeAdded(source=source_id, target=target_id))
        self._publish_diagnostics()
        return verdict

    def disconnect(self, source: str, target: str) -> bool:
        """Remove the ``source -> target`` edge if present."""
        before = self._graph.edge_count
        remaining = [edge for edge in self._graph.edges if not (edge.source == source and edge.target == target)]
        if len(remaining) == before:
            return False
        self._graph.replace(self._graph.nodes, remaining)
        self._publish_diagnostics()
        return True

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    def import_payload(self, payload: Any) -> bool:
        """Replace the graph with a decoded graph or flat-array payload.

        All-or-nothing: on failure the graph, selection and viewport are
        unchanged, ImportRejected is emitted and False is returned.
        """
        try:
            plan = plan_import(
                payload,
                self._ids,
                duplicate_ids=self._settings.imports.duplicate_ids,
                layout=self._settings.layout,
            )
            self._install(plan)
        except ImportRejectedError as e:
            self._reject_import(str(e))
            return False
        return True

    def import_text(self, text: str) -> bool:
        """Import from pasted JSON text."""
        try:
            payload = parse_import_text(text)
        except ImportRejectedError as e:
            self._reject_import(str(e))
            return False
        return self.import_payload(payload)

    def import_file(self, path: Path) -> bool:
        """Import from a JSON file on disk."""
        try:
            text = read_import_file(path)
        except ImportRejectedError as e:
            self._reject_import(str(e))
            return False
        return self.import_text(text)

    def export_fields(self) -> list[dict[str, Any]]:
        """Flat field array in render order, JSON-ready."""
        fields = graph_to_fields(
            self._graph.nodes,
            self._graph.edges,
            iteration_slack=self._settings.ordering.iteration_slack,
        )
        return fields_to_wire(fields)

    def export_graph(self) -> dict[str, Any]:
        """Graph payload ``{nodes, edges}``, JSON-ready."""
        return self._graph.to_payload().to_wire()

    def submit_meta(self) -> SubmitMeta:
        """Label, color and API descriptor of the submit node (defaults if absent)."""
        submit = find_first(self._graph.nodes, SubmitNode)
        data = submit.data if submit is not None else SubmitNodeData()
        return SubmitMeta(label=data.label, color=data.color, api=data.api or SubmitApi())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _install(self, plan: ImportPlan) -> None:
        self._graph.replace(plan.nodes, plan.edges)
        self._selected = None
        self._viewport = Viewport()
        logger.info(
            "graph_imported",
            format=plan.format.value,
            nodes=len(plan.nodes),
            edges=len(plan.edges),
            renamed=sum(len(ids) for ids in plan.renamed.values()),
            dropped_edges=len(plan.dropped_edges),
        )
        self._events.emit(GraphImported(format=plan.format, node_count=len(plan.nodes), edge_count=len(plan.edges)))
        self._publish_diagnostics()

    def _reject_import(self, reason: str) -> None:
        logger.warning("import_rejected", reason=reason)
        self._events.emit(ImportRejected(reason=reason))

    def _publish_diagnostics(self) -> None:
        diagnostics = self.diagnostics
        self._events.emit(
            DiagnosticsUpdated(
                sequence=diagnostics.order.sequence,
                warnings=diagnostics.warnings,
                field_count=len(diagnostics.order.ordered_fields),
            )
        )


def _as_node_id(value: str | None) -> NodeID | None:
    return NodeID(value) if value else None


__all__ = [
    "Diagnostics",
    "FormBuilder",
    "SubmitMeta",
    "Viewport",
]
