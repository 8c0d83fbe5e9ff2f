"""Observability events emitted by the builder session.

The builder emits these after every user action so a presentation layer
(canvas, diagnostics panel, toast area) can redraw without polling.
Events are frozen: handlers receive snapshots, never live state.
"""

from dataclasses import dataclass
from enum import StrEnum

from formflow.contracts.types import NodeID


class ImportFormat(StrEnum):
    """Which payload shape an import was recognised as."""

    GRAPH = "graph"
    FLAT = "flat"


@dataclass(frozen=True, slots=True)
class NodeAdded:
    node_id: NodeID
    kind: str


@dataclass(frozen=True, slots=True)
class NodeRemoved:
    """Emitted after a node and its incident edges are deleted.

    Attributes:
        node_id: The deleted node
        edges_removed: Number of incident edges cascaded away
    """

    node_id: NodeID
    edges_removed: int


@dataclass(frozen=True, slots=True)
class EdgeAdded:
    source: NodeID
    target: NodeID


@dataclass(frozen=True, slots=True)
class ConnectionRejected:
    """A proposed edge failed validation; the graph is unchanged.

    Attributes:
        source: Proposed source node id
        target: Proposed target node id
        reason: User-facing reason (e.g. "End must connect only to Submit")
    """

    source: NodeID | None
    target: NodeID | None
    reason: str


@dataclass(frozen=True, slots=True)
class GraphImported:
    format: ImportFormat
    node_count: int
    edge_count: int


@dataclass(frozen=True, slots=True)
class ImportRejected:
    """An import payload was malformed; the graph is unchanged."""

    reason: str


@dataclass(frozen=True, slots=True)
class DiagnosticsUpdated:
    """Recomputed ordering + structural warnings after a mutation.

    Attributes:
        sequence: Diagnostic node trail from the ordering engine
        warnings: Ordering warnings, then structural warnings not already raised
        field_count: Number of fields in the derived render order
    """

    sequence: tuple[NodeID, ...]
    warnings: tuple[str, ...]
    field_count: int


type BuilderEvent = NodeAdded | NodeRemoved | EdgeAdded | ConnectionRejected | GraphImported | ImportRejected | DiagnosticsUpdated
