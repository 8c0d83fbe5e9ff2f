"""Pydantic models for the form graph wire format.

These models are the ONLY definition of the two JSON shapes that cross the
core boundary:

- Graph payload: ``{"nodes": [...], "edges": [...]}``
- Flat field array: ``[FormField, ...]`` in render order

Wire keys stay camelCase (``isRequired``, ``maxSizeMB``...) through aliases so
payloads exported by earlier builder versions load unchanged. All models are
frozen: derivations run over immutable snapshots and mutations replace nodes
wholesale via ``model_copy``.

Node is a discriminated union keyed by ``type``. Consumers dispatch with
``match`` over the concrete classes and finish with ``assert_never`` so an
unhandled kind is caught by the type checker, not at runtime.
"""

from __future__ import annotations

from typing import Annotated, Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator

from formflow.contracts.enums import FieldType, InputType, NodeKind
from formflow.contracts.types import EdgeID, FieldID, NodeID

# Submit node appearance when the user never customised it
DEFAULT_SUBMIT_LABEL = "Submit"
DEFAULT_SUBMIT_COLOR = "#2563eb"


class FormField(BaseModel):
    """A single form field as rendered and submitted.

    Unknown keys are kept (extra="allow") so that a flat schema written by a
    newer builder survives import/export untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: FieldID
    type: FieldType
    label: str = "Untitled"
    is_required: bool = Field(default=False, alias="isRequired")
    placeholder: str | None = None
    input_type: InputType | None = Field(default=None, alias="inputType")
    options: list[str] | None = None
    multiple: bool | None = None
    min_date: str | None = Field(default=None, alias="minDate")
    max_date: str | None = Field(default=None, alias="maxDate")
    accept: str | None = None
    max_size_mb: float | None = Field(default=None, alias="maxSizeMB")
    text: str | None = None

    @property
    def is_section(self) -> bool:
        """Static fields mark a section and carry no value."""
        return self.type == FieldType.STATIC

    def to_wire(self) -> dict[str, Any]:
        """Dump exactly the keys that were provided, camelCase."""
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class Position(BaseModel):
    """Canvas coordinates. Only used as a deterministic ordering tie-break."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    x: float = 0.0
    y: float = 0.0


class SubmitApi(BaseModel):
    """HTTP descriptor consumed by the submission collaborator.

    The engine never reads these values; they ride along on the submit node.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    url: str = ""
    method: str = "POST"
    content_type: str = Field(default="json", alias="contentType")
    headers: dict[str, str] = Field(default_factory=lambda: {"Content-Type": "application/json"})
    body_template: str = Field(default="", alias="bodyTemplate")
    success_key: str = Field(default="message", alias="successKey")
    success_default: str = Field(default="Submitted successfully.", alias="successDefault")
    error_key: str = Field(default="error", alias="errorKey")
    error_default: str = Field(default="Submission failed.", alias="errorDefault")


class StructuralData(BaseModel):
    """Display payload for start/end nodes."""

    model_config = ConfigDict(extra="allow", frozen=True)

    label: str | None = None


class SubmitNodeData(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    label: str = DEFAULT_SUBMIT_LABEL
    color: str = DEFAULT_SUBMIT_COLOR
    api: SubmitApi | None = None


class FieldNodeData(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    field: FormField


class _NodeBase(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    kind: ClassVar[NodeKind]

    id: NodeID
    position: Position = Field(default_factory=Position)


class StartNode(_NodeBase):
    kind: ClassVar[NodeKind] = NodeKind.START

    type: Literal["start"] = "start"
    data: StructuralData = Field(default_factory=lambda: StructuralData(label="start"))


class EndNode(_NodeBase):
    kind: ClassVar[NodeKind] = NodeKind.END

    type: Literal["end"] = "end"
    data: StructuralData = Field(default_factory=lambda: StructuralData(label="end"))


class SubmitNode(_NodeBase):
    kind: ClassVar[NodeKind] = NodeKind.SUBMIT

    type: Literal["submit"] = "submit"
    data: SubmitNodeData = Field(default_factory=SubmitNodeData)


class FieldNode(_NodeBase):
    """Canvas node wrapping a FormField. Node id equals the field id."""

    kind: ClassVar[NodeKind] = NodeKind.FIELD

    type: Literal["field"] = "field"
    data: FieldNodeData

    @property
    def field(self) -> FormField:
        return self.data.field

    @property
    def is_section(self) -> bool:
        return self.data.field.is_section


type Node = StartNode | EndNode | SubmitNode | FieldNode

_NodeUnion = Annotated[StartNode | EndNode | SubmitNode | FieldNode, Field(discriminator="type")]

NODE_ADAPTER: TypeAdapter[Node] = TypeAdapter(_NodeUnion)


class Edge(BaseModel):
    """Directed connection between two canvas nodes.

    Extra keys (e.g. ``animated``) are carried through untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: EdgeID = EdgeID("")
    source: NodeID
    target: NodeID

    @model_validator(mode="before")
    @classmethod
    def derive_id(cls, data: Any) -> Any:
        """Derive ``e_<source>_<target>`` when the payload carries no id."""
        if isinstance(data, dict) and not data.get("id") and "source" in data and "target" in data:
            return {**data, "id": edge_id_for(data["source"], data["target"])}
        return data


def edge_id_for(source: str, target: str) -> EdgeID:
    return EdgeID(f"e_{source}_{target}")


class GraphPayload(BaseModel):
    """The ``{nodes, edges}`` import/export shape.

    Referential integrity is NOT checked here: the graph model drops dangling
    edges on import and the validators report the rest as warnings.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    nodes: list[_NodeUnion]
    edges: list[Edge]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


FIELD_LIST_ADAPTER: TypeAdapter[list[FormField]] = TypeAdapter(list[FormField])
