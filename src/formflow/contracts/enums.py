"""Node kinds and field types shared across subsystem boundaries.

These values appear verbatim in the graph and flat-schema JSON payloads,
so renaming a member is a wire-format change.
"""

from enum import StrEnum


class NodeKind(StrEnum):
    """Kind of node on the form canvas.

    Serialized as the node's ``type`` key.
    """

    START = "start"
    END = "end"
    SUBMIT = "submit"
    FIELD = "field"


STRUCTURAL_KINDS: frozenset[NodeKind] = frozenset({NodeKind.START, NodeKind.END, NodeKind.SUBMIT})


class FieldType(StrEnum):
    """Type of an input field embedded in a field node.

    STATIC is a section marker: it carries no user-entered value and acts
    as the root of a section branch.
    """

    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO = "radio"
    SELECT = "select"
    CHECKBOX = "checkbox"
    DATE = "date"
    FILE = "file"
    STATIC = "static"


class InputType(StrEnum):
    """HTML input flavour for TEXT fields."""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"


class DuplicateIdPolicy(StrEnum):
    """What an import does when the payload repeats a node id.

    Values:
        REJECT: Refuse the whole import, graph left unchanged
        RENAME: Reissue later duplicates fresh ids from the allocator
    """

    REJECT = "reject"
    RENAME = "rename"
