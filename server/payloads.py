"""REST API request/response payload types

These types define the contract for the REST API endpoints:
- /api/nodes, /api/edges, /api/connect: Structural edits
- /api/selection: Selection and details editing
- /api/templates: Node/edge type catalogue (legend, add-node form)
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from editor import EditResult
from network import EdgeType, NodeType, Selection, SelectionFocus, SelectionKind

from .events import JsonPatchOp


class AddNodeRequest(BaseModel):
    """Request body for adding a node from its type template.

    values holds the identifying attributes of the node's network key
    (e.g. {"location": "L1", "product": "P1"}); without them a synthetic id
    is generated.
    """

    model_config = ConfigDict(use_enum_values=True)

    node_type: NodeType
    values: dict[str, str] | None = None


class AddEdgeRequest(BaseModel):
    """Request body for the explicit "add edge" action."""

    model_config = ConfigDict(use_enum_values=True)

    source: str
    target: str
    edge_type: EdgeType = EdgeType.MOVEMENT


class ConnectRequest(BaseModel):
    """Request body for a drag-to-connect gesture (and its pre-flight check)."""

    source: str
    target: str


class ConnectionCheckResponse(BaseModel):
    allowed: bool


class SelectRequest(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    kind: SelectionKind
    id: str


class SelectionResponse(BaseModel):
    """Current selection, its details working copy and highlight set."""

    selection: Selection | None = None
    details: Any = None
    focus: SelectionFocus | None = None


class DetailsEditRequest(BaseModel):
    """Request body for editing one value of the selected element.

    Exactly one of value (a JSON value) or text (a leaf typed as text,
    coerced to null/number/bool/string) is used; text wins when both are set.
    """

    path: list[str | int] = Field(default_factory=list)
    value: Any = None
    text: str | None = None


class EditResponse(EditResult):
    """Edit outcome plus the JSON Patch delta applied to the document."""

    delta: list[JsonPatchOp] = Field(default_factory=list)
    details: Any = None  # details working copy after a selection edit


class TemplatesResponse(BaseModel):
    """Default objects per type and the attributes of each network key."""

    node_types: dict[str, dict[str, Any]]
    edge_types: dict[str, dict[str, Any]]
    network_key_fields: dict[str, list[str]]
