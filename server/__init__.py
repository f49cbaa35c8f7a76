"""Server-side components for the supply network editor

This package contains the FastAPI server, AG-UI document sync events, and
REST API payloads. Uses the official ag-ui-protocol package for AG-UI event
types and encoding.
"""

from .app import app
from .events import (
    DocumentBroadcaster,
    JsonPatchOp,
    document_delta,
    encode_event,
)
from .payloads import (
    AddEdgeRequest,
    AddNodeRequest,
    ConnectionCheckResponse,
    ConnectRequest,
    DetailsEditRequest,
    EditResponse,
    SelectionResponse,
    SelectRequest,
    TemplatesResponse,
)

# Re-export AG-UI types from official package for convenience
from ag_ui.core import (
    EventType as AGUIEventType,
    StateSnapshotEvent,
    StateDeltaEvent,
)
from ag_ui.encoder import EventEncoder

__all__ = [
    "app",
    "AGUIEventType",
    "StateSnapshotEvent",
    "StateDeltaEvent",
    "EventEncoder",
    "DocumentBroadcaster",
    "JsonPatchOp",
    "document_delta",
    "encode_event",
    "AddEdgeRequest",
    "AddNodeRequest",
    "ConnectionCheckResponse",
    "ConnectRequest",
    "DetailsEditRequest",
    "EditResponse",
    "SelectionResponse",
    "SelectRequest",
    "TemplatesResponse",
]
