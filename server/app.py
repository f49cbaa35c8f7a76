"""FastAPI server for the supply network editor

Includes:
- REST API for importing, editing, and exporting a network document
- Renderer projection (positions, labels, edge handles)
- SSE (Server-Sent Events) stream of AG-UI STATE_SNAPSHOT / STATE_DELTA events

The editor session lives on app.state.session; every mutating endpoint
replaces the session document atomically and broadcasts the resulting
JSON Patch delta.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import AsyncGenerator, Callable

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles

from editor import EditorConfig, EditorSession, EditResult, ImportSummary, NoDocumentLoaded
from network import (
    EDGE_TEMPLATES,
    NETWORK_KEY_FORMATS,
    NODE_TEMPLATES,
    DocumentFormatError,
    InvariantViolation,
    MAX_PRECISION,
    NetworkView,
    SelectionKind,
    UnknownElementError,
)

from .events import (
    DocumentBroadcaster,
    delta_event,
    document_delta,
    encode_event,
    snapshot_event,
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

logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 15.0


# --- FastAPI App ---

app = FastAPI(
    title="Supply Network Editor",
    description="Interactive editing of supply-chain network graphs",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.session = EditorSession(EditorConfig.from_env())
app.state.broadcaster = DocumentBroadcaster()

# Built browser front-end (index.html plus assets/), served when configured
frontend_env = os.environ.get("NETWORK_EDITOR_FRONTEND_DIR")
frontend_path = Path(frontend_env) if frontend_env else None
if frontend_path is not None and (frontend_path / "assets").is_dir():
    app.mount("/assets", StaticFiles(directory=frontend_path / "assets"), name="assets")


def get_session(request: Request) -> EditorSession:
    return request.app.state.session


def get_broadcaster(request: Request) -> DocumentBroadcaster:
    return request.app.state.broadcaster


# --- Error mapping ---


@app.exception_handler(DocumentFormatError)
async def document_format_error_handler(request: Request, exc: DocumentFormatError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(NoDocumentLoaded)
async def no_document_handler(request: Request, exc: NoDocumentLoaded) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(UnknownElementError)
async def unknown_element_handler(request: Request, exc: UnknownElementError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvariantViolation)
async def invariant_violation_handler(request: Request, exc: InvariantViolation) -> JSONResponse:
    logger.error("[INVARIANT] %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def apply_edit(
    session: EditorSession,
    broadcaster: DocumentBroadcaster,
    action: Callable[[], EditResult],
) -> EditResponse:
    """Run a session action and broadcast the document delta it produced."""
    before = session.document.to_json() if session.document is not None else None
    result = action()
    after = session.document.to_json() if session.document is not None else None

    delta = document_delta(before, after) if result.applied else []
    if delta:
        broadcaster.publish(delta_event(delta))
        logger.debug("[STATE_DELTA] Sent %d ops", len(delta))

    return EditResponse(**result.model_dump(), delta=delta, details=session.details)


def export_filename(name: str) -> str:
    """Download filename: "export" when blank, ".json" appended if missing."""
    safe = name.strip() or "export"
    return safe if safe.endswith(".json") else f"{safe}.json"


# --- Routes ---


@app.get("/")
async def root() -> FileResponse:
    """Serve the front-end page from NETWORK_EDITOR_FRONTEND_DIR."""
    if frontend_path is None or not (frontend_path / "index.html").is_file():
        raise HTTPException(
            status_code=404,
            detail="No front-end configured. Set NETWORK_EDITOR_FRONTEND_DIR to a built front-end directory."
        )
    index_path = frontend_path / "index.html"
    return FileResponse(index_path)


@app.post("/api/import", response_model=ImportSummary)
async def import_document(
    request: Request,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> ImportSummary:
    """Replace the session document with the posted JSON document.

    Import is all-or-nothing: a malformed body answers 400 and leaves the
    current document untouched.
    """
    body = await request.body()
    summary = session.import_text(body)
    broadcaster.publish(snapshot_event(session.document.to_json()))
    return summary


@app.get("/api/document")
async def get_document(session: EditorSession = Depends(get_session)) -> dict:
    """Current document in wire format, unrounded."""
    return session.require_document().to_json()


@app.get("/api/view", response_model=NetworkView)
async def get_view(session: EditorSession = Depends(get_session)) -> NetworkView:
    """Renderer projection of the current document."""
    return session.view()


@app.get("/api/export")
async def export_document(
    name: str = Query("export_network"),
    precision: int | None = Query(None, ge=0, le=MAX_PRECISION),
    session: EditorSession = Depends(get_session),
) -> JSONResponse:
    """Download the document with numbers rounded for export."""
    content = session.export(precision)
    filename = export_filename(name)
    logger.info("[EXPORT] %s", filename)
    return JSONResponse(
        content=content,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@app.get("/api/templates", response_model=TemplatesResponse)
async def get_templates() -> TemplatesResponse:
    """Default objects per node/edge type, for the legend and add forms."""
    return TemplatesResponse(
        node_types={t.value: obj for t, obj in NODE_TEMPLATES.items()},
        edge_types={t.value: obj for t, obj in EDGE_TEMPLATES.items()},
        network_key_fields={t.value: list(fmt.fields) for t, fmt in NETWORK_KEY_FORMATS.items()},
    )


@app.post("/api/nodes", response_model=EditResponse)
async def create_node(
    body: AddNodeRequest,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    return apply_edit(session, broadcaster, lambda: session.add_node(body.node_type, body.values))


@app.delete("/api/nodes/{node_id}", response_model=EditResponse)
async def remove_node(
    node_id: str,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    """Delete a node together with every edge touching it."""
    return apply_edit(session, broadcaster, lambda: session.delete_node(node_id))


@app.post("/api/edges", response_model=EditResponse)
async def create_edge(
    body: AddEdgeRequest,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    """Explicit "add edge" action; the chosen type may be overridden by the rules."""
    return apply_edit(
        session, broadcaster, lambda: session.add_edge(body.source, body.target, body.edge_type)
    )


@app.delete("/api/edges/{key}", response_model=EditResponse)
async def remove_edge(
    key: str,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    return apply_edit(session, broadcaster, lambda: session.delete_edge(key))


@app.post("/api/connect", response_model=EditResponse)
async def connect_nodes(
    body: ConnectRequest,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    """Drag-to-connect gesture between two nodes."""
    return apply_edit(session, broadcaster, lambda: session.connect(body.source, body.target))


@app.post("/api/connect/validate", response_model=ConnectionCheckResponse)
async def validate_connection(
    body: ConnectRequest,
    session: EditorSession = Depends(get_session),
) -> ConnectionCheckResponse:
    """Pre-flight check while a connection is being dragged."""
    return ConnectionCheckResponse(allowed=session.is_valid_connection(body.source, body.target))


@app.get("/api/selection", response_model=SelectionResponse)
async def get_selection(session: EditorSession = Depends(get_session)) -> SelectionResponse:
    return SelectionResponse(
        selection=session.selection,
        details=session.details,
        focus=session.focus(),
    )


@app.post("/api/selection", response_model=SelectionResponse)
async def select_element(
    body: SelectRequest,
    session: EditorSession = Depends(get_session),
) -> SelectionResponse:
    """Select a node or edge and return its details working copy."""
    if body.kind == SelectionKind.NODE.value:
        focus = session.select_node(body.id)
    else:
        focus = session.select_edge(body.id)
    return SelectionResponse(selection=session.selection, details=session.details, focus=focus)


@app.delete("/api/selection", response_model=SelectionResponse)
async def clear_selection(session: EditorSession = Depends(get_session)) -> SelectionResponse:
    session.clear_selection()
    return SelectionResponse()


@app.patch("/api/selection/details", response_model=EditResponse)
async def edit_details(
    body: DetailsEditRequest,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    """Edit one value of the selected element's object."""
    if body.text is not None:
        return apply_edit(session, broadcaster, lambda: session.edit_leaf_text(body.path, body.text))
    return apply_edit(session, broadcaster, lambda: session.edit_details(body.path, body.value))


@app.delete("/api/selection/element", response_model=EditResponse)
async def delete_selected(
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
) -> EditResponse:
    """Delete the selected node (with its edges) or edge."""
    return apply_edit(session, broadcaster, session.delete_selected)


# --- Streaming Endpoint ---


@app.get("/api/events")
async def stream_events(
    request: Request,
    session: EditorSession = Depends(get_session),
    broadcaster: DocumentBroadcaster = Depends(get_broadcaster),
):
    """Stream document changes as AG-UI events over SSE.

    Returns SSE stream with events:
    - STATE_SNAPSHOT: Full document on connect and after every import
    - STATE_DELTA: JSON Patch ops after every applied edit
    """
    queue = broadcaster.subscribe()

    async def event_generator() -> AsyncGenerator[str, None]:
        """Generate AG-UI SSE events."""
        try:
            document = session.document.to_json() if session.document is not None else None
            yield encode_event(snapshot_event(document))
            while not await request.is_disconnected():
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keep-alive\n\n"
                    continue
                yield encode_event(event)
        finally:
            broadcaster.unsubscribe(queue)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
