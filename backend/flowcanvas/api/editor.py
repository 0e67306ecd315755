"""Editor session API routes.

Each route maps one editor gesture onto the session's GraphStore and answers
with the recomputed view. Gestures that reference stale node or edge ids
leave the graph unchanged and still return the current view.
"""

import logging

from fastapi import APIRouter, HTTPException

from flowcanvas.db import workflow_store
from flowcanvas.models import (
    AddStepRequest,
    EdgeCreate,
    EdgeReconnect,
    EditorSessionInfo,
    EditorView,
    PatchNodeRequest,
    Position,
    ReferenceOptionsResponse,
    Workflow,
)
from flowcanvas.services.editor import EditorSession
from flowcanvas.services.editor_sessions import get_session_manager

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_session(session_id: str) -> EditorSession:
    session = get_session_manager().get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Editor session not found")
    return session


# ==================== Sessions ====================


@router.post("/workflows/{workflow_id}/editor/sessions")
async def open_editor_session(workflow_id: str) -> EditorView:
    """Open an editor session seeded from the stored definition."""
    workflow = await workflow_store.get_workflow(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")

    session = get_session_manager().create_session(
        workflow_id=workflow.id,
        definition=workflow.definition,
        network=workflow.network,
    )
    return session.view()


@router.get("/workflows/{workflow_id}/editor/sessions")
async def list_editor_sessions(workflow_id: str) -> list[EditorSessionInfo]:
    """List open editor sessions for a workflow."""
    sessions = get_session_manager().get_sessions_for_workflow(workflow_id)
    return [s.info() for s in sessions]


@router.get("/editor/sessions/{session_id}")
async def get_editor_session(session_id: str) -> EditorView:
    """Get the current view of an editor session."""
    return _get_session(session_id).view()


@router.delete("/editor/sessions/{session_id}")
async def close_editor_session(session_id: str) -> dict:
    """Close a session, discarding unsaved changes."""
    if not get_session_manager().close_session(session_id):
        raise HTTPException(status_code=404, detail="Editor session not found")
    return {"closed": True}


@router.post("/editor/sessions/{session_id}/save")
async def save_editor_session(session_id: str) -> Workflow:
    """Write the session's staged definition back to the workflow."""
    session = _get_session(session_id)
    draft = session.draft
    workflow = await workflow_store.save_definition(session.workflow_id, draft)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")

    # A gesture that landed during the write leaves the session dirty
    if session.draft is draft:
        session.mark_saved()
    logger.info(f"Saved editor session {session_id} to workflow {session.workflow_id}")
    return workflow


# ==================== Nodes ====================


@router.post("/editor/sessions/{session_id}/nodes")
async def add_step(session_id: str, request: AddStepRequest) -> EditorView:
    """Add an unconnected step below the existing ones."""
    session = _get_session(session_id)
    session.add_step(request.step_type)
    return session.view()


@router.post("/editor/sessions/{session_id}/nodes/after-terminal")
async def add_step_after_terminal(session_id: str, request: AddStepRequest) -> EditorView:
    """Add a step connected after the last terminal step (the trailing "+")."""
    session = _get_session(session_id)
    session.add_step_after_terminal(request.step_type)
    return session.view()


@router.patch("/editor/sessions/{session_id}/nodes/{node_id}")
async def patch_node(session_id: str, node_id: str, request: PatchNodeRequest) -> EditorView:
    """Merge fields into a step's configuration."""
    session = _get_session(session_id)
    session.patch_node(node_id, request.patch)
    return session.view()


@router.patch("/editor/sessions/{session_id}/nodes/{node_id}/position")
async def move_node(session_id: str, node_id: str, position: Position) -> EditorView:
    """Move a step to a new canvas position."""
    session = _get_session(session_id)
    session.move_node(node_id, position)
    return session.view()


@router.delete("/editor/sessions/{session_id}/nodes/{node_id}")
async def delete_node(session_id: str, node_id: str) -> EditorView:
    """Delete a step and every edge attached to it."""
    session = _get_session(session_id)
    session.delete_node(node_id)
    return session.view()


@router.get("/editor/sessions/{session_id}/nodes/{node_id}/references")
async def get_reference_options(session_id: str, node_id: str) -> ReferenceOptionsResponse:
    """List the upstream outputs a step's configuration may reference."""
    session = _get_session(session_id)
    if session.store.get_node(node_id) is None:
        raise HTTPException(status_code=404, detail="Node not found")

    options = session.reference_options(node_id)
    if options is None:
        return ReferenceOptionsResponse(node_id=node_id, free_text=True)
    return ReferenceOptionsResponse(node_id=node_id, options=options)


# ==================== Edges ====================


@router.post("/editor/sessions/{session_id}/edges/toggle")
async def toggle_edge(session_id: str, request: EdgeCreate) -> EditorView:
    """Connect two steps, or disconnect them if they are already connected."""
    session = _get_session(session_id)
    session.store.connect_or_toggle(request.source, request.target)
    return session.view()


@router.post("/editor/sessions/{session_id}/edges/{edge_id}/reconnect")
async def reconnect_edge(
    session_id: str, edge_id: str, request: EdgeReconnect | None = None
) -> EditorView:
    """Re-point an edge; no new endpoint (dropped on empty canvas) severs it."""
    request = request or EdgeReconnect()
    session = _get_session(session_id)
    session.store.reconnect_edge(edge_id, request.source, request.target)
    return session.view()


@router.post("/editor/sessions/{session_id}/edges/{edge_id}/insert")
async def insert_step_on_edge(
    session_id: str, edge_id: str, request: AddStepRequest
) -> EditorView:
    """Split an edge with a new step (the edge "+")."""
    session = _get_session(session_id)
    session.insert_step_on_edge(edge_id, request.step_type)
    return session.view()
