"""Workflow API routes."""

from fastapi import APIRouter, HTTPException

from flowcanvas.db import workflow_store
from flowcanvas.models import (
    EligibilityResult,
    Workflow,
    WorkflowCreate,
    WorkflowSummary,
    WorkflowUpdate,
)
from flowcanvas.services.editor_sessions import get_session_manager
from flowcanvas.services.eligibility import check_enable_eligibility

router = APIRouter()


# ==================== Workflows ====================


@router.get("/workflows")
async def list_workflows() -> list[WorkflowSummary]:
    """List all workflows."""
    return await workflow_store.list_workflows()


@router.post("/workflows")
async def create_workflow(workflow: WorkflowCreate) -> Workflow:
    """Create a new workflow, optionally seeded with a definition."""
    return await workflow_store.create_workflow(workflow)


@router.get("/workflows/{workflow_id}")
async def get_workflow(workflow_id: str) -> Workflow:
    """Get a workflow with its definition."""
    workflow = await workflow_store.get_workflow(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return workflow


@router.patch("/workflows/{workflow_id}")
async def update_workflow(workflow_id: str, update: WorkflowUpdate) -> Workflow:
    """Update a workflow's name, network or whole definition."""
    workflow = await workflow_store.update_workflow(workflow_id, update)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return workflow


@router.delete("/workflows/{workflow_id}")
async def delete_workflow(workflow_id: str) -> dict:
    """Delete a workflow and close its editor sessions."""
    deleted = await workflow_store.delete_workflow(workflow_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Workflow not found")
    get_session_manager().close_workflow_sessions(workflow_id)
    return {"deleted": True}


@router.get("/workflows/{workflow_id}/eligibility")
async def get_enable_eligibility(workflow_id: str) -> EligibilityResult:
    """Check whether the stored workflow can be enabled for scheduled runs."""
    workflow = await workflow_store.get_workflow(workflow_id)
    if workflow is None:
        raise HTTPException(status_code=404, detail="Workflow not found")
    return check_enable_eligibility(workflow.definition)
