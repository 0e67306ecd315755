"""Pydantic models for editor sessions and their derived views."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from flowcanvas.models.node import Position
from flowcanvas.models.workflow import Network, WorkflowDefinition


class ReferenceOption(BaseModel):
    """A selectable reference to an upstream step's output."""

    label: str
    expression: str  # e.g. nodes.n1.output.price
    template: str  # expression wrapped for text fields: {{nodes.n1.output.price}}
    group: str


class ReferenceOptionsResponse(BaseModel):
    """Reference candidates for one configuration field."""

    node_id: str
    options: list[ReferenceOption] = []
    free_text: bool = Field(
        default=False,
        description="True when no upstream step exists and the field takes free text",
    )


class TerminalAnchor(BaseModel):
    """Where the trailing "+" affordance attaches."""

    node_id: str
    position: Position


class NetworkWarning(BaseModel):
    """Advisory warning for a step that will fail on the selected network."""

    node_id: str
    step_type: str
    message: str


class EditorView(BaseModel):
    """Snapshot of an editor session, recomputed after every mutation."""

    session_id: str
    workflow_id: str
    network: Network
    definition: WorkflowDefinition
    reachable: list[str] = []
    terminals: list[str] = []
    anchor: TerminalAnchor | None = None
    warnings: list[NetworkWarning] = []
    dirty: bool = False
    message: str | None = None


class EditorSessionInfo(BaseModel):
    """Information about an open editor session."""

    session_id: str
    workflow_id: str
    created_at: datetime
    last_activity: datetime
    node_count: int
    dirty: bool


class AddStepRequest(BaseModel):
    """Request to add a step of the given type."""

    step_type: str


class PatchNodeRequest(BaseModel):
    """Request to merge fields into a node's data."""

    patch: dict[str, Any] = {}
