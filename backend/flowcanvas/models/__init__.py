"""Pydantic models for Flow Canvas."""

from flowcanvas.models.edge import Edge, EdgeCreate, EdgeReconnect
from flowcanvas.models.editor import (
    AddStepRequest,
    EditorSessionInfo,
    EditorView,
    NetworkWarning,
    PatchNodeRequest,
    ReferenceOption,
    ReferenceOptionsResponse,
    TerminalAnchor,
)
from flowcanvas.models.node import Node, NodeData, Position
from flowcanvas.models.step import (
    CategoryInfo,
    NetworkCompatibility,
    PaletteCategory,
    StepCategory,
    StepDoc,
    StepOption,
)
from flowcanvas.models.workflow import (
    EligibilityResult,
    Network,
    Workflow,
    WorkflowCreate,
    WorkflowDefinition,
    WorkflowSummary,
    WorkflowUpdate,
)

__all__ = [
    # Graph
    "Node",
    "NodeData",
    "Position",
    "Edge",
    "EdgeCreate",
    "EdgeReconnect",
    "WorkflowDefinition",
    # Stored workflows
    "Network",
    "Workflow",
    "WorkflowCreate",
    "WorkflowUpdate",
    "WorkflowSummary",
    "EligibilityResult",
    # Step metadata
    "StepCategory",
    "StepDoc",
    "StepOption",
    "CategoryInfo",
    "PaletteCategory",
    "NetworkCompatibility",
    # Editor
    "EditorView",
    "EditorSessionInfo",
    "TerminalAnchor",
    "NetworkWarning",
    "ReferenceOption",
    "ReferenceOptionsResponse",
    "AddStepRequest",
    "PatchNodeRequest",
]
