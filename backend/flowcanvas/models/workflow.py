"""Pydantic models for workflow definitions and their stored records."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError, model_validator
from pydantic import Field as PydanticField

from flowcanvas.models.edge import Edge
from flowcanvas.models.node import Node

logger = logging.getLogger(__name__)


class Network(str, Enum):
    """Execution networks a workflow can run against."""

    MAINNET = "mainnet"
    DEVNET = "devnet"


def _valid_items(raw: Any, model: type[BaseModel], kind: str) -> list[Any]:
    """Validate each entry of ``raw``, dropping the ones that don't parse."""
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning(f"Ignoring malformed {kind} collection of type {type(raw).__name__}")
        return []

    items = []
    for index, item in enumerate(raw):
        try:
            items.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Dropping malformed {kind} at index {index}: {e.error_count()} error(s)")
    return items


class WorkflowDefinition(BaseModel):
    """The portable ``{nodes, edges}`` graph exchanged with the execution backend.

    Missing or malformed collections become empty lists instead of failing
    validation, so a damaged stored definition still opens in the editor.
    """

    nodes: list[Node] = []
    edges: list[Edge] = []

    @model_validator(mode="before")
    @classmethod
    def sanitize(cls, data: Any) -> dict[str, Any]:
        if isinstance(data, BaseModel):
            data = data.model_dump()
        if not isinstance(data, dict):
            return {"nodes": [], "edges": []}
        return {
            "nodes": _valid_items(data.get("nodes"), Node, "node"),
            "edges": _valid_items(data.get("edges"), Edge, "edge"),
        }


class WorkflowCreate(BaseModel):
    """Request model for creating a workflow."""

    name: str
    network: Network = Network.MAINNET
    definition: WorkflowDefinition = PydanticField(default_factory=WorkflowDefinition)


class WorkflowUpdate(BaseModel):
    """Request model for updating a workflow (partial updates)."""

    name: str | None = None
    network: Network | None = None
    definition: WorkflowDefinition | None = None


class Workflow(BaseModel):
    """A stored workflow."""

    id: str
    name: str
    network: Network = Network.MAINNET
    definition: WorkflowDefinition = PydanticField(default_factory=WorkflowDefinition)
    created_at: str
    updated_at: str


class WorkflowSummary(BaseModel):
    """Summary of a workflow for listing."""

    id: str
    name: str
    network: Network
    node_count: int
    edge_count: int
    created_at: str
    updated_at: str


class EligibilityResult(BaseModel):
    """Whether a workflow can be switched on for automatic runs."""

    ok: bool
    reason: str | None = None
