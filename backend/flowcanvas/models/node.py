"""Pydantic models for workflow steps (nodes)."""

from typing import Any

from pydantic import BaseModel, Field


class Position(BaseModel):
    """Layout coordinate of a node on the canvas.

    Positions only matter for layout and for ordering terminal nodes; the
    graph algorithms never look at them otherwise.
    """

    x: float = 0
    y: float = 0


class NodeData(BaseModel):
    """Step configuration carried by a node.

    ``type`` and ``label`` are always present. Every other key is
    step-specific configuration (``intervalSeconds``, ``url``, ...) and is
    kept verbatim.
    """

    type: str = ""
    label: str = ""

    model_config = {"extra": "allow"}


class Node(BaseModel):
    """A step in the workflow graph."""

    id: str
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)

    model_config = {"extra": "allow"}

    @property
    def step_type(self) -> str:
        return self.data.type

    def with_data(self, patch: dict[str, Any]) -> "Node":
        """Return a copy with ``patch`` merged into ``data``."""
        merged = {**self.data.model_dump(), **patch}
        return self.model_copy(update={"data": NodeData.model_validate(merged)})

    def moved_by(self, delta_x: float = 0, delta_y: float = 0) -> "Node":
        """Return a copy shifted by the given offsets."""
        position = Position(x=self.position.x + delta_x, y=self.position.y + delta_y)
        return self.model_copy(update={"position": position})
