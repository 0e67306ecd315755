"""Pydantic models for edges between workflow steps."""

from pydantic import BaseModel


class Edge(BaseModel):
    """A directed edge: ``target`` may run after ``source`` completes."""

    id: str
    source: str
    target: str

    model_config = {"extra": "allow"}

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id


class EdgeCreate(BaseModel):
    """Request model for the connect/disconnect gesture."""

    source: str
    target: str


class EdgeReconnect(BaseModel):
    """Request model for dragging an existing edge endpoint.

    Leaving both endpoints empty means the drag was released over empty
    canvas.
    """

    source: str | None = None
    target: str | None = None
