"""Builders for graph fixtures used across the test suite."""

from flowcanvas.models import Edge, Node, NodeData, Position


def make_node(node_id: str, step_type: str = "log", x: float = 0, y: float = 0, **config) -> Node:
    """Build a node with the given step type and position."""
    return Node(
        id=node_id,
        position=Position(x=x, y=y),
        data=NodeData(type=step_type, label=node_id, **config),
    )


def make_edge(source: str, target: str) -> Edge:
    return Edge(id=f"e-{source}-{target}", source=source, target=target)


def edge_pairs(edges: list[Edge]) -> set[tuple[str, str]]:
    return {(e.source, e.target) for e in edges}
