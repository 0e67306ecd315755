"""Ancestor resolution: which steps a given step may reference.

A step may only reference outputs of steps upstream of it, i.e. nodes from
which it can be reached by following edges forward. Whether a branch
actually ran is the execution engine's concern, not this one's.
"""

from collections import deque
from collections.abc import Iterable

from flowcanvas.models.edge import Edge
from flowcanvas.models.node import Node


def _backward_bfs(edges: Iterable[Edge], start_id: str) -> list[str]:
    incoming: dict[str, list[str]] = {}
    for edge in edges:
        incoming.setdefault(edge.target, []).append(edge.source)

    seen = {start_id}
    order: list[str] = []
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for source in incoming.get(current, []):
            if source not in seen:
                seen.add(source)
                order.append(source)
                queue.append(source)
    return order


def resolve_ancestors(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    target_node_id: str,
) -> list[str]:
    """Ids of every node upstream of ``target_node_id``.

    Returns:
        Ancestor ids in BFS order, never including the target itself
    """
    node_ids = {n.id for n in nodes}
    return [i for i in _backward_bfs(edges, target_node_id) if i in node_ids]


def ancestor_nodes(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    target_node_id: str,
) -> list[Node]:
    """Ancestor nodes of ``target_node_id`` in BFS order."""
    by_id: dict[str, Node] = {}
    for node in nodes:
        by_id.setdefault(node.id, node)
    return [by_id[i] for i in resolve_ancestors(by_id.values(), edges, target_node_id)]
