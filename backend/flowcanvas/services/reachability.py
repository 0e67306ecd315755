"""Reachability and terminal-node analysis over a workflow graph.

Drives the trailing "add next step" affordance: the step is attached below
the last terminal node of the part of the graph reachable from the trigger.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from flowcanvas.models.edge import Edge
from flowcanvas.models.node import Node

logger = logging.getLogger(__name__)

TRIGGER_SUFFIX = "_trigger"


def is_trigger_type(step_type: str) -> bool:
    """Trigger step types are recognised by their ``_trigger`` suffix."""
    return step_type.endswith(TRIGGER_SUFFIX)


def find_trigger(nodes: Iterable[Node]) -> Node | None:
    """Get the trigger node; the first one in node order if there are several."""
    triggers = [n for n in nodes if is_trigger_type(n.data.type)]
    if len(triggers) > 1:
        logger.debug(f"Found {len(triggers)} trigger nodes, using {triggers[0].id}")
    return triggers[0] if triggers else None


def reachable_from(start_id: str, edges: Iterable[Edge]) -> set[str]:
    """Forward BFS from ``start_id``; the start node is included."""
    outgoing: dict[str, list[str]] = {}
    for edge in edges:
        outgoing.setdefault(edge.source, []).append(edge.target)

    visited = {start_id}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for nxt in outgoing.get(current, []):
            if nxt not in visited:
                visited.add(nxt)
                queue.append(nxt)
    return visited


@dataclass
class ReachabilityResult:
    """Nodes reachable from the trigger and the terminal nodes among them."""

    trigger_id: str | None = None
    reachable: set[str] = field(default_factory=set)
    terminals: list[Node] = field(default_factory=list)

    @property
    def anchor(self) -> Node | None:
        """The terminal the trailing "+" attaches to (last by y, then x)."""
        return self.terminals[-1] if self.terminals else None


def terminal_nodes(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    reachable: set[str],
) -> list[Node]:
    """Reachable nodes without outgoing edges inside the reachable subgraph.

    Sorted ascending by ``position.y``, then ``position.x``.
    """
    has_outgoing = {
        e.source for e in edges if e.source in reachable and e.target in reachable
    }
    terminals = [n for n in nodes if n.id in reachable and n.id not in has_outgoing]
    return sorted(terminals, key=lambda n: (n.position.y, n.position.x))


def analyze(nodes: list[Node], edges: list[Edge]) -> ReachabilityResult:
    """Compute the trigger-reachable set and its ordered terminal nodes.

    Without a trigger node every node counts as reachable.
    """
    if not nodes:
        return ReachabilityResult()

    node_ids = {n.id for n in nodes}
    trigger = find_trigger(nodes)
    if trigger is None:
        reachable = node_ids
    else:
        # Dangling edges may point at ids that are not nodes
        reachable = reachable_from(trigger.id, edges) & node_ids

    return ReachabilityResult(
        trigger_id=trigger.id if trigger else None,
        reachable=reachable,
        terminals=terminal_nodes(nodes, edges, reachable),
    )
