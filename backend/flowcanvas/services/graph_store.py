"""GraphStore - In-memory node/edge model of the workflow being edited.

The store owns the authoritative node and edge lists of one workflow and
exposes the mutations the editor's gestures map to. Every mutation is
synchronous and leaves the graph structurally valid:

- every edge endpoint refers to an existing node,
- there is at most one edge per ordered (source, target) pair,
- no edge connects a node to itself.

Seed edges that break these rules are dropped when the store is created.
Stale ids (a gesture that started before the node or edge went away) and
patches that don't validate turn the operation into a no-op instead of
raising. After each applied mutation
the full definition is handed to the change listener so the owner can stage
it for saving.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pydantic import ValidationError

from flowcanvas.models.edge import Edge
from flowcanvas.models.node import Node, Position
from flowcanvas.models.workflow import WorkflowDefinition
from flowcanvas.services.id_generator import IdGenerator

logger = logging.getLogger(__name__)

ChangeListener = Callable[[WorkflowDefinition], None]


class GraphStore:
    """Owns the node/edge lists of one workflow and keeps them consistent.

    Example:
        store = GraphStore(definition, on_change=stage_for_save)
        store.connect_or_toggle("n1", "n2")
        store.insert_node_on_edge("e-n1-n2", Node(id="n3", ...))
    """

    def __init__(
        self,
        definition: WorkflowDefinition | None = None,
        on_change: ChangeListener | None = None,
        id_generator: IdGenerator | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            definition: Persisted definition to seed from (empty graph if None)
            on_change: Called with the full definition after every mutation
            id_generator: Assigns ids to new edges and to colliding nodes
        """
        definition = definition or WorkflowDefinition()
        self._nodes: list[Node] = [n.model_copy(deep=True) for n in definition.nodes]
        self._edges: list[Edge] = self._seed_edges(definition.edges)
        self._on_change = on_change
        self._ids = id_generator or IdGenerator()

    def _seed_edges(self, edges: list[Edge]) -> list[Edge]:
        """Copy seed edges, dropping the ones that break the graph invariants."""
        node_ids = {n.id for n in self._nodes}
        pairs: set[tuple[str, str]] = set()
        kept: list[Edge] = []
        for edge in edges:
            if edge.source not in node_ids or edge.target not in node_ids:
                logger.warning(f"Dropping edge {edge.id}: endpoint is not a node")
                continue
            if edge.source == edge.target:
                logger.warning(f"Dropping edge {edge.id}: self-loop on {edge.source}")
                continue
            if (edge.source, edge.target) in pairs:
                logger.warning(
                    f"Dropping edge {edge.id}: duplicate of {edge.source} -> {edge.target}"
                )
                continue
            pairs.add((edge.source, edge.target))
            kept.append(edge.model_copy(deep=True))
        return kept

    # ==================== Reads ====================

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    @property
    def is_empty(self) -> bool:
        return not self._nodes and not self._edges

    def get_node(self, node_id: str) -> Node | None:
        return next((n for n in self._nodes if n.id == node_id), None)

    def get_edge(self, edge_id: str) -> Edge | None:
        return next((e for e in self._edges if e.id == edge_id), None)

    def find_edge(self, source: str, target: str) -> Edge | None:
        """Get the edge for an ordered (source, target) pair, if any."""
        return next(
            (e for e in self._edges if e.source == source and e.target == target),
            None,
        )

    def next_node_id(self) -> str:
        """A node id not used by any node in the graph."""
        return self._ids.node_id({n.id for n in self._nodes})

    def to_definition(self) -> WorkflowDefinition:
        """Snapshot the current graph as a portable definition."""
        return WorkflowDefinition(
            nodes=[n.model_copy(deep=True) for n in self._nodes],
            edges=[e.model_copy(deep=True) for e in self._edges],
        )

    # ==================== Mutations ====================

    def set_node_field(self, node_id: str, patch: dict) -> bool:
        """Merge ``patch`` into a node's data.

        A patch whose values don't fit the node's data (``label=None``,
        ``type=5``) is ignored.

        Returns:
            True if the node exists and was updated
        """
        index = self._node_index(node_id)
        if index is None:
            logger.debug(f"set_node_field: unknown node {node_id}")
            return False

        try:
            updated = self._nodes[index].with_data(patch)
        except ValidationError as e:
            logger.debug(f"set_node_field: invalid patch for {node_id}: {e.error_count()} error(s)")
            return False

        self._nodes[index] = updated
        self._notify()
        return True

    def move_node(self, node_id: str, position: Position) -> bool:
        """Place a node at ``position`` (a drag on the canvas).

        Returns:
            True if the node exists and its position changed
        """
        index = self._node_index(node_id)
        if index is None:
            logger.debug(f"move_node: unknown node {node_id}")
            return False

        node = self._nodes[index]
        if node.position == position:
            return False

        self._nodes[index] = node.model_copy(update={"position": position.model_copy()})
        self._notify()
        return True

    def add_node(self, node: Node) -> Node:
        """Append a node, reassigning its id if it is already taken.

        Returns:
            The node as stored (check its id; it may differ from the input)
        """
        node = self._with_free_id(node)
        self._nodes.append(node)
        self._notify()
        return node

    def delete_node(self, node_id: str) -> bool:
        """Remove a node together with every edge that touches it."""
        if self._node_index(node_id) is None:
            logger.debug(f"delete_node: unknown node {node_id}")
            return False

        self._nodes = [n for n in self._nodes if n.id != node_id]
        self._edges = [e for e in self._edges if not e.touches(node_id)]
        self._notify()
        return True

    def connect_or_toggle(self, source: str, target: str) -> Edge | None:
        """Connect ``source`` to ``target``, or disconnect them if already connected.

        Self-loops and unknown endpoints are ignored.

        Returns:
            The new edge, or None when an edge was removed or nothing changed
        """
        if source == target:
            logger.debug(f"connect_or_toggle: refusing self-loop on {source}")
            return None
        if self._node_index(source) is None or self._node_index(target) is None:
            logger.debug(f"connect_or_toggle: unknown endpoint {source} -> {target}")
            return None

        existing = self.find_edge(source, target)
        if existing is not None:
            self._edges.remove(existing)
            self._notify()
            return None

        edge = self._new_edge(source, target)
        self._edges.append(edge)
        self._notify()
        return edge

    def reconnect_edge(
        self,
        old_edge_id: str,
        new_source: str | None = None,
        new_target: str | None = None,
    ) -> Edge | None:
        """Re-point one or both endpoints of an existing edge.

        - No new endpoint at all (dropped over empty canvas): the edge is removed.
        - The new pair collides with another edge: both edges are removed.
        - The new pair is a self-loop: the edge is removed.

        Returns:
            The re-pointed edge, or None if it was removed or nothing changed
        """
        edge = self.get_edge(old_edge_id)
        if edge is None:
            logger.debug(f"reconnect_edge: unknown edge {old_edge_id}")
            return None

        if new_source is None and new_target is None:
            self._edges.remove(edge)
            self._notify()
            return None

        source = new_source if new_source is not None else edge.source
        target = new_target if new_target is not None else edge.target
        if self._node_index(source) is None or self._node_index(target) is None:
            logger.debug(f"reconnect_edge: unknown endpoint {source} -> {target}")
            return None

        if source == target:
            self._edges.remove(edge)
            self._notify()
            return None

        collision = next(
            (
                e
                for e in self._edges
                if e.id != edge.id and e.source == source and e.target == target
            ),
            None,
        )
        if collision is not None:
            self._edges = [e for e in self._edges if e.id not in (edge.id, collision.id)]
            self._notify()
            return None

        updated = edge.model_copy(update={"source": source, "target": target})
        self._edges[self._edges.index(edge)] = updated
        self._notify()
        return updated

    def insert_node_on_edge(self, edge_id: str, new_node: Node) -> Node | None:
        """Split an edge ``s -> t`` into ``s -> new_node -> t``.

        Returns:
            The inserted node as stored, or None if the edge doesn't exist
        """
        edge = self.get_edge(edge_id)
        if edge is None:
            logger.debug(f"insert_node_on_edge: unknown edge {edge_id}")
            return None

        node = self._with_free_id(new_node)
        self._edges.remove(edge)
        self._nodes.append(node)
        self._edges.append(self._new_edge(edge.source, node.id))
        self._edges.append(self._new_edge(node.id, edge.target))
        self._notify()
        return node

    def shift_nodes_below(self, anchor_node_id: str, delta_y: float) -> int:
        """Move every node at or below the anchor's y down by ``delta_y``.

        Layout only; edges are untouched.

        Returns:
            Number of nodes moved
        """
        anchor = self.get_node(anchor_node_id)
        if anchor is None:
            logger.debug(f"shift_nodes_below: unknown node {anchor_node_id}")
            return 0

        anchor_y = anchor.position.y
        moved = 0
        for index, node in enumerate(self._nodes):
            if node.position.y >= anchor_y:
                self._nodes[index] = node.moved_by(delta_y=delta_y)
                moved += 1

        self._notify()
        return moved

    # ==================== Helpers ====================

    def _node_index(self, node_id: str) -> int | None:
        for index, node in enumerate(self._nodes):
            if node.id == node_id:
                return index
        return None

    def _with_free_id(self, node: Node) -> Node:
        used = {n.id for n in self._nodes}
        if node.id not in used:
            return node
        new_id = self._ids.node_id(used)
        logger.info(f"Node id {node.id} already in use, assigned {new_id}")
        return node.model_copy(update={"id": new_id})

    def _new_edge(self, source: str, target: str) -> Edge:
        used = {e.id for e in self._edges}
        return Edge(id=self._ids.edge_id(source, target, used), source=source, target=target)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.to_definition())
