"""EditorSession - One open editor for one workflow.

Wraps a GraphStore with the editor's higher-level gestures (add a step from
the palette, add after the last step, insert on an edge) and recomputes the
derived view after every mutation.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from flowcanvas.catalog.network import incompatible_types, network_warning
from flowcanvas.catalog.step_docs import default_step_data
from flowcanvas.models.editor import (
    EditorSessionInfo,
    EditorView,
    NetworkWarning,
    ReferenceOption,
    TerminalAnchor,
)
from flowcanvas.models.node import Node, NodeData, Position
from flowcanvas.models.workflow import Network, WorkflowDefinition
from flowcanvas.services.graph_store import GraphStore
from flowcanvas.services.reachability import analyze, is_trigger_type
from flowcanvas.services.references import build_reference_options

logger = logging.getLogger(__name__)

# Layout of newly added steps
NEW_STEP_X = 260
STEP_SPACING_Y = 120

SINGLE_TRIGGER_MESSAGE = "only one trigger node is allowed"


class EditorSession:
    """An editing session: the GraphStore of one workflow plus editor state.

    The session stages the latest definition on every change (``draft``) and
    tracks whether it differs from what was last saved (``dirty``).
    """

    def __init__(
        self,
        workflow_id: str,
        definition: WorkflowDefinition | None = None,
        network: Network = Network.MAINNET,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id or str(uuid.uuid4())
        self.workflow_id = workflow_id
        self.network = network
        self.created_at = datetime.now()
        self.last_activity = self.created_at
        self.dirty = False
        self.message: str | None = None

        self._draft = definition or WorkflowDefinition()
        self.store = GraphStore(self._draft, on_change=self._on_definition_change)

    @property
    def draft(self) -> WorkflowDefinition:
        """The definition staged for the next save."""
        return self._draft

    def _on_definition_change(self, definition: WorkflowDefinition) -> None:
        self._draft = definition
        self.dirty = True

    def touch(self) -> None:
        self.last_activity = datetime.now()
        self.message = None

    def mark_saved(self) -> None:
        self.dirty = False

    # ==================== Gestures ====================

    def add_step(self, step_type: str) -> Node | None:
        """Toolbar "add node": a new step below everything else, unconnected.

        Returns:
            The new node, or None if it would be a second trigger
        """
        if not self._trigger_allowed(step_type):
            return None

        nodes = self.store.nodes
        max_y = max((n.position.y for n in nodes), default=0)
        node = self._new_node(step_type, Position(x=NEW_STEP_X, y=max_y + STEP_SPACING_Y))
        return self.store.add_node(node)

    def add_step_after_terminal(self, step_type: str) -> Node | None:
        """Trailing "+": a new step connected below the last terminal node.

        Falls back to ``add_step`` when the graph has no terminal node.
        """
        anchor = analyze(self.store.nodes, self.store.edges).anchor
        if anchor is None:
            return self.add_step(step_type)
        if not self._trigger_allowed(step_type):
            return None

        position = Position(x=anchor.position.x, y=anchor.position.y + STEP_SPACING_Y)
        node = self.store.add_node(self._new_node(step_type, position))
        self.store.connect_or_toggle(anchor.id, node.id)
        return node

    def insert_step_on_edge(self, edge_id: str, step_type: str) -> Node | None:
        """Edge "+": split the edge with a new step and make room below it."""
        edge = self.store.get_edge(edge_id)
        if edge is None:
            logger.debug(f"insert_step_on_edge: unknown edge {edge_id}")
            return None
        if not self._trigger_allowed(step_type):
            return None

        target = self.store.get_node(edge.target)
        source = self.store.get_node(edge.source)
        if target is not None:
            position = target.position.model_copy()
            self.store.shift_nodes_below(target.id, STEP_SPACING_Y)
        elif source is not None:
            position = Position(x=source.position.x, y=source.position.y + STEP_SPACING_Y)
        else:
            position = Position()

        return self.store.insert_node_on_edge(edge_id, self._new_node(step_type, position))

    def patch_node(self, node_id: str, patch: dict[str, Any]) -> bool:
        """Side-panel form input; changing ``type`` goes through the trigger check."""
        step_type = patch.get("type")
        if isinstance(step_type, str) and not self._trigger_allowed(step_type, node_id):
            return False
        return self.store.set_node_field(node_id, patch)

    def move_node(self, node_id: str, position: Position) -> bool:
        """Canvas drag; positions decide terminal order and the trailing "+"."""
        return self.store.move_node(node_id, position)

    def change_step_type(self, node_id: str, step_type: str) -> bool:
        return self.patch_node(node_id, {"type": step_type})

    def delete_node(self, node_id: str) -> bool:
        return self.store.delete_node(node_id)

    # ==================== Derived views ====================

    def reference_options(self, node_id: str) -> list[ReferenceOption] | None:
        """Reference candidates for configuring ``node_id`` (None means free text)."""
        return build_reference_options(self.store.nodes, self.store.edges, node_id)

    def network_warnings(self) -> list[NetworkWarning]:
        nodes = self.store.nodes
        failing = set(incompatible_types([n.data.type for n in nodes], self.network))
        return [
            NetworkWarning(
                node_id=n.id,
                step_type=n.data.type,
                message=network_warning(n.data.type)
                or f"Step type '{n.data.type}' is not available on {self.network.value}.",
            )
            for n in nodes
            if n.data.type in failing
        ]

    def view(self) -> EditorView:
        """Recompute the derived view of the current graph."""
        nodes = self.store.nodes
        analysis = analyze(nodes, self.store.edges)
        anchor = analysis.anchor

        return EditorView(
            session_id=self.session_id,
            workflow_id=self.workflow_id,
            network=self.network,
            definition=self.store.to_definition(),
            reachable=[n.id for n in nodes if n.id in analysis.reachable],
            terminals=[n.id for n in analysis.terminals],
            anchor=(
                TerminalAnchor(node_id=anchor.id, position=anchor.position)
                if anchor
                else None
            ),
            warnings=self.network_warnings(),
            dirty=self.dirty,
            message=self.message,
        )

    def info(self) -> EditorSessionInfo:
        return EditorSessionInfo(
            session_id=self.session_id,
            workflow_id=self.workflow_id,
            created_at=self.created_at,
            last_activity=self.last_activity,
            node_count=len(self.store.nodes),
            dirty=self.dirty,
        )

    # ==================== Helpers ====================

    def _new_node(self, step_type: str, position: Position) -> Node:
        return Node(
            id=self.store.next_node_id(),
            position=position,
            data=NodeData.model_validate(default_step_data(step_type)),
        )

    def _trigger_allowed(self, step_type: str, node_id: str | None = None) -> bool:
        """At most one trigger; ``node_id`` is the node being retyped, if any."""
        self.message = None
        if not is_trigger_type(step_type):
            return True

        existing = [
            n for n in self.store.nodes if is_trigger_type(n.data.type) and n.id != node_id
        ]
        if existing:
            self.message = SINGLE_TRIGGER_MESSAGE
            logger.info(f"Refused second trigger in session {self.session_id}")
            return False
        return True
