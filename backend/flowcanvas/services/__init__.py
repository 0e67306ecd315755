"""Services for Flow Canvas."""

from flowcanvas.services.ancestors import ancestor_nodes, resolve_ancestors
from flowcanvas.services.editor import EditorSession
from flowcanvas.services.editor_sessions import EditorSessionManager, get_session_manager
from flowcanvas.services.eligibility import check_enable_eligibility
from flowcanvas.services.graph_store import GraphStore
from flowcanvas.services.id_generator import IdGenerator
from flowcanvas.services.reachability import ReachabilityResult, analyze, find_trigger
from flowcanvas.services.references import (
    build_reference_options,
    output_expression,
    wrap_expression,
)

__all__ = [
    "EditorSession",
    "EditorSessionManager",
    "GraphStore",
    "IdGenerator",
    "ReachabilityResult",
    "analyze",
    "ancestor_nodes",
    "build_reference_options",
    "check_enable_eligibility",
    "find_trigger",
    "get_session_manager",
    "output_expression",
    "resolve_ancestors",
    "wrap_expression",
]
