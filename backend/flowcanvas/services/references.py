"""Builds the output-reference expressions offered when configuring a step."""

from collections.abc import Iterable

from flowcanvas.catalog.step_docs import output_fields
from flowcanvas.models.edge import Edge
from flowcanvas.models.editor import ReferenceOption
from flowcanvas.models.node import Node
from flowcanvas.services.ancestors import ancestor_nodes


def output_expression(node_id: str, field: str | None = None) -> str:
    """``nodes.<id>.output`` or ``nodes.<id>.output.<field>``."""
    expression = f"nodes.{node_id}.output"
    return f"{expression}.{field}" if field else expression


def wrap_expression(expression: str) -> str:
    """Wrap an expression in the ``{{ }}`` delimiter used inside text fields."""
    return "{{" + expression + "}}"


def _option(node_id: str, group: str, field: str | None = None) -> ReferenceOption:
    expression = output_expression(node_id, field)
    return ReferenceOption(
        label=f"{group} → {field or 'full output'}",
        expression=expression,
        template=wrap_expression(expression),
        group=group,
    )


def build_reference_options(
    nodes: Iterable[Node],
    edges: Iterable[Edge],
    target_node_id: str,
) -> list[ReferenceOption] | None:
    """Selectable references to the outputs of every ancestor of a node.

    Each ancestor contributes a "full output" option followed by one option
    per documented output field of its step type.

    Returns:
        The options, or None when the node has no ancestors and the field
        must fall back to free-text entry
    """
    ancestors = ancestor_nodes(nodes, edges, target_node_id)
    if not ancestors:
        return None

    options: list[ReferenceOption] = []
    for node in ancestors:
        group = node.data.label or node.id
        options.append(_option(node.id, group))
        for field in output_fields(node.data.type):
            options.append(_option(node.id, group, field))
    return options
