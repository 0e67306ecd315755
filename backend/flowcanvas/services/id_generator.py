"""Id assignment for nodes and edges of a workflow graph."""

from collections.abc import Collection


class IdGenerator:
    """Hands out ids that don't collide with the ones already in use.

    Node ids follow the editor's ``n1, n2, ...`` convention and always take
    the lowest free number. Edge ids are ``e-<source>-<target>``, suffixed
    with a counter if that id is taken.
    """

    def __init__(self, node_prefix: str = "n", edge_prefix: str = "e") -> None:
        self._node_prefix = node_prefix
        self._edge_prefix = edge_prefix

    def node_id(self, used: Collection[str]) -> str:
        i = 1
        while f"{self._node_prefix}{i}" in used:
            i += 1
        return f"{self._node_prefix}{i}"

    def edge_id(self, source: str, target: str, used: Collection[str]) -> str:
        base = f"{self._edge_prefix}-{source}-{target}"
        if base not in used:
            return base
        i = 2
        while f"{base}-{i}" in used:
            i += 1
        return f"{base}-{i}"
