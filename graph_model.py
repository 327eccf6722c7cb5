"""
Concrete list-backed graph snapshot for pathtrace.
"""

from typing import Dict, Hashable, Iterable, List, Optional

from graph import Edge, Graph
from nodes import Node


class GraphModel(Graph):
    """
    Graph backed by an id -> Node mapping plus an ordered edge list.

    Edge order is preserved so adjacency lists, and therefore step traces,
    are deterministic for a given snapshot.
    """

    def __init__(
        self,
        nodes: Iterable[Node] = (),
        edges: Iterable[Edge] = (),
    ) -> None:
        self._nodes: Dict[Hashable, Node] = {}
        self._edges: List[Edge] = []
        for node in nodes:
            self.add_node(node)
        for edge in edges:
            self.add_edge(edge)

    # --- Mutation API (test/sim only, not part of Graph interface) -----------

    def add_node(self, node: Node) -> None:
        """Add or replace a node by id."""
        self._nodes[node.id] = node

    def add_edge(self, edge: Edge) -> None:
        """
        Append an edge as-is.

        No dedup and no endpoint checks: parallel edges, self-loops and
        dangling endpoints are all legal in a snapshot.
        """
        self._edges.append(edge)

    def get_node(self, node_id: Hashable) -> Optional[Node]:
        return self._nodes.get(node_id)

    # --- Graph interface -----------------------------------------------------

    def nodes(self) -> Iterable[Node]:
        return list(self._nodes.values())

    def edges(self) -> Iterable[Edge]:
        return list(self._edges)  # defensive copy

    def has_node(self, node_id: Hashable) -> bool:
        return node_id in self._nodes
