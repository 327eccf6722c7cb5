"""
Adjacency index construction for pathtrace.
"""

from typing import Dict, Hashable, List

from graph import Edge, Graph


def build_adjacency(graph: Graph) -> Dict[Hashable, List[Edge]]:
    """
    Map each node id to the edges incident to it.

    Every edge is listed under both endpoints, so traversal works from
    either side. Parallel edges are kept, and a self-loop is listed twice
    under its single node. Nodes with no edges are absent from the result.
    """
    adjacency: Dict[Hashable, List[Edge]] = {}
    for edge in graph.edges():
        adjacency.setdefault(edge.source_id, []).append(edge)
        adjacency.setdefault(edge.target_id, []).append(edge)
    return adjacency


def other_endpoint(edge: Edge, node_id: Hashable) -> Hashable:
    """Return the endpoint of edge that is not node_id (node_id for a self-loop)."""
    return edge.target_id if edge.source_id == node_id else edge.source_id
