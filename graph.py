"""
Undirected, weighted graph abstraction for pathtrace.

A Graph is a read-only snapshot of nodes and edges. Edge endpoints are
labelled source/target for bookkeeping, but traversal is bidirectional.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Hashable, Iterable

from nodes import Node


@dataclass(frozen=True)
class Edge:
    """
    Weighted edge between two node ids.

    Weights must be non-negative. The engine checks this when it examines
    the edge, not at construction.
    """
    id: Hashable
    source_id: Hashable
    target_id: Hashable
    weight: float
    name: str = ""


class Graph(ABC):
    """Read-only node/edge snapshot consumed by the path engine."""

    @abstractmethod
    def nodes(self) -> Iterable[Node]:
        """Return all nodes in the snapshot."""
        raise NotImplementedError

    @abstractmethod
    def edges(self) -> Iterable[Edge]:
        """Return all edges in the snapshot."""
        raise NotImplementedError

    def has_node(self, node_id: Hashable) -> bool:
        return any(node.id == node_id for node in self.nodes())
