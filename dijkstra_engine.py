"""
Heap-based DijkstraPathEngine implementation for pathtrace.

Uses Python's heapq with lazy deletion: a node may sit in the queue several
times, and only its first dequeue is acted on. Both public operations drive
the same per-call search state.
"""

from datetime import timedelta
from typing import Dict, Hashable, Iterator, List, Mapping, Set, Tuple
import heapq
import itertools
import logging
import math
import time

from adjacency import build_adjacency, other_endpoint
from algorithms import ShortestPathEngine
from graph import Edge, Graph
from steps import (
    INFINITY,
    AlgorithmStep,
    CompleteStep,
    EdgeRelaxation,
    FinalizeNodeStep,
    InitializeStep,
    PathResult,
    RelaxEdgesStep,
    StepTrace,
    VisitNodeStep,
    snapshot_distances,
)

logger = logging.getLogger(__name__)


def check_weight(edge: Edge) -> None:
    if not edge.weight >= 0:  # also rejects NaN
        raise ValueError(
            "Dijkstra's algorithm requires non-negative edge weights "
            f"(edge {edge.id!r} has weight {edge.weight})."
        )


def reconstruct_path(
    prev: Mapping[Hashable, Hashable], source_id: Hashable, destination_id: Hashable
) -> List[Hashable]:
    """
    Walk predecessors back from destination_id to source_id.

    Returns the path in source -> destination order, or an empty list if the
    chain breaks (or loops) before reaching the source.
    """
    stack: List[Hashable] = []
    current = destination_id
    while True:
        stack.append(current)
        if current == source_id:
            break
        if current not in prev or len(stack) > len(prev) + 1:
            logger.warning(
                "Predecessor chain from %r broke at %r before reaching %r",
                destination_id, current, source_id,
            )
            return []
        current = prev[current]

    stack.reverse()
    return stack


class _SearchState:
    """
    Working set for one search: adjacency, distances, predecessors,
    finalized set and queue. Created per call, never shared.
    """

    def __init__(self, graph: Graph, source_id: Hashable) -> None:
        self.source_id = source_id
        self.adjacency = build_adjacency(graph)
        # every edge is listed twice, self-loops included
        self.edge_count = sum(len(edges) for edges in self.adjacency.values()) // 2
        self.dist: Dict[Hashable, float] = {node.id: INFINITY for node in graph.nodes()}
        self.dist[source_id] = 0.0
        self.prev: Dict[Hashable, Hashable] = {}
        self.finalized: Set[Hashable] = set()
        # (distance, insertion order, node id); the counter keeps equal
        # distances FIFO and means node ids are never compared.
        self._pq: List[Tuple[float, int, Hashable]] = []
        self._counter = itertools.count()
        self._push(0.0, source_id)

    def _push(self, distance: float, node_id: Hashable) -> None:
        heapq.heappush(self._pq, (distance, next(self._counter), node_id))

    def dequeue_order(self) -> Iterator[Hashable]:
        """
        Yield nodes in the order they are first dequeued.

        Stale entries for already finalized nodes are skipped. The caller is
        expected to finalize each yielded node before asking for the next.
        """
        while self._pq:
            _, _, node_id = heapq.heappop(self._pq)
            if node_id in self.finalized:
                continue
            yield node_id

    def finalize(self, node_id: Hashable) -> None:
        self.finalized.add(node_id)

    def relax(self, current: Hashable) -> List[EdgeRelaxation]:
        """
        Relax every edge from current to an unfinalized neighbour.

        Every incident edge has its weight checked, including edges whose
        far end is already settled. Edges to ids outside the node table are
        ignored.
        """
        records: List[EdgeRelaxation] = []
        d_u = self.dist[current]

        for edge in self.adjacency.get(current, ()):
            check_weight(edge)
            neighbor = other_endpoint(edge, current)
            if neighbor in self.finalized or neighbor not in self.dist:
                continue

            alt = d_u + edge.weight
            improved = alt < self.dist[neighbor]
            if improved:
                self.dist[neighbor] = alt
                self.prev[neighbor] = current
                self._push(alt, neighbor)

            records.append(
                EdgeRelaxation(
                    edge_id=edge.id,
                    neighbor_id=neighbor,
                    new_distance=self.dist[neighbor],
                    is_reversed=edge.target_id == current,
                    improved=improved,
                )
            )

        return records

    def outcome(self, destination_id: Hashable) -> Tuple[bool, List[Hashable], float]:
        """Return (path_found, path, total_cost) for destination_id."""
        cost = self.dist.get(destination_id, INFINITY)
        if destination_id not in self.finalized or math.isinf(cost):
            return False, [], INFINITY

        path = reconstruct_path(self.prev, self.source_id, destination_id)
        if not path:
            return False, [], INFINITY
        return True, path, cost


def _has_endpoints(graph: Graph, source_id: Hashable, destination_id: Hashable) -> bool:
    return graph.has_node(source_id) and graph.has_node(destination_id)


def _require_graph(graph: Graph) -> None:
    if graph is None:
        raise TypeError("graph must not be None")


class DijkstraPathEngine(ShortestPathEngine):
    """
    Single-pair Dijkstra over an undirected snapshot, stopping as soon as
    the destination is settled.

    Complexity:
        O(E log E) over the part of the graph explored before the
        destination is reached.
    """

    def calculate_path(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> PathResult:
        _require_graph(graph)
        if not _has_endpoints(graph, source_id, destination_id):
            return PathResult()

        start = time.perf_counter()
        state = _SearchState(graph, source_id)
        logger.debug(
            "Searching %r -> %r over %d nodes, %d edges",
            source_id, destination_id, len(state.dist), state.edge_count,
        )

        for current in state.dequeue_order():
            state.finalize(current)
            if current == destination_id:
                logger.debug("Reached %r after settling %d nodes", current, len(state.finalized))
                break
            state.relax(current)

        path_found, path, cost = state.outcome(destination_id)
        elapsed = timedelta(seconds=time.perf_counter() - start)
        return PathResult(
            path_found=path_found, node_path=path, total_cost=cost, elapsed=elapsed
        )

    def stream_steps(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> StepTrace:
        _require_graph(graph)
        return StepTrace(lambda: self._generate_steps(graph, source_id, destination_id))

    def _generate_steps(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> Iterator[AlgorithmStep]:
        if not _has_endpoints(graph, source_id, destination_id):
            return

        state = _SearchState(graph, source_id)
        yield InitializeStep(distances=snapshot_distances(state.dist))

        for current in state.dequeue_order():
            yield VisitNodeStep(
                distances=snapshot_distances(state.dist),
                node_id=current,
                finalized=frozenset(state.finalized),
            )
            state.finalize(current)

            if current != destination_id:
                relaxations = state.relax(current)
                if relaxations:
                    yield RelaxEdgesStep(
                        distances=snapshot_distances(state.dist),
                        node_id=current,
                        relaxations=tuple(relaxations),
                        finalized=frozenset(state.finalized),
                    )

            yield FinalizeNodeStep(
                distances=snapshot_distances(state.dist),
                node_id=current,
                finalized=frozenset(state.finalized),
            )
            if current == destination_id:
                break
        else:
            logger.debug("Queue exhausted without settling %r", destination_id)

        path_found, path, cost = state.outcome(destination_id)
        yield CompleteStep(
            distances=snapshot_distances(state.dist),
            path_found=path_found,
            path=tuple(path),
            total_cost=cost,
            finalized=frozenset(state.finalized),
        )
