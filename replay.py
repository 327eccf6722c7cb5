"""
Step replay for pathtrace.

Turns a step trace into per-node and per-edge state changes for whatever
drives presentation. Replay is synchronous and has no notion of time; a
caller that wants pacing or cancellation does it between steps through
should_continue.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, Optional, Sequence, Tuple

from graph import Edge, Graph
from steps import (
    INFINITY,
    AlgorithmStep,
    AlgorithmStepType,
    CompleteStep,
    FinalizeNodeStep,
    RelaxEdgesStep,
    VisitNodeStep,
)

NO_PATH_MESSAGE = "No path found between selected nodes!"


@dataclass(frozen=True)
class NodeStateChange:
    node_id: Hashable
    is_current_node: bool = False
    is_visited: bool = False
    is_on_shortest_path: bool = False
    distance: float = INFINITY
    show_distance_label: bool = False
    trigger_distance_animation: bool = False


@dataclass(frozen=True)
class EdgeStateChange:
    edge_id: Hashable
    is_on_shortest_path: bool = False
    is_being_relaxed: bool = False
    direction_reversed: bool = False


class ReplayListener(ABC):
    """Receiver for replayed state changes."""

    @abstractmethod
    def on_node_state(self, change: NodeStateChange) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_edge_state(self, change: EdgeStateChange) -> None:
        raise NotImplementedError

    @abstractmethod
    def on_complete(
        self, path_found: bool, path: Sequence[Hashable], total_cost: float
    ) -> None:
        raise NotImplementedError

    def on_error(self, message: str) -> None:
        """Called before on_complete when no path exists. Default: ignore."""


def path_edges(graph: Graph, path: Sequence[Hashable]) -> Tuple[Edge, ...]:
    """
    Edges joining consecutive path nodes, either orientation.

    Among parallel edges the cheapest wins (first in snapshot order on a
    tie), which is the one the search would have relaxed through.
    """
    best: Dict[frozenset, Edge] = {}
    for edge in graph.edges():
        key = frozenset((edge.source_id, edge.target_id))
        current = best.get(key)
        if current is None or edge.weight < current.weight:
            best[key] = edge

    chosen = []
    for u, v in zip(path, path[1:]):
        edge = best.get(frozenset((u, v)))
        if edge is not None:
            chosen.append(edge)
    return tuple(chosen)


class StepReplayer:
    """
    Feed a step trace to a ReplayListener.

    If a graph is supplied, edges along the final path are reported too.
    """

    def __init__(self, listener: ReplayListener, graph: Optional[Graph] = None) -> None:
        self._listener = listener
        self._graph = graph

    def replay(
        self,
        steps: Iterable[AlgorithmStep],
        should_continue: Optional[Callable[[], bool]] = None,
    ) -> int:
        """
        Replay steps in order and return how many were processed.

        should_continue is polled before each step is pulled; once it
        returns False the trace is not iterated any further.
        """
        handlers = {
            AlgorithmStepType.INITIALIZE: self._initialize,
            AlgorithmStepType.VISIT_NODE: self._visit_node,
            AlgorithmStepType.RELAX_EDGES: self._relax_edges,
            AlgorithmStepType.FINALIZE_NODE: self._finalize_node,
            AlgorithmStepType.COMPLETE: self._complete,
        }

        processed = 0
        iterator = iter(steps)
        while should_continue is None or should_continue():
            step = next(iterator, None)
            if step is None:
                break
            handlers[step.step_type](step)
            processed += 1
        return processed

    # --- Per-step handlers ---------------------------------------------------

    def _initialize(self, step: AlgorithmStep) -> None:
        for node_id, distance in step.distances.items():
            self._listener.on_node_state(
                NodeStateChange(node_id, distance=distance, show_distance_label=True)
            )

    def _visit_node(self, step: VisitNodeStep) -> None:
        emit = self._listener.on_node_state
        emit(NodeStateChange(step.node_id, is_current_node=True))
        for node_id, distance in step.distances.items():
            emit(NodeStateChange(node_id, distance=distance))
        for node_id in step.finalized:
            emit(NodeStateChange(node_id, is_visited=True))

    def _relax_edges(self, step: RelaxEdgesStep) -> None:
        for record in step.relaxations:
            self._listener.on_edge_state(
                EdgeStateChange(
                    record.edge_id,
                    is_being_relaxed=True,
                    direction_reversed=record.is_reversed,
                )
            )
            self._listener.on_node_state(
                NodeStateChange(
                    record.neighbor_id,
                    distance=record.new_distance,
                    trigger_distance_animation=True,
                )
            )

    def _finalize_node(self, step: FinalizeNodeStep) -> None:
        emit = self._listener.on_node_state
        emit(NodeStateChange(step.node_id, is_visited=True))
        for node_id in step.finalized:
            emit(NodeStateChange(node_id, is_visited=True))

    def _complete(self, step: CompleteStep) -> None:
        if step.path_found and step.path:
            for node_id in step.path:
                self._listener.on_node_state(
                    NodeStateChange(node_id, is_on_shortest_path=True)
                )
            if self._graph is not None:
                for edge in path_edges(self._graph, step.path):
                    self._listener.on_edge_state(
                        EdgeStateChange(edge.id, is_on_shortest_path=True)
                    )
            self._listener.on_complete(True, step.path, step.total_cost)
        else:
            self._listener.on_error(NO_PATH_MESSAGE)
            self._listener.on_complete(False, (), INFINITY)
