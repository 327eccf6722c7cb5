"""
Algorithm interfaces for pathtrace.

Keeps the search itself separate from graph storage and from whatever
consumes the step trace.
"""

from abc import ABC, abstractmethod
from typing import Hashable

from graph import Graph
from steps import PathResult, StepTrace


class ShortestPathEngine(ABC):
    """
    Interface for single-pair shortest-path computation with a step trace.
    """

    @abstractmethod
    def calculate_path(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> PathResult:
        """
        Compute the cheapest path from source_id to destination_id.

        Missing endpoints or an unreachable destination give a result with
        path_found=False; they are not errors.
        """
        raise NotImplementedError

    @abstractmethod
    def stream_steps(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> StepTrace:
        """
        Return the ordered step trace for the same search.

        The trace ends in exactly one COMPLETE step unless an endpoint is
        missing, in which case it is empty.
        """
        raise NotImplementedError

    def get_visualization_steps(
        self, graph: Graph, source_id: Hashable, destination_id: Hashable
    ) -> StepTrace:
        """Alias of stream_steps."""
        return self.stream_steps(graph, source_id, destination_id)
