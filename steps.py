"""
Step-trace and result records for pathtrace.

Steps are immutable snapshots: every mapping or set they carry is copied at
construction time, so later progress of the search never shows up in a step
that has already been handed to a consumer.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import (
    Callable,
    ClassVar,
    FrozenSet,
    Hashable,
    Iterable,
    Iterator,
    List,
    Mapping,
    Tuple,
)
import math

INFINITY = math.inf


class AlgorithmStepType(Enum):
    """
    Kind of state transition recorded in a trace.

    INITIALIZE: distances set up (0 for the source, infinity elsewhere).
    VISIT_NODE: a node is dequeued for the first time.
    RELAX_EDGES: edges to unfinalized neighbours of that node were examined.
    FINALIZE_NODE: the node's distance is settled.
    COMPLETE: terminal step carrying the outcome.
    """

    INITIALIZE = "initialize"
    VISIT_NODE = "visit_node"
    RELAX_EDGES = "relax_edges"
    FINALIZE_NODE = "finalize_node"
    COMPLETE = "complete"


def snapshot_distances(distances: Mapping[Hashable, float]) -> Mapping[Hashable, float]:
    """Read-only copy of a distance table."""
    return MappingProxyType(dict(distances))


@dataclass(frozen=True)
class EdgeRelaxation:
    """
    One edge examined while relaxing from the current node.

    new_distance is the neighbour's distance after the check, whether or not
    it improved. is_reversed is True when the current node is the edge's
    stored target, i.e. traversal runs target -> source.
    """
    edge_id: Hashable
    neighbor_id: Hashable
    new_distance: float
    is_reversed: bool
    improved: bool


@dataclass(frozen=True)
class AlgorithmStep:
    """Base record; every step carries the distance table as it stood."""

    step_type: ClassVar[AlgorithmStepType]

    distances: Mapping[Hashable, float]


@dataclass(frozen=True)
class InitializeStep(AlgorithmStep):
    step_type: ClassVar[AlgorithmStepType] = AlgorithmStepType.INITIALIZE


@dataclass(frozen=True)
class VisitNodeStep(AlgorithmStep):
    """The finalized snapshot does not yet include node_id."""

    step_type: ClassVar[AlgorithmStepType] = AlgorithmStepType.VISIT_NODE

    node_id: Hashable
    finalized: FrozenSet[Hashable]


@dataclass(frozen=True)
class RelaxEdgesStep(AlgorithmStep):
    step_type: ClassVar[AlgorithmStepType] = AlgorithmStepType.RELAX_EDGES

    node_id: Hashable
    relaxations: Tuple[EdgeRelaxation, ...]
    finalized: FrozenSet[Hashable]


@dataclass(frozen=True)
class FinalizeNodeStep(AlgorithmStep):
    step_type: ClassVar[AlgorithmStepType] = AlgorithmStepType.FINALIZE_NODE

    node_id: Hashable
    finalized: FrozenSet[Hashable]


@dataclass(frozen=True)
class CompleteStep(AlgorithmStep):
    step_type: ClassVar[AlgorithmStepType] = AlgorithmStepType.COMPLETE

    path_found: bool
    path: Tuple[Hashable, ...]
    total_cost: float
    finalized: FrozenSet[Hashable]


@dataclass
class PathResult:
    """
    One-shot answer from calculate_path.

    elapsed is diagnostic only. A not-found result has an empty path and an
    infinite cost.
    """
    path_found: bool = False
    node_path: List[Hashable] = field(default_factory=list)
    total_cost: float = INFINITY
    elapsed: timedelta = field(default_factory=timedelta)


class StepTrace(Iterable[AlgorithmStep]):
    """
    Lazily produced step sequence.

    Each call to iter() starts a fresh run of the search; nothing is cached
    between iterations, and steps are only computed as the consumer pulls
    them.
    """

    def __init__(self, factory: Callable[[], Iterator[AlgorithmStep]]) -> None:
        self._factory = factory

    def __iter__(self) -> Iterator[AlgorithmStep]:
        return self._factory()
