"""
Unit tests for DijkstraPathEngine.calculate_path.
"""

from datetime import timedelta
import logging
import math

import pytest

from dijkstra_engine import DijkstraPathEngine, reconstruct_path
from graph import Edge
from graph_model import GraphModel
from nodes import Node


def _graph(node_ids, edges=()):
    g = GraphModel()
    for node_id in node_ids:
        g.add_node(Node(node_id, name=str(node_id)))
    for i, (src, dst, weight) in enumerate(edges):
        g.add_edge(Edge(f"e{i}", src, dst, weight, name=f"{src}->{dst}"))
    return g


def _path_cost(g, path):
    weights = {}
    for e in g.edges():
        key = frozenset((e.source_id, e.target_id))
        weights[key] = min(weights.get(key, math.inf), e.weight)
    return sum(weights[frozenset(pair)] for pair in zip(path, path[1:]))


def test_linear_graph():
    g = _graph("ABC", [("A", "B", 2.0), ("B", "C", 3.0)])

    result = DijkstraPathEngine().calculate_path(g, "A", "C")

    assert result.path_found
    assert result.total_cost == 5.0
    assert result.node_path == ["A", "B", "C"]
    assert isinstance(result.elapsed, timedelta)


def test_disconnected_graph_has_no_path():
    g = _graph("AB")

    result = DijkstraPathEngine().calculate_path(g, "A", "B")

    assert not result.path_found
    assert result.total_cost == math.inf
    assert result.node_path == []


def test_prefers_cheaper_path_over_shorter_one():
    g = _graph("ABC", [("A", "C", 10.0), ("A", "B", 1.0), ("B", "C", 1.0)])

    result = DijkstraPathEngine().calculate_path(g, "A", "C")

    assert result.path_found
    assert result.total_cost == 2.0
    assert result.node_path == ["A", "B", "C"]


def test_source_equals_destination():
    g = _graph(["Solo"])

    result = DijkstraPathEngine().calculate_path(g, "Solo", "Solo")

    assert result.path_found
    assert result.total_cost == 0.0
    assert result.node_path == ["Solo"]


def test_edges_traversed_against_stored_direction():
    # Edges stored C->B and B->A; the search must still walk A->B->C.
    g = _graph("ABC", [("C", "B", 4.0), ("B", "A", 1.5)])

    result = DijkstraPathEngine().calculate_path(g, "A", "C")

    assert result.node_path == ["A", "B", "C"]
    assert result.total_cost == 5.5


@pytest.mark.parametrize("source, dest", [("A", "Z"), ("Z", "A"), ("Y", "Z")])
def test_missing_endpoint_is_not_found(source, dest):
    g = _graph("AB", [("A", "B", 1.0)])

    result = DijkstraPathEngine().calculate_path(g, source, dest)

    assert not result.path_found
    assert result.total_cost == math.inf
    assert result.node_path == []
    assert result.elapsed == timedelta(0)


def test_empty_graph_is_not_found():
    result = DijkstraPathEngine().calculate_path(GraphModel(), "A", "B")

    assert result is not None
    assert not result.path_found


def test_none_graph_raises():
    with pytest.raises(TypeError):
        DijkstraPathEngine().calculate_path(None, "A", "B")


def test_negative_weight_raises():
    g = _graph("ABC", [("A", "B", 1.0), ("B", "C", -2.0)])

    with pytest.raises(ValueError, match="non-negative"):
        DijkstraPathEngine().calculate_path(g, "A", "C")


def test_stops_at_destination_without_examining_its_edges():
    # B's only other edge is negative; settling B must end the search.
    g = _graph("ABC", [("A", "B", 1.0), ("B", "C", -1.0)])

    result = DijkstraPathEngine().calculate_path(g, "A", "B")

    assert result.path_found
    assert result.node_path == ["A", "B"]
    assert result.total_cost == 1.0


@pytest.mark.parametrize("weight", [math.nan, -math.inf])
def test_nan_or_negative_infinite_weight_raises(weight):
    g = _graph("AB", [("A", "B", weight)])

    with pytest.raises(ValueError, match="non-negative"):
        DijkstraPathEngine().calculate_path(g, "A", "B")


def test_parallel_edges_and_self_loop():
    g = _graph(
        "AB",
        [("A", "B", 7.0), ("A", "A", 0.0), ("B", "A", 2.0), ("A", "B", 3.0)],
    )

    result = DijkstraPathEngine().calculate_path(g, "A", "B")

    assert result.total_cost == 2.0
    assert result.node_path == ["A", "B"]


def test_zero_weight_edges():
    g = _graph("ABC", [("A", "B", 0.0), ("B", "C", 0.0)])

    result = DijkstraPathEngine().calculate_path(g, "A", "C")

    assert result.total_cost == 0.0
    assert result.node_path == ["A", "B", "C"]


def test_dangling_edge_ignored():
    g = _graph("AB", [("A", "Ghost", 1.0), ("Ghost", "B", 1.0), ("A", "B", 5.0)])

    result = DijkstraPathEngine().calculate_path(g, "A", "B")

    assert result.total_cost == 5.0
    assert result.node_path == ["A", "B"]


def test_position_does_not_affect_result():
    g1 = _graph("ABC", [("A", "B", 1.0), ("B", "C", 1.0), ("A", "C", 3.0)])
    g2 = GraphModel(
        [Node(n.id, n.name, x=100.0 * i, y=-7.0 * i) for i, n in enumerate(g1.nodes())],
        g1.edges(),
    )

    r1 = DijkstraPathEngine().calculate_path(g1, "A", "C")
    r2 = DijkstraPathEngine().calculate_path(g2, "A", "C")

    assert (r1.node_path, r1.total_cost) == (r2.node_path, r2.total_cost)


def test_cost_matches_path_on_grid():
    # 4x4 grid with varying weights.
    ids = [(r, c) for r in range(4) for c in range(4)]
    edges = []
    for r, c in ids:
        if c < 3:
            edges.append(((r, c), (r, c + 1), float((r * 3 + c) % 5 + 1)))
        if r < 3:
            edges.append(((r + 1, c), (r, c), float((r + c * 2) % 4 + 1)))
    g = _graph(ids, edges)
    engine = DijkstraPathEngine()

    for dest in ids:
        result = engine.calculate_path(g, (0, 0), dest)
        assert result.path_found
        assert result.node_path[0] == (0, 0)
        assert result.node_path[-1] == dest
        assert result.total_cost == pytest.approx(_path_cost(g, result.node_path))


def test_graph_not_mutated():
    g = _graph("ABC", [("A", "B", 1.0), ("B", "C", 1.0)])
    nodes_before = list(g.nodes())
    edges_before = list(g.edges())

    DijkstraPathEngine().calculate_path(g, "A", "C")

    assert list(g.nodes()) == nodes_before
    assert list(g.edges()) == edges_before


def test_reconstruct_path_walks_back_to_source():
    prev = {"B": "A", "C": "B"}
    assert reconstruct_path(prev, "A", "C") == ["A", "B", "C"]
    assert reconstruct_path(prev, "A", "A") == ["A"]


def test_reconstruct_path_broken_chain_is_empty():
    assert reconstruct_path({"C": "B"}, "A", "C") == []


def test_reconstruct_path_cycle_is_empty():
    assert reconstruct_path({"B": "C", "C": "B"}, "A", "C") == []


def test_debug_log_reports_node_and_edge_counts(caplog):
    g = _graph("ABC", [("A", "B", 1.0), ("B", "C", 1.0), ("C", "C", 2.0)])

    with caplog.at_level(logging.DEBUG, logger="dijkstra_engine"):
        DijkstraPathEngine().calculate_path(g, "A", "C")

    assert "over 3 nodes, 3 edges" in caplog.text
