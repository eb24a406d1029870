"""Shared graphs for the sp_engine tests."""

import itertools

import pytest

from sp_engine import Edge, Vertex, build_graph


def make_graph(vertex_ids, edges):
    """Build a graph from ids and (edge_id, source, target, weight) tuples."""
    return build_graph(
        [Vertex(vid, {"name": f"v{vid}"}) for vid in vertex_ids],
        [Edge(eid, s, t, w) for eid, s, t, w in edges],
    )


def all_simple_paths(graph, start, end, evaluator, direction="OUTGOING"):
    """Brute-force every simple path as (weight, edge_ids), for small graphs."""
    results = []

    def walk(vid, visited, edge_ids, cost):
        if vid == end:
            results.append((cost, tuple(edge_ids)))
            return
        for edge, other in graph.neighbors(vid, direction):
            if other in visited:
                continue
            step = evaluator(edge, cost)
            walk(other, visited | {other}, edge_ids + [edge.edge_id], cost + step)

    walk(start, {start}, [], 0.0)
    return sorted(results)


@pytest.fixture
def triangle():
    """
    1 --5--> 2 --5--> 3, plus a direct 1 --20--> 3, and an isolated vertex 4.
    """
    return make_graph([1, 2, 3, 4], [(10, 1, 2, 5.0), (11, 2, 3, 5.0), (12, 1, 3, 20.0)])


@pytest.fixture
def grid():
    """
    Small directed network with several competing routes from 1 to 6.

        1 -> 2 (2), 1 -> 3 (5), 2 -> 3 (1), 2 -> 4 (4), 3 -> 4 (2),
        3 -> 5 (3), 4 -> 6 (1), 5 -> 6 (5), 4 -> 5 (1)
    """
    return make_graph(
        [1, 2, 3, 4, 5, 6],
        [
            (1, 1, 2, 2.0),
            (2, 1, 3, 5.0),
            (3, 2, 3, 1.0),
            (4, 2, 4, 4.0),
            (5, 3, 4, 2.0),
            (6, 3, 5, 3.0),
            (7, 4, 6, 1.0),
            (8, 5, 6, 5.0),
            (9, 4, 5, 1.0),
        ],
    )


@pytest.fixture
def random_graphs():
    """A handful of deterministic pseudo-random weighted digraphs."""
    graphs = []
    for seed in range(5):
        weights = itertools.cycle([3, 1, 4, 1, 5, 9, 2, 6, 5, 3, 5, 8, 9, 7][seed:] + [2, 7])
        edges = []
        eid = 100
        for s in range(1, 7):
            for t in range(1, 7):
                if s != t and (s * 7 + t * 3 + seed) % 3 != 0:
                    edges.append((eid, s, t, float(next(weights))))
                    eid += 1
        graphs.append(make_graph(range(1, 7), edges))
    return graphs
