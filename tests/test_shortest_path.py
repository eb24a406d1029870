"""Tests for the single-pair shortest path search."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from sp_engine import (
    ABORT,
    EdgeWeight,
    HopCount,
    IncreasingSegments,
    InvalidDirectionError,
    MaxSegment,
    NegativeCostError,
    VertexNotFoundError,
    shortest_path,
)

from conftest import all_simple_paths, make_graph

WEIGHT = EdgeWeight()


class TestScenarios:
    def test_cheaper_two_hop_route(self, triangle):
        path = shortest_path(triangle, 1, 3, "OUTGOING", WEIGHT)
        assert path.vertex_ids == [1, 2, 3]
        assert path.edge_ids == [10, 11]
        assert path.weight == 10.0
        assert path.length == 2
        assert path.edge_costs == (5.0, 5.0)
        assert path.is_simple

    def test_start_equals_end(self, triangle):
        path = shortest_path(triangle, 2, 2, "OUTGOING", WEIGHT)
        assert path.length == 0
        assert path.weight == 0
        assert path.vertex_ids == [2]
        assert path.edges == ()

    def test_start_equals_end_does_not_evaluate(self, triangle):
        def explode(edge, acc):
            raise AssertionError("no edge should be evaluated")

        assert shortest_path(triangle, 1, 1, "ANY", explode).weight == 0

    def test_missing_end(self, triangle):
        with pytest.raises(VertexNotFoundError) as exc:
            shortest_path(triangle, 1, 99, "OUTGOING", WEIGHT)
        assert exc.value.vertex_id == 99

    def test_missing_start(self, triangle):
        with pytest.raises(VertexNotFoundError):
            shortest_path(triangle, 99, 1, "OUTGOING", WEIGHT)

    def test_disconnected_returns_none(self, triangle):
        assert shortest_path(triangle, 1, 4, "OUTGOING", WEIGHT) is None

    def test_bad_direction(self, triangle):
        with pytest.raises(InvalidDirectionError):
            shortest_path(triangle, 1, 3, None, WEIGHT)


class TestDirection:
    def test_outgoing_cannot_go_backwards(self, triangle):
        assert shortest_path(triangle, 3, 1, "OUTGOING", WEIGHT) is None

    def test_incoming_reverses_edges(self, triangle):
        path = shortest_path(triangle, 3, 1, "INCOMING", WEIGHT)
        assert path.vertex_ids == [3, 2, 1]
        assert path.edge_ids == [11, 10]
        assert path.weight == 10.0

    def test_any_uses_both_orientations(self):
        # 1 -> 2 <- 3 is only connected when edge orientation is ignored
        graph = make_graph([1, 2, 3], [(1, 1, 2, 1.0), (2, 3, 2, 1.0)])
        assert shortest_path(graph, 1, 3, "OUTGOING", WEIGHT) is None
        path = shortest_path(graph, 1, 3, "ANY", WEIGHT)
        assert path.vertex_ids == [1, 2, 3]
        assert path.weight == 2.0


class TestEvaluators:
    def test_hop_count_prefers_direct_edge(self, triangle):
        path = shortest_path(triangle, 1, 3, "OUTGOING", HopCount())
        assert path.vertex_ids == [1, 3]
        assert path.weight == 1.0

    def test_abort_prunes_edge(self, triangle):
        no_edge_11 = lambda e, acc: ABORT if e.edge_id == 11 else e.weight
        path = shortest_path(triangle, 1, 3, "OUTGOING", no_edge_11)
        assert path.vertex_ids == [1, 3]
        assert path.weight == 20.0
        # Still there for an evaluator that does not abort
        assert shortest_path(triangle, 1, 3, "OUTGOING", WEIGHT).weight == 10.0

    def test_abort_everything_means_no_path(self, triangle):
        assert shortest_path(triangle, 1, 3, "OUTGOING", lambda e, acc: ABORT) is None

    def test_max_segment(self, triangle):
        path = shortest_path(triangle, 1, 3, "OUTGOING", MaxSegment(10))
        assert path.vertex_ids == [1, 2, 3]
        assert shortest_path(triangle, 1, 3, "OUTGOING", MaxSegment(4)) is None

    def test_increasing_segments(self):
        # 1 -(2)-> 2 -(5)-> 4 is allowed (5 > 2), 1 -(2)-> 3 -(1)-> 4 is not (1 <= 2)
        graph = make_graph([1, 2, 3, 4], [(1, 1, 2, 2.0), (2, 1, 3, 2.0), (3, 3, 4, 1.0),
                                          (4, 2, 4, 5.0)])
        path = shortest_path(graph, 1, 4, "OUTGOING", IncreasingSegments())
        assert path.vertex_ids == [1, 2, 4]
        assert path.weight == 7.0
        assert shortest_path(graph, 1, 4, "OUTGOING", WEIGHT).vertex_ids == [1, 3, 4]

    def test_accumulated_cost_is_passed(self, triangle):
        seen = []

        def recording(edge, acc):
            seen.append((edge.edge_id, acc))
            return edge.weight

        shortest_path(triangle, 1, 3, "OUTGOING", recording)
        assert (10, 0.0) in seen
        assert (11, 5.0) in seen

    def test_negative_cost_aborts_search(self, triangle):
        with pytest.raises(NegativeCostError):
            shortest_path(triangle, 1, 3, "OUTGOING", lambda e, acc: -e.weight)

    def test_zero_cost_edges(self):
        graph = make_graph([1, 2, 3], [(1, 1, 2, 0.0), (2, 2, 3, 0.0), (3, 1, 3, 1.0)])
        path = shortest_path(graph, 1, 3, "OUTGOING", WEIGHT)
        assert path.vertex_ids == [1, 2, 3]
        assert path.weight == 0.0


class TestDeterminism:
    def test_parallel_edges_pick_cheapest(self):
        graph = make_graph([1, 2], [(1, 1, 2, 3.0), (2, 1, 2, 1.0)])
        assert shortest_path(graph, 1, 2, "OUTGOING", WEIGHT).edge_ids == [2]

    def test_equal_cost_parallel_edges_lowest_id_wins(self):
        graph = make_graph([1, 2], [(7, 1, 2, 1.0), (3, 1, 2, 1.0)])
        assert shortest_path(graph, 1, 2, "OUTGOING", WEIGHT).edge_ids == [3]

    def test_equal_cost_routes_first_discovered_wins(self):
        # 1 -> 2 -> 4 and 1 -> 3 -> 4 both cost 2; vertex 2 is discovered first
        graph = make_graph([1, 2, 3, 4], [(1, 1, 2, 1.0), (2, 1, 3, 1.0), (3, 2, 4, 1.0),
                                          (4, 3, 4, 1.0)])
        for _ in range(3):
            assert shortest_path(graph, 1, 4, "OUTGOING", WEIGHT).vertex_ids == [1, 2, 4]


class TestProperties:
    def test_weight_is_lower_bound(self, random_graphs):
        for graph in random_graphs:
            for start in graph.vertex_ids():
                for end in graph.vertex_ids():
                    path = shortest_path(graph, start, end, "OUTGOING", WEIGHT)
                    brute = all_simple_paths(graph, start, end, WEIGHT)
                    if not brute:
                        assert path is None
                        continue
                    assert path.weight == pytest.approx(brute[0][0])
                    assert all(path.weight <= w + 1e-9 for w, _ in brute)

    def test_concurrent_queries_share_graph(self, grid):
        expected = shortest_path(grid, 1, 6, "OUTGOING", WEIGHT)
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: shortest_path(grid, 1, 6, "OUTGOING", WEIGHT),
                                    range(20)))
        assert all(r == expected for r in results)
        assert expected.weight == 6.0
