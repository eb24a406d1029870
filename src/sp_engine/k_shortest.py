"""
Top-K Shortest Simple Paths
===========================
Yen-style deviation search layered on the single-pair search.

For the most recently accepted path, every vertex except the last is tried
as a spur vertex. The edges that accepted paths sharing the same root take
out of the spur vertex are suppressed, as are the root vertices before the
spur, and a fresh single-pair search from the spur to the end completes a
candidate. Suppression is a per-call TraversalFilter; the Graph itself is
never modified.
"""

import heapq
import itertools
import logging
from typing import List

from sp_engine import logging_config as log_conf
from sp_engine.cost import CostEvaluator
from sp_engine.graph import Direction, Graph, TraversalFilter
from sp_engine.paths import WeightedPath, find_path

logger = logging.getLogger(__name__)


def _splice(root: WeightedPath, i: int, spur: WeightedPath) -> WeightedPath:
    return WeightedPath(
        vertices=root.vertices[:i] + spur.vertices,
        edges=root.edges[:i] + spur.edges,
        edge_costs=root.edge_costs[:i] + spur.edge_costs,
        weight=spur.weight,
    )


def k_shortest_paths(graph: Graph, start: int, end: int, k: int, evaluator: CostEvaluator,
                     direction=Direction.OUTGOING) -> List[WeightedPath]:
    """
    Return up to ``k`` loopless paths from ``start`` to ``end`` by increasing weight.

    Args:
        graph: Graph to search.
        start: Start vertex id.
        end: End vertex id.
        k: Maximum number of paths; 0 returns an empty list.
        evaluator: Cost evaluator, applied the same way as in shortest_path.
        direction: Traversal direction for every search in this call.

    Returns:
        Accepted paths in non-decreasing weight order, ties in acceptance
        order. Fewer than ``k`` when the graph runs out of simple paths.

    Raises:
        VertexNotFoundError: start or end is not in the graph.
        ValueError: k is negative.
    """
    direction = Direction.parse(direction)
    graph.require(start, end)
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if k == 0:
        return []

    first = find_path(graph, start, end, direction, evaluator)
    if first is None:
        return []

    accepted = [first]
    seen = {tuple(first.edge_ids)}
    candidates = []
    counter = itertools.count()

    while len(accepted) < k:
        last = accepted[-1]
        for i in range(last.length):
            spur_id = last.vertex_ids[i]
            root_edges = last.edge_ids[:i]

            excluded_edges = set()
            for path in accepted:
                if path.length > i and path.edge_ids[:i] == root_edges:
                    excluded_edges.add(path.edges[i].edge_id)
            traversal_filter = TraversalFilter(
                excluded_edges=frozenset(excluded_edges),
                excluded_vertices=frozenset(last.vertex_ids[:i]),
            )

            root_cost = sum(last.edge_costs[:i])
            spur = find_path(graph, spur_id, end, direction, evaluator,
                             traversal_filter=traversal_filter, initial_cost=root_cost)
            if spur is None:
                continue

            candidate = _splice(last, i, spur)
            key = tuple(candidate.edge_ids)
            if key in seen:
                continue
            seen.add(key)
            heapq.heappush(candidates, (candidate.weight, next(counter), candidate))
            if log_conf.VERBOSE:
                logger.debug(f"Candidate via spur {spur_id}: {candidate.vertex_ids} "
                             f"weight {candidate.weight}")

        if not candidates:
            break
        _, _, best = heapq.heappop(candidates)
        accepted.append(best)

    logger.debug(f"Top-k {start} -> {end}: accepted {len(accepted)} of {k} requested paths")
    return accepted
