"""
Pure Python Shortest Path Algorithm
===================================
Heap-based Dijkstra over the Graph Store, used by both the single-pair and
the one-to-all searches.
"""

import heapq
import itertools
import logging
from typing import Dict, Optional, Tuple

from sp_engine.cost import ABORT, CostEvaluator, evaluate_edge
from sp_engine.graph import Direction, Edge, Graph, TraversalFilter

logger = logging.getLogger(__name__)

# vertex_id -> (predecessor edge, parent vertex id, evaluated edge cost);
# the start maps to (None, None, 0.0)
Predecessors = Dict[int, Tuple[Optional[Edge], Optional[int], float]]


def dijkstra(graph: Graph, start: int, direction: Direction, evaluator: CostEvaluator,
             target: Optional[int] = None, traversal_filter: Optional[TraversalFilter] = None,
             initial_cost: float = 0.0) -> Tuple[Dict[int, float], Predecessors]:
    """
    Settle vertices in order of accumulated cost starting from ``start``.

    Each candidate edge is evaluated with the accumulated cost of the vertex
    being settled; ABORT drops the edge for that branch only. A settled
    vertex is never revisited. Among equal-cost labels the first one
    discovered wins, and neighbours are expanded in edge-id order, so the
    result is deterministic.

    Args:
        graph: Graph to search.
        start: Start vertex id (must exist).
        direction: Traversal direction.
        evaluator: Cost evaluator.
        target: Stop as soon as this vertex is settled. None runs to completion.
        traversal_filter: Edges/vertices to ignore during this call.
        initial_cost: Accumulated cost already carried at ``start``.

    Returns:
        (settled, predecessors): final cost per settled vertex and the edge and
        parent through which each was reached, with that edge's cost.
    """
    settled: Dict[int, float] = {}
    predecessors: Predecessors = {}
    best: Dict[int, float] = {start: initial_cost}
    best_pred: Predecessors = {start: (None, None, 0.0)}
    counter = itertools.count()
    heap = [(initial_cost, next(counter), start)]

    while heap:
        cost, _, vid = heapq.heappop(heap)
        if vid in settled:
            continue
        settled[vid] = cost
        predecessors[vid] = best_pred[vid]
        if vid == target:
            break

        for edge, other in graph.neighbors(vid, direction, traversal_filter):
            if other in settled:
                continue
            step = evaluate_edge(evaluator, edge, cost)
            if step is ABORT:
                continue
            new_cost = cost + step
            if other not in best or new_cost < best[other]:
                best[other] = new_cost
                best_pred[other] = (edge, vid, step)
                heapq.heappush(heap, (new_cost, next(counter), other))

    logger.debug(f"Dijkstra from {start}: settled {len(settled)} vertices")
    return settled, predecessors


def walk_back(predecessors: Predecessors, target: int):
    """
    Follow predecessor links from ``target`` back to the search start.

    Returns:
        (vertex_ids, edges, edge_costs) ordered from the start to ``target``.
    """
    vertex_ids = [target]
    edges = []
    edge_costs = []
    edge, parent, step = predecessors[target]
    while edge is not None:
        edges.append(edge)
        edge_costs.append(step)
        vertex_ids.append(parent)
        edge, parent, step = predecessors[parent]
    vertex_ids.reverse()
    edges.reverse()
    edge_costs.reverse()
    return vertex_ids, edges, edge_costs
