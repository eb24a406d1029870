"""
Shortest Path Queries
=====================
Single-pair shortest path and single-source shortest-path forest.

Both searches treat the Graph as read-only input and return fresh result
objects that reference vertices and edges by value or identifier only.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from sp_engine.cost import CostEvaluator, is_static
from sp_engine.graph import Direction, Edge, Graph, TraversalFilter, Vertex
from sp_engine.sp_methods.pure import dijkstra, walk_back
from sp_engine.sp_methods.scipy import dijkstra_scipy

logger = logging.getLogger(__name__)

SP_METHODS = ("PURE", "SCIPY")


@dataclass(frozen=True)
class WeightedPath:
    """
    An ordered walk through the graph with its cumulative evaluated cost.

    Attributes:
        vertices: Vertices in traversal order (one more than edges).
        edges: Edges in traversal order.
        edge_costs: Evaluated cost of each edge as it was traversed.
        weight: Cumulative cost of the path.
    """

    vertices: Tuple[Vertex, ...]
    edges: Tuple[Edge, ...]
    edge_costs: Tuple[float, ...]
    weight: float

    @property
    def length(self) -> int:
        return len(self.edges)

    @property
    def vertex_ids(self) -> List[int]:
        return [v.vertex_id for v in self.vertices]

    @property
    def edge_ids(self) -> List[int]:
        return [e.edge_id for e in self.edges]

    @property
    def start(self) -> int:
        return self.vertices[0].vertex_id

    @property
    def end(self) -> int:
        return self.vertices[-1].vertex_id

    @property
    def is_simple(self) -> bool:
        ids = self.vertex_ids
        return len(ids) == len(set(ids))


@dataclass(frozen=True)
class ForestEntry:
    cost: float
    edge_id: Optional[int]
    parent_id: Optional[int]


class ShortestPathForest(Mapping):
    """
    Result of a one-to-all search: reachable vertex id -> ForestEntry.

    The source maps to cost 0 with no predecessor. Unreachable vertices are
    simply absent.
    """

    def __init__(self, source: int, direction: Direction, entries: Dict[int, ForestEntry]):
        self.source = source
        self.direction = direction
        self._entries = entries

    def __getitem__(self, vertex_id) -> ForestEntry:
        return self._entries[vertex_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self):
        return f"ShortestPathForest(source={self.source}, reachable={len(self)})"

    def cost(self, vertex_id) -> Optional[float]:
        entry = self._entries.get(vertex_id)
        return entry.cost if entry is not None else None

    def edge_ids(self) -> List[int]:
        """Edges that lie on at least one shortest path, in edge-id order."""
        return sorted(e.edge_id for e in self._entries.values() if e.edge_id is not None)


def _to_path(graph: Graph, settled, predecessors, end: int) -> WeightedPath:
    vertex_ids, edges, edge_costs = walk_back(predecessors, end)
    return WeightedPath(
        vertices=tuple(graph.vertex(vid) for vid in vertex_ids),
        edges=tuple(edges),
        edge_costs=tuple(edge_costs),
        weight=settled[end],
    )


def find_path(graph: Graph, start: int, end: int, direction: Direction,
              evaluator: CostEvaluator, traversal_filter: Optional[TraversalFilter] = None,
              initial_cost: float = 0.0) -> Optional[WeightedPath]:
    """
    Single-pair search without argument validation.

    ``initial_cost`` seeds the accumulated cost at ``start`` (the top-k search
    uses it to continue from a root path); the returned weight includes it.
    """
    if start == end:
        vertex = graph.vertex(start)
        return WeightedPath((vertex,), (), (), initial_cost)

    settled, predecessors = dijkstra(graph, start, direction, evaluator, target=end,
                                     traversal_filter=traversal_filter,
                                     initial_cost=initial_cost)
    if end not in settled:
        return None
    return _to_path(graph, settled, predecessors, end)


def shortest_path(graph: Graph, start: int, end: int, direction,
                  evaluator: CostEvaluator) -> Optional[WeightedPath]:
    """
    Find the cheapest path from ``start`` to ``end``.

    Args:
        graph: Graph to search.
        start: Start vertex id.
        end: End vertex id.
        direction: OUTGOING, INCOMING or ANY (Direction or string).
        evaluator: Cost evaluator, called as ``evaluator(edge, accumulated_cost)``.

    Returns:
        The path, a zero-length path when start == end, or None when the
        vertices exist but are not connected.

    Raises:
        VertexNotFoundError: start or end is not in the graph.
        InvalidDirectionError: direction is not recognised.
        NegativeCostError: the evaluator returned a negative cost.
    """
    direction = Direction.parse(direction)
    graph.require(start, end)
    path = find_path(graph, start, end, direction, evaluator)
    if path is None:
        logger.debug(f"No path from {start} to {end} ({direction.value})")
    return path


def shortest_paths_one_to_all(graph: Graph, start: int, direction, evaluator: CostEvaluator,
                              method: str = "PURE") -> ShortestPathForest:
    """
    Run Dijkstra from ``start`` until the queue is empty.

    Args:
        graph: Graph to search.
        start: Source vertex id.
        direction: OUTGOING, INCOMING or ANY.
        evaluator: Cost evaluator.
        method: PURE (heap search, any evaluator) or SCIPY
            (scipy.sparse.csgraph, evaluators with ``static = True`` only).

    Returns:
        ShortestPathForest with the final cost and predecessor edge of every
        reachable vertex.
    """
    direction = Direction.parse(direction)
    graph.require(start)

    method = method.upper()
    if method == "PURE":
        settled, predecessors = dijkstra(graph, start, direction, evaluator)
    elif method == "SCIPY":
        if not is_static(evaluator):
            raise ValueError(f"SCIPY method needs a static evaluator, got {evaluator!r}")
        settled, predecessors = dijkstra_scipy(graph, start, direction, evaluator)
    else:
        raise ValueError(f"Unknown sp method {method!r}; expected one of {SP_METHODS}")

    entries = {}
    for vid, cost in settled.items():
        edge, parent, _ = predecessors[vid]
        entries[vid] = ForestEntry(cost, edge.edge_id if edge is not None else None, parent)
    logger.debug(f"One-to-all from {start} ({method}): {len(entries)} reachable vertices")
    return ShortestPathForest(start, direction, entries)


def reconstruct_path(forest: ShortestPathForest, target_id) -> Optional[List[int]]:
    """
    Walk predecessor links from ``target_id`` back to the forest source.

    Returns:
        Edge ids ordered from the source to the target, an empty list for the
        source itself, or None if the target is not in the forest.
    """
    if target_id not in forest:
        return None
    edge_ids = []
    entry = forest[target_id]
    while entry.edge_id is not None:
        edge_ids.append(entry.edge_id)
        entry = forest[entry.parent_id]
    edge_ids.reverse()
    return edge_ids
