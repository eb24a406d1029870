"""
Graph Store
===========
Immutable in-memory adjacency structure the path searches read from.

The graph is built once from vertex and edge records and never mutated
afterwards, so a single instance can be shared by concurrent queries.
Temporary exclusions (used by the top-k search) are expressed with a
TraversalFilter passed to neighbors(), not by editing the graph.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from sp_engine.errors import (
    DuplicateIdentifierError,
    InvalidDirectionError,
    InvalidEdgeReferenceError,
    VertexNotFoundError,
)

logger = logging.getLogger(__name__)


class Direction(Enum):
    """Which way along an edge a traversal may move."""

    OUTGOING = "OUTGOING"
    INCOMING = "INCOMING"
    ANY = "ANY"

    @classmethod
    def parse(cls, value) -> "Direction":
        """
        Accept a Direction or one of the literals OUTGOING / INCOMING / ANY.

        Matching is case-insensitive. Anything else, including None, raises
        InvalidDirectionError instead of falling back to a default.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise InvalidDirectionError(
            f"Invalid direction {value!r}; expected one of {[d.value for d in cls]}"
        )


@dataclass(frozen=True)
class Vertex:
    vertex_id: int
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, name: str, default=None):
        return self.attributes.get(name, default)


@dataclass(frozen=True)
class Edge:
    """
    A directed edge between two vertices.

    Attributes:
        edge_id: Unique identifier; parallel edges are told apart by it.
        source: Vertex id of the tail.
        target: Vertex id of the head.
        weight: Numeric weight (e.g. distance in km).
        attributes: Auxiliary attributes carried through unchanged.
    """

    edge_id: int
    source: int
    target: int
    weight: float = 1.0
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    def get(self, name: str):
        """Look up an attribute by name; 'weight' falls back to the weight field."""
        if name in self.attributes:
            return self.attributes[name]
        if name == "weight":
            return self.weight
        raise KeyError(f"Edge {self.edge_id} has no attribute {name!r}")

    def other(self, vertex_id: int) -> int:
        """Return the endpoint opposite to vertex_id."""
        return self.target if vertex_id == self.source else self.source


@dataclass(frozen=True)
class TraversalFilter:
    """Edges and vertices a single search must treat as absent."""

    excluded_edges: frozenset = frozenset()
    excluded_vertices: frozenset = frozenset()

    def allows(self, edge: Edge, other_id: int) -> bool:
        return edge.edge_id not in self.excluded_edges and other_id not in self.excluded_vertices


class Graph:
    """
    Read-only vertex/edge store with outgoing and incoming adjacency indices.

    Use build_graph() to construct one; the adjacency lists are sorted by
    edge id so that searches expand neighbours in a stable order.
    """

    def __init__(self, vertices: Dict[int, Vertex], edges: Dict[int, Edge],
                 outgoing: Dict[int, Tuple[Edge, ...]], incoming: Dict[int, Tuple[Edge, ...]]):
        self._vertices = vertices
        self._edges = edges
        self._outgoing = outgoing
        self._incoming = incoming
        self._any = {}
        for vid in vertices:
            merged = {e.edge_id: e for e in outgoing[vid] + incoming[vid]}
            self._any[vid] = tuple(merged[eid] for eid in sorted(merged))

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id) -> bool:
        return vertex_id in self._vertices

    @property
    def vertex_count(self) -> int:
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def vertex_ids(self) -> List[int]:
        return sorted(self._vertices)

    def vertices(self) -> Iterable[Vertex]:
        return self._vertices.values()

    def edges(self) -> Iterable[Edge]:
        return self._edges.values()

    def vertex_exists(self, vertex_id) -> bool:
        return vertex_id in self._vertices

    def vertex(self, vertex_id) -> Vertex:
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise VertexNotFoundError(vertex_id) from None

    def edge(self, edge_id) -> Edge:
        return self._edges[edge_id]

    def require(self, *vertex_ids):
        """Raise VertexNotFoundError for the first id that is not in the graph."""
        for vid in vertex_ids:
            if vid not in self._vertices:
                raise VertexNotFoundError(vid)

    def neighbors(self, vertex_id, direction, traversal_filter: Optional[TraversalFilter] = None
                  ) -> List[Tuple[Edge, int]]:
        """
        List (edge, other_vertex_id) pairs reachable from vertex_id.

        OUTGOING follows edges source -> target, INCOMING follows them
        target -> source, ANY yields the union of both with every edge at
        most once (a self-loop is not repeated).

        Args:
            vertex_id: Vertex to expand.
            direction: Direction or its string literal.
            traversal_filter: Optional per-call exclusions.

        Returns:
            Pairs ordered by edge id.
        """
        direction = Direction.parse(direction)
        if vertex_id not in self._vertices:
            raise VertexNotFoundError(vertex_id)

        if direction is Direction.OUTGOING:
            pairs = [(e, e.target) for e in self._outgoing[vertex_id]]
        elif direction is Direction.INCOMING:
            pairs = [(e, e.source) for e in self._incoming[vertex_id]]
        else:
            pairs = [(e, e.other(vertex_id)) for e in self._any[vertex_id]]

        if traversal_filter is not None:
            pairs = [(e, other) for e, other in pairs if traversal_filter.allows(e, other)]
        return pairs


def build_graph(vertices: Iterable[Vertex], edges: Iterable[Edge]) -> Graph:
    """
    Build an immutable Graph from vertex and edge records.

    Fails with InvalidEdgeReferenceError if any edge names a vertex id that
    was not supplied, and with DuplicateIdentifierError on repeated ids. No
    partial graph is returned on failure.
    """
    vertex_map: Dict[int, Vertex] = {}
    for v in vertices:
        if v.vertex_id in vertex_map:
            raise DuplicateIdentifierError(f"Duplicate vertex id {v.vertex_id}")
        vertex_map[v.vertex_id] = v

    edge_map: Dict[int, Edge] = {}
    outgoing: Dict[int, List[Edge]] = {vid: [] for vid in vertex_map}
    incoming: Dict[int, List[Edge]] = {vid: [] for vid in vertex_map}
    for e in edges:
        if e.edge_id in edge_map:
            raise DuplicateIdentifierError(f"Duplicate edge id {e.edge_id}")
        for endpoint in (e.source, e.target):
            if endpoint not in vertex_map:
                raise InvalidEdgeReferenceError(e.edge_id, endpoint)
        edge_map[e.edge_id] = e
        outgoing[e.source].append(e)
        incoming[e.target].append(e)

    def by_id(e):
        return e.edge_id

    graph = Graph(
        vertex_map,
        edge_map,
        {vid: tuple(sorted(lst, key=by_id)) for vid, lst in outgoing.items()},
        {vid: tuple(sorted(lst, key=by_id)) for vid, lst in incoming.items()},
    )
    logger.debug(f"Built graph: {graph.vertex_count} vertices, {graph.edge_count} edges")
    return graph
