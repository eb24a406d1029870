"""
sp_engine
=========
In-memory weighted shortest-path engine.

Public API:
    build_graph: Build an immutable Graph from Vertex and Edge records.
    shortest_path: Single-pair shortest path.
    shortest_paths_one_to_all: Single-source shortest-path forest.
    k_shortest_paths: Top-k shortest simple paths (Yen).
    reconstruct_path: Edge ids from a forest source to a target.
    Direction, Vertex, Edge, Graph, TraversalFilter: Graph Store types.
    WeightedPath, ShortestPathForest, ForestEntry: Query results.
    ABORT, HopCount, EdgeWeight, MaxSegment, IncreasingSegments: Cost evaluation.
"""

from sp_engine.cost import (
    ABORT,
    EdgeWeight,
    HopCount,
    IncreasingSegments,
    MaxSegment,
    evaluator_from_name,
)
from sp_engine.errors import (
    DuplicateIdentifierError,
    GraphEngineError,
    InvalidDirectionError,
    InvalidEdgeReferenceError,
    NegativeCostError,
    VertexNotFoundError,
)
from sp_engine.graph import Direction, Edge, Graph, TraversalFilter, Vertex, build_graph
from sp_engine.k_shortest import k_shortest_paths
from sp_engine.paths import (
    ForestEntry,
    ShortestPathForest,
    WeightedPath,
    reconstruct_path,
    shortest_path,
    shortest_paths_one_to_all,
)

__all__ = [
    "ABORT",
    "EdgeWeight",
    "HopCount",
    "IncreasingSegments",
    "MaxSegment",
    "evaluator_from_name",
    "GraphEngineError",
    "DuplicateIdentifierError",
    "InvalidDirectionError",
    "InvalidEdgeReferenceError",
    "NegativeCostError",
    "VertexNotFoundError",
    "Direction",
    "Edge",
    "Graph",
    "TraversalFilter",
    "Vertex",
    "build_graph",
    "k_shortest_paths",
    "ForestEntry",
    "ShortestPathForest",
    "WeightedPath",
    "reconstruct_path",
    "shortest_path",
    "shortest_paths_one_to_all",
]
