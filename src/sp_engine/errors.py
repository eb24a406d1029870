"""Exceptions raised by the shortest-path engine."""


class GraphEngineError(Exception):
    """Base exception for graph engine operations."""


class InvalidEdgeReferenceError(GraphEngineError):
    """Raised at build time when an edge points at a vertex that does not exist."""

    def __init__(self, edge_id, vertex_id):
        super().__init__(f"Edge {edge_id} references unknown vertex {vertex_id}")
        self.edge_id = edge_id
        self.vertex_id = vertex_id


class DuplicateIdentifierError(GraphEngineError):
    """Raised at build time when two vertices or two edges share an identifier."""


class VertexNotFoundError(GraphEngineError):
    """Raised when a query names a vertex id that is not in the graph."""

    def __init__(self, vertex_id):
        super().__init__(f"Vertex {vertex_id} not found")
        self.vertex_id = vertex_id


class InvalidDirectionError(GraphEngineError):
    """Raised when a traversal direction is missing or not recognised."""


class NegativeCostError(GraphEngineError):
    """Raised when a cost evaluator returns a negative (or NaN) cost."""

    def __init__(self, edge_id, cost):
        super().__init__(f"Evaluator returned invalid cost {cost!r} for edge {edge_id}")
        self.edge_id = edge_id
        self.cost = cost
