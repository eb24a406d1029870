"""
Cost Evaluators
===============
An evaluator is any callable ``evaluator(edge, accumulated_cost)`` returning
either a non-negative number or ABORT. ABORT means the edge must not be
traversed from the current path state; it is re-checked every time the edge
is offered, so a different partial path may still use it.

Stock evaluators:
- HopCount: every edge costs 1
- EdgeWeight: cost is an edge attribute
- MaxSegment: edge attribute, ABORT above a per-segment limit
- IncreasingSegments: edge attribute, ABORT unless it exceeds the cost so far
"""

import math
from typing import Callable, Optional, Union

from sp_engine.errors import NegativeCostError
from sp_engine.graph import Edge


class _Abort:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABORT"

    def __reduce__(self):
        return (_Abort, ())


ABORT = _Abort()

EdgeCost = Union[float, _Abort]
CostEvaluator = Callable[[Edge, float], EdgeCost]


def evaluate_edge(evaluator: CostEvaluator, edge: Edge, accumulated: float) -> EdgeCost:
    """
    Run an evaluator and enforce its contract.

    Returns the cost as a float, or ABORT. An infinite cost is reported as
    ABORT. Negative or NaN costs raise NegativeCostError.
    """
    cost = evaluator(edge, accumulated)
    if cost is ABORT:
        return ABORT
    cost = float(cost)
    if math.isnan(cost) or cost < 0:
        raise NegativeCostError(edge.edge_id, cost)
    if math.isinf(cost):
        return ABORT
    return cost


def is_static(evaluator: CostEvaluator) -> bool:
    """True if the evaluator declares that it ignores the accumulated cost."""
    return bool(getattr(evaluator, "static", False))


class HopCount:
    """Every edge costs 1, so the path weight is the hop distance."""

    static = True

    def __call__(self, edge: Edge, accumulated: float) -> EdgeCost:
        return 1.0

    def __repr__(self):
        return "HopCount()"


class EdgeWeight:
    """Cost is the value of an edge attribute."""

    static = True

    def __init__(self, attribute: str = "weight"):
        self.attribute = attribute

    def __call__(self, edge: Edge, accumulated: float) -> EdgeCost:
        return edge.get(self.attribute)

    def __repr__(self):
        return f"EdgeWeight({self.attribute!r})"


class MaxSegment:
    """Edge attribute as cost; segments longer than ``limit`` end the traversal."""

    static = True

    def __init__(self, limit: float, attribute: str = "weight"):
        self.limit = limit
        self.attribute = attribute

    def __call__(self, edge: Edge, accumulated: float) -> EdgeCost:
        value = edge.get(self.attribute)
        if value <= self.limit:
            return value
        return ABORT

    def __repr__(self):
        return f"MaxSegment({self.limit!r}, {self.attribute!r})"


class IncreasingSegments:
    """
    Edge attribute as cost, but only when it is strictly greater than the
    accumulated cost of the partial path; otherwise ABORT.
    """

    static = False

    def __init__(self, attribute: str = "weight"):
        self.attribute = attribute

    def __call__(self, edge: Edge, accumulated: float) -> EdgeCost:
        value = edge.get(self.attribute)
        if value > accumulated:
            return value
        return ABORT

    def __repr__(self):
        return f"IncreasingSegments({self.attribute!r})"


EVALUATORS = ("HOPS", "WEIGHT", "MAX_SEGMENT", "INCREASING")


def evaluator_from_name(name: str, attribute: str = "weight",
                        limit: Optional[float] = None) -> CostEvaluator:
    """Build a stock evaluator from its config name."""
    key = name.upper()
    if key == "HOPS":
        return HopCount()
    if key == "WEIGHT":
        return EdgeWeight(attribute)
    if key == "MAX_SEGMENT":
        if limit is None:
            raise ValueError("MAX_SEGMENT evaluator requires a limit")
        return MaxSegment(limit, attribute)
    if key == "INCREASING":
        return IncreasingSegments(attribute)
    raise ValueError(f"Unknown cost evaluator {name!r}; expected one of {EVALUATORS}")
