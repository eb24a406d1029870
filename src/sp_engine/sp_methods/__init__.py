"""
SP Methods Package
==================
Contains the Dijkstra implementations behind the path queries.

Available methods:
- PURE: heap-based search over the Graph Store (any evaluator, early exit)
- SCIPY: uses scipy.sparse.csgraph.dijkstra (one-to-all, static evaluators)
"""

from sp_engine.sp_methods.pure import dijkstra, walk_back
from sp_engine.sp_methods.scipy import dijkstra_scipy

__all__ = ['dijkstra', 'walk_back', 'dijkstra_scipy']
