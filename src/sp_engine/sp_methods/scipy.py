"""
Scipy-based Shortest Path Algorithm
====================================
Uses scipy.sparse.csgraph.dijkstra for one-to-all searches with evaluators
that do not depend on the accumulated path cost.
"""

import logging
import pandas as pd
import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import dijkstra

from sp_engine.cost import ABORT, CostEvaluator, evaluate_edge
from sp_engine.graph import Direction, Graph

logger = logging.getLogger(__name__)


def edge_cost_frame(graph: Graph, direction: Direction, evaluator: CostEvaluator) -> pd.DataFrame:
    """
    Evaluate every edge once and lay it out as traversal arcs.

    Returns:
        DataFrame with columns ['u', 'v', 'cost', 'edge_id'], one row per
        usable arc, parallel arcs collapsed to the cheapest (lowest edge id
        on ties). Aborted edges and self-loops are dropped.
    """
    rows = []
    for edge in graph.edges():
        if edge.source == edge.target:
            continue
        cost = evaluate_edge(evaluator, edge, 0.0)
        if cost is ABORT:
            continue
        if direction in (Direction.OUTGOING, Direction.ANY):
            rows.append((edge.source, edge.target, cost, edge.edge_id))
        if direction in (Direction.INCOMING, Direction.ANY):
            rows.append((edge.target, edge.source, cost, edge.edge_id))

    arcs = pd.DataFrame(rows, columns=['u', 'v', 'cost', 'edge_id'])
    if len(arcs) == 0:
        return arcs

    arcs = arcs.sort_values('edge_id').reset_index(drop=True)
    # idxmin keeps the first minimum, i.e. the lowest edge id
    return arcs.loc[arcs.groupby(['u', 'v'])['cost'].idxmin()].reset_index(drop=True)


def dijkstra_scipy(graph: Graph, start: int, direction: Direction, evaluator: CostEvaluator):
    """
    One-to-all Dijkstra on a CSR matrix.

    Returns the same (settled, predecessors) shape as the pure search.
    """
    ids = graph.vertex_ids()
    n_nodes = len(ids)
    node_to_idx = pd.Series(data=np.arange(n_nodes), index=ids)

    arcs = edge_cost_frame(graph, direction, evaluator)
    if len(arcs) > 0:
        src_indices = arcs['u'].map(node_to_idx).values
        dst_indices = arcs['v'].map(node_to_idx).values
        costs = arcs['cost'].values.astype(float)
    else:
        src_indices = dst_indices = np.array([], dtype=int)
        costs = np.array([], dtype=float)

    # Explicit zeros stay in the CSR structure and count as zero-cost arcs
    matrix = csr_matrix((costs, (src_indices, dst_indices)), shape=(n_nodes, n_nodes))
    start_idx = int(node_to_idx[start])
    dist, pred = dijkstra(csgraph=matrix, directed=True, indices=start_idx,
                          return_predecessors=True)

    arc_lookup = {
        (u, v): (edge_id, cost)
        for u, v, cost, edge_id in arcs[['u', 'v', 'cost', 'edge_id']].itertuples(index=False)
    }

    settled = {}
    predecessors = {}
    for idx in np.flatnonzero(np.isfinite(dist)):
        vid = ids[idx]
        settled[vid] = float(dist[idx])
        if idx == start_idx:
            predecessors[vid] = (None, None, 0.0)
            continue
        parent = ids[pred[idx]]
        edge_id, cost = arc_lookup[(parent, vid)]
        predecessors[vid] = (graph.edge(edge_id), parent, float(cost))

    logger.debug(f"Scipy one-to-all from {start}: {len(settled)} of {n_nodes} vertices reachable")
    return settled, predecessors
