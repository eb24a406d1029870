#!/usr/bin/env python3
"""
Compare PURE and SCIPY one-to-all results.

Runs both backends from every vertex of a profile's graph and joins the
cost tables in DuckDB to report exact matches, cost mismatches and vertices
reachable in only one of the results.

Usage:
    python scripts/compare_sp_methods.py [profile]
"""

import sys
from pathlib import Path

import duckdb
import pandas as pd

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from sp_engine import evaluator_from_name, shortest_paths_one_to_all
from sp_engine.cost import is_static
from sp_engine.config_loader import load_config
from sp_engine.loaders import initialize_duckdb, load_csv_tables, load_graph


def collect(graph, direction, evaluator, method: str) -> pd.DataFrame:
    """Cost of every (source, vertex) pair for one backend."""
    rows = []
    for source in graph.vertex_ids():
        forest = shortest_paths_one_to_all(graph, source, direction, evaluator, method=method)
        rows.extend((source, vid, entry.cost) for vid, entry in forest.items())
    return pd.DataFrame(rows, columns=["source", "vertex", "cost"])


def main():
    profile = sys.argv[1] if len(sys.argv) > 1 else "default"
    cfg = load_config(profile)

    con = initialize_duckdb()
    load_csv_tables(con, cfg.input.vertices_file, cfg.input.edges_file, cfg.workspace)
    graph = load_graph(con, cfg.workspace)

    evaluator = evaluator_from_name(cfg.query.cost, cfg.workspace.weight_column,
                                    cfg.query.max_segment_distance)
    if not is_static(evaluator):
        print(f"Cost '{cfg.query.cost}' depends on the path so far; SCIPY cannot run it.")
        sys.exit(1)

    print(f"Running PURE one-to-all from {graph.vertex_count} sources...")
    pure_df = collect(graph, cfg.query.direction, evaluator, "PURE")
    print(f"Running SCIPY one-to-all from {graph.vertex_count} sources...")
    scipy_df = collect(graph, cfg.query.direction, evaluator, "SCIPY")

    con.register("pure_df", pure_df)
    con.register("scipy_df", scipy_df)

    print("\n" + "="*60)
    print("COMPARISON RESULTS")
    print("="*60)
    print(f"  PURE rows:  {len(pure_df):,}")
    print(f"  SCIPY rows: {len(scipy_df):,}")

    exact = con.execute("""
        SELECT count(*) FROM pure_df p
        JOIN scipy_df s USING (source, vertex)
        WHERE ABS(p.cost - s.cost) < 1e-9
    """).fetchone()[0]
    print(f"\n  Exact matches: {exact:,}")

    mismatches = con.execute("""
        SELECT p.source, p.vertex, p.cost AS pure_cost, s.cost AS scipy_cost
        FROM pure_df p
        JOIN scipy_df s USING (source, vertex)
        WHERE ABS(p.cost - s.cost) >= 1e-9
        ORDER BY p.source, p.vertex
    """).df()
    print(f"  Cost mismatches: {len(mismatches):,}")
    if len(mismatches) > 0:
        print(mismatches.head(20))

    only_one = con.execute("""
        (SELECT source, vertex FROM pure_df
        EXCEPT
        SELECT source, vertex FROM scipy_df)
        UNION ALL
        (SELECT source, vertex FROM scipy_df
        EXCEPT
        SELECT source, vertex FROM pure_df)
    """).df()
    print(f"  Reachable in only one result: {len(only_one):,}")

    con.close()
    sys.exit(0 if len(mismatches) == 0 and len(only_one) == 0 else 1)


if __name__ == "__main__":
    main()
