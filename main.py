#!/usr/bin/env python3
"""
Demo runner for the shortest path engine.

Loads a config profile, reads the vertex/edge CSV files through DuckDB,
builds the graph and runs the three queries: one-to-one, one-to-all and
top-k shortest paths.

Usage:
    python main.py                       # Run with config/default.yaml
    python main.py dummy                 # Run with config/dummy.yaml
    python main.py --config short_hops   # Run with config/short_hops.yaml
    python main.py default --start 1 --end 580 --k 5
    python main.py --list                # List available configs
"""

import sys
import argparse
import logging
from pathlib import Path

import pandas as pd

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from sp_engine import (
    InvalidDirectionError,
    VertexNotFoundError,
    evaluator_from_name,
    k_shortest_paths,
    reconstruct_path,
    shortest_path,
    shortest_paths_one_to_all,
)
from sp_engine import logging_config as log_conf
from sp_engine.config_loader import CONFIG_DIR, list_profiles, load_config
from sp_engine.loaders import initialize_duckdb, load_csv_tables, load_graph

logger = logging.getLogger(__name__)

QUERIES = ("one-to-one", "one-to-all", "top-k")


def list_configs():
    """List available configuration profiles."""
    print("Available configuration profiles:")
    for name in list_profiles(CONFIG_DIR):
        print(f"  - {name}")


# ============================================================================
# RESULT PROJECTIONS
# ============================================================================

def path_vertices_frame(path, name_attribute: str = "NAME") -> pd.DataFrame:
    """Vertices of a path with their 1-based order."""
    return pd.DataFrame({
        "ID": path.vertex_ids,
        "NAME": [v.get(name_attribute) for v in path.vertices],
        "VERTEX_ORDER": range(1, len(path.vertices) + 1),
    })


def path_edges_frame(path) -> pd.DataFrame:
    """Edges of a path with endpoints, evaluated cost and 1-based order."""
    return pd.DataFrame({
        "ID": path.edge_ids,
        "SOURCE": [e.source for e in path.edges],
        "TARGET": [e.target for e in path.edges],
        "COST": list(path.edge_costs),
        "EDGE_ORDER": range(1, path.length + 1),
    })


def forest_frame(forest, cost_column: str) -> pd.DataFrame:
    """Reachable vertices with their cumulative cost."""
    return pd.DataFrame(
        [(vid, entry.cost, entry.edge_id) for vid, entry in forest.items()],
        columns=["ID", cost_column, "PREDECESSOR_EDGE"],
    ).sort_values(cost_column, kind="stable")


def top_k_frame(paths) -> pd.DataFrame:
    """One row per (path, edge), like the original top-k output table."""
    rows = []
    for path_id, path in enumerate(paths, start=1):
        for edge_order, edge in enumerate(path.edges, start=1):
            rows.append((path_id, path.length, path.weight, edge.edge_id, edge_order))
    return pd.DataFrame(rows, columns=["PATH_ID", "PATH_LENGTH", "PATH_WEIGHT", "EDGE_ID", "EDGE_ORDER"])


# ============================================================================
# QUERIES
# ============================================================================

def run_one_to_one(graph, cfg, evaluator):
    q = cfg.query
    log_conf.log_section(logger, f"SHORTEST PATH ONE-TO-ONE {q.start} -> {q.end}")
    try:
        path = shortest_path(graph, q.start, q.end, q.direction, evaluator)
    except VertexNotFoundError as e:
        # Soft result for unknown vertices
        logger.warning(f"{e}; reporting an empty path")
        logger.info("Path length: 0, path weight: 0.0")
        return None

    if path is None:
        logger.info(f"No path from {q.start} to {q.end} ({q.direction})")
        return None

    logger.info(f"Path length: {path.length}, path weight: {path.weight:.2f}")
    log_conf.log_frame(logger, path_vertices_frame(path), "Vertices")
    log_conf.log_frame(logger, path_edges_frame(path), "Edges")
    return path


def run_one_to_all(graph, cfg, evaluator):
    q = cfg.query
    log_conf.log_section(logger, f"SHORTEST PATHS ONE-TO-ALL from {q.start} ({q.sp_method})")
    forest = shortest_paths_one_to_all(graph, q.start, q.direction, evaluator, method=q.sp_method)
    cost_column = f"SUM_{cfg.workspace.weight_column}"
    log_conf.log_frame(logger, forest_frame(forest, cost_column), "Reachable vertices")
    logger.info(f"Edges in shortest-path forest: {forest.edge_ids()}")
    if q.end is not None and q.end in forest:
        logger.info(f"Route to {q.end}: edges {reconstruct_path(forest, q.end)}")
    return forest


def run_top_k(graph, cfg, evaluator):
    q = cfg.query
    log_conf.log_section(logger, f"TOP {q.k} SHORTEST PATHS {q.start} -> {q.end}")
    paths = k_shortest_paths(graph, q.start, q.end, q.k, evaluator, direction=q.direction)
    log_conf.log_frame(logger, top_k_frame(paths), "Paths", max_rows=100)
    return paths


def run(cfg, queries=QUERIES):
    """Load the graph for a config and run the requested queries."""
    log_conf.setup_logging(cfg.input.dataset, level=cfg.logging.level,
                           verbose=cfg.logging.verbose, log_dir=cfg.logging.log_dir)

    log_conf.log_section(logger, "CONFIGURATION")
    log_conf.log_dict(logger, {
        "Dataset": cfg.input.dataset,
        "Vertices": cfg.input.vertices_file,
        "Edges": cfg.input.edges_file,
        "Direction": cfg.query.direction,
        "Cost": cfg.query.cost,
        "SP Method": cfg.query.sp_method,
        "k": cfg.query.k,
    })

    con = initialize_duckdb(cfg.duckdb.db_path, cfg.duckdb.memory_limit, cfg.duckdb.threads)
    try:
        with log_conf.timed(logger, "Graph load"):
            load_csv_tables(con, cfg.input.vertices_file, cfg.input.edges_file, cfg.workspace)
            graph = load_graph(con, cfg.workspace)
    finally:
        con.close()

    evaluator = evaluator_from_name(cfg.query.cost, cfg.workspace.weight_column,
                                    cfg.query.max_segment_distance)
    results = {}
    if "one-to-one" in queries:
        with log_conf.timed(logger, "One-to-one"):
            results["one-to-one"] = run_one_to_one(graph, cfg, evaluator)
    if "one-to-all" in queries:
        with log_conf.timed(logger, "One-to-all"):
            results["one-to-all"] = run_one_to_all(graph, cfg, evaluator)
    if "top-k" in queries:
        with log_conf.timed(logger, "Top-k"):
            results["top-k"] = run_top_k(graph, cfg, evaluator)
    return results


def normalize_profile(profile: str) -> str:
    """Normalize profile input to just the profile name."""
    # Handle full paths like "config/dummy.yaml"
    if "/" in profile or "\\" in profile:
        profile = Path(profile).stem
    if profile.endswith(".yaml") or profile.endswith(".yml"):
        profile = Path(profile).stem
    return profile


def main():
    parser = argparse.ArgumentParser(
        description="Shortest path queries with config-based settings",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument("profile", nargs="?", default="default",
                        help="Config profile name (e.g., 'dummy', 'short_hops')")
    parser.add_argument("--config", "-c", help="Alternative way to specify config profile")
    parser.add_argument("--list", "-l", action="store_true", help="List available config profiles")
    parser.add_argument("--start", type=int, help="Override query.start")
    parser.add_argument("--end", type=int, help="Override query.end")
    parser.add_argument("--k", type=int, help="Override query.k")
    parser.add_argument("--direction", help="Override query.direction (OUTGOING, INCOMING, ANY)")
    parser.add_argument("--query", "-q", choices=QUERIES, action="append",
                        help="Run only this query (repeatable)")

    args = parser.parse_args()

    if args.list:
        list_configs()
        return

    profile = normalize_profile(args.config if args.config else args.profile)

    print(f"Loading config: {profile}")
    try:
        cfg = load_config(profile)
    except Exception as e:
        print(f"Error loading config '{profile}': {e}")
        print("\nAvailable configs:")
        list_configs()
        sys.exit(1)

    for name in ("start", "end", "k", "direction"):
        value = getattr(args, name)
        if value is not None:
            setattr(cfg.query, name, value)

    try:
        cfg.validate()
    except (ValueError, InvalidDirectionError) as e:
        print(f"Invalid settings: {e}")
        sys.exit(1)

    run(cfg, args.query or QUERIES)


if __name__ == "__main__":
    main()
