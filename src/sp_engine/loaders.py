"""
Graph Loading
=============
Builds a Graph from tabular data: pandas DataFrames, DuckDB tables, or CSV
files read through DuckDB. Which tables and columns form the graph is
described by a WorkspaceConfig (vertex table + key column; edge table + key,
source and target columns; weight column).
"""

import logging
from typing import Optional, Tuple

import duckdb
import pandas as pd

from sp_engine.config_loader import WorkspaceConfig
from sp_engine.graph import Edge, Graph, Vertex, build_graph

logger = logging.getLogger(__name__)


def initialize_duckdb(db_path: str = ":memory:", memory_limit: Optional[str] = None,
                      threads: Optional[int] = None) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection with optional resource limits."""
    con = duckdb.connect(db_path)
    if memory_limit:
        con.execute(f"SET memory_limit='{memory_limit}'")
    if threads:
        con.execute(f"SET threads={int(threads)}")
    return con


def load_csv_tables(con: duckdb.DuckDBPyConnection, vertices_file: str, edges_file: str,
                    workspace: WorkspaceConfig) -> None:
    """Load vertex and edge CSV files into the workspace tables."""
    con.execute(f"""
        CREATE OR REPLACE TABLE "{workspace.vertex_table}" AS
        SELECT * FROM read_csv_auto('{vertices_file}')
    """)
    con.execute(f"""
        CREATE OR REPLACE TABLE "{workspace.edge_table}" AS
        SELECT * FROM read_csv_auto('{edges_file}')
    """)
    n_vertices = con.sql(f'SELECT count(*) FROM "{workspace.vertex_table}"').fetchone()[0]
    n_edges = con.sql(f'SELECT count(*) FROM "{workspace.edge_table}"').fetchone()[0]
    logger.info(f"Loaded {n_vertices:,} vertices from {vertices_file}")
    logger.info(f"Loaded {n_edges:,} edges from {edges_file}")


def read_workspace(con: duckdb.DuckDBPyConnection, workspace: WorkspaceConfig
                   ) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Fetch the vertex and edge tables as DataFrames."""
    vertices_df = con.execute(
        f'SELECT * FROM "{workspace.vertex_table}" ORDER BY "{workspace.vertex_key}"'
    ).df()
    edges_df = con.execute(
        f'SELECT * FROM "{workspace.edge_table}" ORDER BY "{workspace.edge_key}"'
    ).df()
    return vertices_df, edges_df


def _records(df: pd.DataFrame) -> list:
    # NaN/NaT -> None so attributes hold plain Python values
    return df.astype(object).where(pd.notna(df), None).to_dict("records")


def graph_from_frames(vertices_df: pd.DataFrame, edges_df: pd.DataFrame,
                      workspace: WorkspaceConfig = None) -> Graph:
    """
    Build a Graph from vertex and edge DataFrames.

    Every non-key column becomes an attribute. The weight column feeds
    Edge.weight and is also kept as an attribute under its own name.
    """
    workspace = workspace or WorkspaceConfig()
    if workspace.vertex_key not in vertices_df.columns:
        raise KeyError(f"Vertex table has no column '{workspace.vertex_key}'")
    for column in (workspace.edge_key, workspace.source_column, workspace.target_column,
                   workspace.weight_column):
        if column not in edges_df.columns:
            raise KeyError(f"Edge table has no column '{column}'")

    vertices = []
    for row in _records(vertices_df):
        vertex_id = int(row.pop(workspace.vertex_key))
        vertices.append(Vertex(vertex_id, row))

    edges = []
    missing_weight = 0
    for row in _records(edges_df):
        edge_id = int(row.pop(workspace.edge_key))
        source = int(row.pop(workspace.source_column))
        target = int(row.pop(workspace.target_column))
        weight = row.get(workspace.weight_column)
        if weight is None:
            missing_weight += 1
            weight = float("nan")
        edges.append(Edge(edge_id, source, target, float(weight), row))

    if missing_weight:
        logger.warning(f"{missing_weight} edges have no '{workspace.weight_column}' value")

    graph = build_graph(vertices, edges)
    logger.info(f"Graph built: {graph.vertex_count:,} vertices, {graph.edge_count:,} edges")
    return graph


def load_graph(con: duckdb.DuckDBPyConnection, workspace: WorkspaceConfig = None) -> Graph:
    """Build a Graph from the workspace tables of a DuckDB connection."""
    workspace = workspace or WorkspaceConfig()
    vertices_df, edges_df = read_workspace(con, workspace)
    return graph_from_frames(vertices_df, edges_df, workspace)
