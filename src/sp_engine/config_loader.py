"""
Configuration Loader for the Shortest Path Engine

Loads YAML profiles from the config/ folder, merging them over default.yaml.
Usage:
    from sp_engine.config_loader import load_config
    cfg = load_config("openflights")  # config/openflights.yaml merged with default.yaml
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field, fields
from typing import Optional

from sp_engine.cost import EVALUATORS
from sp_engine.graph import Direction
from sp_engine.paths import SP_METHODS

# Project root (parent of src/)
PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_DIR = Path(os.getenv("SP_ENGINE_CONFIG_DIR", str(PROJECT_ROOT / "config")))


@dataclass
class InputConfig:
    dataset: str = "sample"
    vertices_file: str = "data/{dataset}_vertices.csv"
    edges_file: str = "data/{dataset}_edges.csv"


@dataclass
class WorkspaceConfig:
    """Which tables and columns make up the graph (like a graph workspace)."""
    vertex_table: str = "vertices"
    vertex_key: str = "id"
    edge_table: str = "edges"
    edge_key: str = "id"
    source_column: str = "source"
    target_column: str = "target"
    weight_column: str = "weight"


@dataclass
class QueryConfig:
    start: Optional[int] = None
    end: Optional[int] = None
    direction: str = "OUTGOING"   # OUTGOING, INCOMING, ANY
    k: int = 3
    cost: str = "WEIGHT"          # HOPS, WEIGHT, MAX_SEGMENT, INCREASING
    max_segment_distance: Optional[float] = None
    sp_method: str = "PURE"       # PURE, SCIPY (one-to-all only)


@dataclass
class DuckDBConfig:
    db_path: str = ":memory:"
    memory_limit: str = "4GB"
    threads: Optional[int] = None


@dataclass
class LoggingConfig:
    level: str = "INFO"
    verbose: bool = True
    log_dir: str = "logs"


@dataclass
class Config:
    input: InputConfig = field(default_factory=InputConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    query: QueryConfig = field(default_factory=QueryConfig)
    duckdb: DuckDBConfig = field(default_factory=DuckDBConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def resolve_paths(self, root: Path = PROJECT_ROOT):
        """Resolve {dataset} templates and make relative paths absolute."""
        dataset = self.input.dataset
        self.input.vertices_file = self.input.vertices_file.format(dataset=dataset)
        self.input.edges_file = self.input.edges_file.format(dataset=dataset)

        if not os.path.isabs(self.input.vertices_file):
            self.input.vertices_file = str(root / self.input.vertices_file)
        if not os.path.isabs(self.input.edges_file):
            self.input.edges_file = str(root / self.input.edges_file)
        if not os.path.isabs(self.logging.log_dir):
            self.logging.log_dir = str(root / self.logging.log_dir)
        if self.duckdb.db_path != ":memory:" and not os.path.isabs(self.duckdb.db_path):
            self.duckdb.db_path = str(root / self.duckdb.db_path)

    def validate(self):
        """Fail early on settings the engine would reject at query time."""
        Direction.parse(self.query.direction)
        if self.query.cost.upper() not in EVALUATORS:
            raise ValueError(f"Unknown cost '{self.query.cost}', expected one of {EVALUATORS}")
        if self.query.cost.upper() == "MAX_SEGMENT" and self.query.max_segment_distance is None:
            raise ValueError("cost MAX_SEGMENT requires query.max_segment_distance")
        if self.query.sp_method.upper() not in SP_METHODS:
            raise ValueError(f"Unknown sp_method '{self.query.sp_method}', expected one of {SP_METHODS}")
        if self.query.k < 0:
            raise ValueError(f"query.k must be non-negative, got {self.query.k}")


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml(path: Path) -> dict:
    """Load a YAML file; a missing file is an empty mapping."""
    if not path.exists():
        return {}
    with open(path, 'r') as f:
        return yaml.safe_load(f) or {}


def dict_to_config(data: dict) -> Config:
    """Convert a dictionary to a Config dataclass, ignoring unknown keys."""
    cfg = Config()
    for section in fields(cfg):
        values = data.get(section.name) or {}
        target = getattr(cfg, section.name)
        for k, v in values.items():
            if hasattr(target, k):
                setattr(target, k, v)
    return cfg


def list_profiles(config_dir: Path = None) -> list:
    config_dir = Path(config_dir) if config_dir else CONFIG_DIR
    return sorted(f.stem for f in config_dir.glob("*.yaml"))


def load_config(profile: str = "default", config_dir: Path = None) -> Config:
    """
    Load configuration from a profile.

    Args:
        profile: Name of the config file (without .yaml extension)
                 e.g., "openflights" loads config/openflights.yaml
        config_dir: Directory holding the profiles (defaults to CONFIG_DIR)

    Returns:
        Config object with all settings merged from default.yaml + profile.yaml,
        relative paths resolved against the parent of config_dir.
    """
    config_dir = Path(config_dir) if config_dir else CONFIG_DIR
    default_data = load_yaml(config_dir / "default.yaml")

    if profile != "default":
        profile_path = config_dir / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Config profile not found: {profile_path}")
        merged_data = deep_merge(default_data, load_yaml(profile_path))
    else:
        merged_data = default_data

    cfg = dict_to_config(merged_data)
    cfg.resolve_paths(config_dir.resolve().parent)
    cfg.validate()
    return cfg
