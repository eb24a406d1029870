"""Tests for YAML profile loading."""

from pathlib import Path

import pytest

from sp_engine import InvalidDirectionError
from sp_engine.config_loader import (
    CONFIG_DIR,
    Config,
    deep_merge,
    dict_to_config,
    list_profiles,
    load_config,
)


@pytest.fixture
def config_dir(tmp_path):
    d = tmp_path / "config"
    d.mkdir()
    (d / "default.yaml").write_text(
        "input:\n"
        "  dataset: sample\n"
        "workspace:\n"
        "  weight_column: DIST_KM\n"
        "query:\n"
        "  direction: ANY\n"
        "  k: 3\n"
        "logging:\n"
        "  level: INFO\n"
    )
    (d / "small.yaml").write_text(
        "input:\n"
        "  dataset: small\n"
        "query:\n"
        "  k: 5\n"
        "  unknown_key: ignored\n"
    )
    return d


class TestMerge:
    def test_deep_merge(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = deep_merge(base, {"a": {"y": 3}, "c": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
        assert base == {"a": {"x": 1, "y": 2}, "b": 1}

    def test_dict_to_config_ignores_unknown(self):
        cfg = dict_to_config({"query": {"k": 9, "nope": 1}, "extra": {"a": 1}})
        assert cfg.query.k == 9
        assert not hasattr(cfg.query, "nope")


class TestLoadConfig:
    def test_default_profile(self, config_dir):
        cfg = load_config("default", config_dir=config_dir)
        assert cfg.query.direction == "ANY"
        assert cfg.workspace.weight_column == "DIST_KM"
        assert cfg.input.vertices_file == str(config_dir.parent / "data" / "sample_vertices.csv")

    def test_profile_merges_over_default(self, config_dir):
        cfg = load_config("small", config_dir=config_dir)
        assert cfg.query.k == 5
        assert cfg.query.direction == "ANY"
        assert cfg.input.edges_file.endswith("small_edges.csv")
        assert Path(cfg.logging.log_dir).is_absolute()

    def test_missing_profile(self, config_dir):
        with pytest.raises(FileNotFoundError):
            load_config("nope", config_dir=config_dir)

    def test_invalid_direction(self, config_dir):
        (config_dir / "bad.yaml").write_text("query:\n  direction: SIDEWAYS\n")
        with pytest.raises(InvalidDirectionError):
            load_config("bad", config_dir=config_dir)

    def test_max_segment_needs_distance(self, config_dir):
        (config_dir / "seg.yaml").write_text("query:\n  cost: MAX_SEGMENT\n")
        with pytest.raises(ValueError):
            load_config("seg", config_dir=config_dir)

    def test_list_profiles(self, config_dir):
        assert list_profiles(config_dir) == ["default", "small"]

    def test_bundled_profiles_load(self):
        for name in list_profiles(CONFIG_DIR):
            cfg = load_config(name)
            assert isinstance(cfg, Config)
            assert Path(cfg.input.vertices_file).exists()
