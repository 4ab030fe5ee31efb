"""Tests for the configuration system."""

import json

import pytest
from pydantic import ValidationError

from libero_transfer_picker.config.settings import (
    LiberoConfig,
    LineupConfig,
    OptimizationConfig,
    SeasonConfig,
    load_config,
)
from libero_transfer_picker.domain.models.transfer_plan import SelectionStrategy


class TestDefaults:
    def test_default_values(self):
        cfg = LiberoConfig()

        assert cfg.optimization.budget_cap == 42_000_000
        assert cfg.optimization.max_transfers == 4
        assert cfg.optimization.candidate_pool_size == 50
        assert cfg.optimization.default_strategy == SelectionStrategy.GREEDY
        assert cfg.season.source_range == (1, 17)
        assert cfg.season.target_range == (18, 34)
        assert [f.label for f in cfg.lineup.formation_models()] == [
            "3-4-3", "3-5-2", "4-3-3", "4-4-2", "4-5-1", "5-3-2", "5-4-1",
        ]


class TestValidation:
    def test_inverted_season_range(self):
        with pytest.raises(ValidationError):
            SeasonConfig(source_start=10, source_end=5)

    def test_range_beyond_season(self):
        with pytest.raises(ValidationError):
            SeasonConfig(target_end=40)

    def test_bad_formation_label(self):
        with pytest.raises(ValidationError):
            LineupConfig(formations=["4-4-3"])

    def test_unknown_position_cap(self):
        with pytest.raises(ValidationError):
            OptimizationConfig(per_position_cap={"LIBERO": 1})

    def test_negative_transfer_limit(self):
        with pytest.raises(ValidationError):
            OptimizationConfig(max_transfers=-1)


class TestLoadConfig:
    def test_config_data_override(self):
        cfg = load_config(config_data={"optimization": {"max_transfers": 2}})

        assert cfg.optimization.max_transfers == 2
        assert cfg.optimization.budget_cap == 42_000_000

    def test_json_file(self, tmp_path):
        path = tmp_path / "libero.json"
        path.write_text(json.dumps({"season": {"source_end": 15, "target_start": 16}}))

        cfg = load_config(config_path=path)

        assert cfg.season.source_range == (1, 15)
        assert cfg.season.target_range == (16, 34)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("LIBERO_OPTIMIZATION_MAX_TRANSFERS", "3")
        monkeypatch.setenv("LIBERO_OPTIMIZATION_DEFAULT_STRATEGY", "brute_force")
        monkeypatch.setenv("LIBERO_OPTIMIZATION_PER_POSITION_CAP", '{"GOALKEEPER": 1}')

        cfg = load_config()

        assert cfg.optimization.max_transfers == 3
        assert cfg.optimization.default_strategy == SelectionStrategy.BRUTE_FORCE
        assert cfg.optimization.per_position_cap == {"GOALKEEPER": 1}

    def test_environment_wins_over_config_data(self, monkeypatch):
        monkeypatch.setenv("LIBERO_OPTIMIZATION_BUDGET_CAP", "50000000")

        cfg = load_config(config_data={"optimization": {"budget_cap": 30_000_000}})

        assert cfg.optimization.budget_cap == 50_000_000

    def test_invalid_values_fall_back_to_defaults(self):
        cfg = load_config(config_data={"optimization": {"max_transfers": -3}})

        assert cfg.optimization.max_transfers == 4
